# apps/analytics/circuit_breaker.py
import hashlib
import time
from enum import Enum
from functools import wraps
import logging

from django.core.cache import cache
from django.db import DatabaseError

from .exceptions import ServiceUnavailable

logger = logging.getLogger(__name__)


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """Fail fast on repeated database errors, serving the last good result meanwhile.

    State lives in the Django cache so every worker process shares it.
    """

    def __init__(self, failure_threshold=5, recovery_timeout=60, expected_exception=DatabaseError,
                 fallback_timeout=3600):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.expected_exception = expected_exception
        self.fallback_timeout = fallback_timeout

    def _get_cache_key(self, func_name):
        return f"circuit_breaker:{func_name}"

    def _fallback_key(self, func_name, args, kwargs):
        digest = hashlib.md5((repr(args) + repr(sorted(kwargs.items()))).encode()).hexdigest()
        return f"fallback:{func_name}:{digest}"

    def get_state(self, func_name):
        return cache.get(self._get_cache_key(func_name), {
            'state': CircuitState.CLOSED.value,
            'failure_count': 0,
            'last_failure_time': None
        })

    def _set_state(self, func_name, state_data):
        cache.set(self._get_cache_key(func_name), state_data, 300)

    def _should_attempt_reset(self, state_data):
        if state_data['state'] != CircuitState.OPEN.value:
            return False
        return time.time() - state_data['last_failure_time'] >= self.recovery_timeout

    def __call__(self, func):
        func_name = f"{func.__module__}.{func.__name__}"

        @wraps(func)
        def wrapper(*args, **kwargs):
            state_data = self.get_state(func_name)
            fallback_key = self._fallback_key(func_name, args, kwargs)

            # Circuit OPEN - fail fast
            if state_data['state'] == CircuitState.OPEN.value:
                if not self._should_attempt_reset(state_data):
                    logger.warning(f"Circuit breaker OPEN for {func_name}")
                    return self._fallback_response(func_name, fallback_key)
                state_data['state'] = CircuitState.HALF_OPEN.value
                self._set_state(func_name, state_data)

            try:
                result = func(*args, **kwargs)
            except self.expected_exception as e:
                logger.error(f"Circuit breaker failure in {func_name}: {e}")
                self._record_failure(func_name, state_data)
                return self._fallback_response(func_name, fallback_key)

            if state_data['state'] != CircuitState.CLOSED.value:
                self.reset(func_name)
                logger.info(f"Circuit breaker CLOSED for {func_name}")

            cache.set(fallback_key, result, self.fallback_timeout)
            return result

        wrapper.circuit_name = func_name
        return wrapper

    def _record_failure(self, func_name, state_data):
        state_data['failure_count'] += 1
        state_data['last_failure_time'] = time.time()

        if state_data['failure_count'] >= self.failure_threshold:
            state_data['state'] = CircuitState.OPEN.value
            logger.error(f"Circuit breaker OPENED for {func_name}")

        self._set_state(func_name, state_data)

    def reset(self, func_name):
        self._set_state(func_name, {
            'state': CircuitState.CLOSED.value,
            'failure_count': 0,
            'last_failure_time': None
        })

    def _fallback_response(self, func_name, fallback_key):
        cached_result = cache.get(fallback_key)
        if cached_result is not None:
            logger.info(f"Returning cached fallback for {func_name}")
            return cached_result
        raise ServiceUnavailable(f"{func_name} is temporarily unavailable")
