# apps/analytics/repositories/cached.py
import hashlib
from functools import wraps

from django.conf import settings
from django.core.cache import cache


def cache_heavy_query(timeout=None):
    """Cache a read-only aggregate under a key derived from its arguments.

    With no explicit timeout, ANALYTICS_DASHBOARD_CACHE_TIMEOUT applies.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            digest = hashlib.md5((repr(args) + repr(sorted(kwargs.items()))).encode()).hexdigest()
            cache_key = f"analytics:{func.__name__}:{digest}"
            result = cache.get(cache_key)
            if result is None:
                result = func(*args, **kwargs)
                ttl = timeout if timeout is not None else getattr(
                    settings, 'ANALYTICS_DASHBOARD_CACHE_TIMEOUT', 300
                )
                cache.set(cache_key, result, ttl)
            return result
        return wrapper
    return decorator
