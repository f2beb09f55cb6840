class AnalyticsError(Exception):
    """Base error for segmentation, prediction and optimization requests."""


class NotFound(AnalyticsError):
    """A customer or campaign referenced by the request does not exist."""


class NoData(AnalyticsError):
    """The referenced population or performance history is empty."""


class UnsupportedOperation(AnalyticsError):
    """Unknown prediction type or optimization objective."""


class ServiceUnavailable(AnalyticsError):
    """A circuit breaker is open and no earlier result is cached."""
