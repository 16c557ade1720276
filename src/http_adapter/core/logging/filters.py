"""
Log filters adding request correlation ids and static fields.
"""

import logging
import threading
from typing import Dict, Any, Optional


# Thread-local storage for correlation ID
_correlation_id_storage = threading.local()


def set_correlation_id(correlation_id: str) -> None:
    """Set correlation ID for current thread."""
    _correlation_id_storage.value = correlation_id


def get_correlation_id() -> Optional[str]:
    """
    Get correlation ID for current thread.

    Example:
        >>> set_correlation_id("req-12345")
        >>> get_correlation_id()
        'req-12345'
    """
    return getattr(_correlation_id_storage, 'value', None)


def clear_correlation_id() -> None:
    """Clear correlation ID for current thread."""
    if hasattr(_correlation_id_storage, 'value'):
        delattr(_correlation_id_storage, 'value')


class CorrelationIdFilter(logging.Filter):
    """Adds ``correlation_id`` to records emitted while a request is running."""

    def filter(self, record: logging.LogRecord) -> bool:
        correlation_id = get_correlation_id()
        if correlation_id:
            record.correlation_id = correlation_id
        return True


class ExtraFieldsFilter(logging.Filter):
    """
    Adds static fields to all log records.

    Example:
        >>> handler.addFilter(ExtraFieldsFilter({"service": "billing"}))
    """

    def __init__(self, extra_fields: Dict[str, Any]):
        super().__init__()
        self.extra_fields = extra_fields

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.extra_fields.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
