"""
Logger used by the HTTP adapter.

Wraps a standard ``logging.Logger`` configured from ``LoggingConfig`` and
accepts structured fields as keyword arguments.
"""

import logging
from typing import Any, Optional

from .config import LoggingConfig, LogLevel
from .formatters import get_formatter
from .filters import CorrelationIdFilter, ExtraFieldsFilter
from .handlers import create_console_handler, create_file_handler
from ...utils.sanitizer import mask_sensitive_data


class AdapterLogger:
    """
    Structured logger for the adapter.

    Keyword arguments become fields of the log record. Values are passed
    through ``mask_sensitive_data`` first, so proxy passwords or client
    keys never reach the handlers.

    Example:
        >>> logger = AdapterLogger(LoggingConfig.create(level="DEBUG"))
        >>> logger.info("Request completed", method="GET", status=200)
        >>> logger.close()
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: Optional[str] = None):
        self.config = config or LoggingConfig()
        self.name = name or self.config.name
        self._closed = False

        level = self._get_level(self.config.level)

        self._logger = logging.getLogger(self.name)
        self._logger.setLevel(level)
        self._logger.propagate = False

        # Reinitialization replaces previous handlers
        self._logger.handlers.clear()

        filters = []
        if self.config.enable_correlation_id:
            filters.append(CorrelationIdFilter())
        if self.config.extra_fields:
            filters.append(ExtraFieldsFilter(self.config.extra_fields))

        formatter = get_formatter(self.config.format.value)

        if self.config.enable_console:
            self._logger.addHandler(
                create_console_handler(level=level, formatter=formatter, filters=filters)
            )

        if self.config.enable_file and self.config.file_path:
            self._logger.addHandler(
                create_file_handler(
                    file_path=self.config.file_path,
                    level=level,
                    formatter=formatter,
                    max_bytes=self.config.max_bytes,
                    backup_count=self.config.backup_count,
                    filters=filters
                )
            )

    @staticmethod
    def _get_level(level: LogLevel) -> int:
        return getattr(logging, level.value)

    def _log(self, level: int, message: str, fields: dict, exc_info: bool = False) -> None:
        self._logger.log(level, message, extra=mask_sensitive_data(fields), exc_info=exc_info)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log an error with traceback; call from an exception handler."""
        self._log(logging.ERROR, message, kwargs, exc_info=True)

    def close(self) -> None:
        """
        Flush and close all handlers.

        Idempotent.
        """
        if self._closed:
            return

        for handler in self._logger.handlers[:]:
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)

        self._closed = True

    def __enter__(self):
        """Context manager support."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Close logger on context exit."""
        self.close()
        return False
