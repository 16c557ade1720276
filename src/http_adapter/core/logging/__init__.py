"""
Logging for the HTTP adapter.

Example:
    >>> from http_adapter.core.logging import AdapterLogger, LoggingConfig
    >>>
    >>> config = LoggingConfig.create(level="DEBUG", format="json")
    >>> logger = AdapterLogger(config)
    >>> logger.info("Handle created", cache_size=1)
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import AdapterLogger
from .formatters import JSONFormatter, TextFormatter, ColoredFormatter, get_formatter
from .filters import (
    CorrelationIdFilter,
    ExtraFieldsFilter,
    set_correlation_id,
    get_correlation_id,
    clear_correlation_id,
)
from .handlers import create_console_handler, create_file_handler

__all__ = [
    # Config
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    # Logger
    "AdapterLogger",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    "ColoredFormatter",
    "get_formatter",
    # Filters
    "CorrelationIdFilter",
    "ExtraFieldsFilter",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    # Handlers
    "create_console_handler",
    "create_file_handler",
]
