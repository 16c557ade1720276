"""
Configuration loader from environment variables and .env files.
"""

from typing import Any, Optional

from pydantic import ValidationError

from ..config import AdapterConfig, ClientDefaults
from ..exceptions import ConfigurationError
from ..logging.config import LoggingConfig
from .validator import AdapterSettings


def load_from_env(env_file: Optional[str] = None, **overrides: Any) -> AdapterConfig:
    """
    Load AdapterConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters (AdapterSettings field names)
    2. Environment variables (HTTP_ADAPTER_*)
    3. .env file
    4. Defaults

    Raises:
        ConfigurationError: If a value fails validation

    Example:
        >>> config = load_from_env(keep_alive_timeout=20)
        >>> config.keep_alive_timeout
        20.0
    """
    if env_file is not None:
        overrides['_env_file'] = env_file

    try:
        settings = AdapterSettings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid adapter settings: {e}") from e

    logging_config = None
    if settings.log_enabled:
        logging_config = LoggingConfig.create(
            level=settings.log_level,
            format=settings.log_format,
            enable_console=settings.log_enable_console,
            enable_file=settings.log_enable_file,
            file_path=settings.log_file_path,
        )

    return AdapterConfig(
        defaults=ClientDefaults(
            connect=settings.connect_timeout,
            send=settings.send_timeout,
            receive=settings.receive_timeout,
        ),
        keep_alive_timeout=settings.keep_alive_timeout,
        ssl_timeout=settings.ssl_timeout,
        transparent_gzip_decompression=settings.transparent_gzip_decompression,
        pool_connections=settings.pool_connections,
        pool_maxsize=settings.pool_maxsize,
        logging=logging_config,
    )
