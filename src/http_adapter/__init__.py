"""HTTP Adapter - requests-backed adapter with cached, reusable clients."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.adapter import HTTPClientAdapter
from .core.client_handle import HTTPClientHandle, SSLConfig, SocketLocal
from .core.config import AdapterConfig, ClientDefaults
from .core.env import Env, RequestOptions, SSLOptions, ProxyOptions, BindOptions
from .core.connection_cache import CacheKey, ConnectionCache
from .core.timeouts import ResolvedTimeouts, resolve_timeouts
from .core.exceptions import (
    AdapterError,
    ClientError,
    ConnectionFailed,
    TimeoutError,
    SSLError,
    ConfigurationError,
)
from .core.env_config import load_from_env
from .core.logging import LoggingConfig

# Users can configure logging themselves using logging.getLogger('http_adapter')
logging.getLogger('http_adapter').addHandler(logging.NullHandler())

try:
    __version__ = version("http-client-adapter")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__license__ = "MIT"

__all__ = [
    # Adapter
    "HTTPClientAdapter",
    "HTTPClientHandle",
    "SSLConfig",
    "SocketLocal",
    "CacheKey",
    "ConnectionCache",
    "ResolvedTimeouts",
    "resolve_timeouts",

    # Environment
    "Env",
    "RequestOptions",
    "SSLOptions",
    "ProxyOptions",
    "BindOptions",

    # Config
    "AdapterConfig",
    "ClientDefaults",
    "LoggingConfig",
    "load_from_env",

    # Exceptions
    "AdapterError",
    "ClientError",
    "ConnectionFailed",
    "TimeoutError",
    "SSLError",
    "ConfigurationError",

    # Version
    "__version__",
]
