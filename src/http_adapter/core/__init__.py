"""Core HTTP adapter модули."""

from .config import ClientDefaults, AdapterConfig
from .env import Env, RequestOptions, SSLOptions, ProxyOptions, BindOptions
from .client_handle import HTTPClientHandle, SSLConfig, SocketLocal, HandleTransport
from .connection_cache import CacheKey, ConnectionCache
from .timeouts import ResolvedTimeouts, resolve_timeouts
from .adapter import HTTPClientAdapter
from .exceptions import (
    AdapterError,
    ClientError,
    ConnectionFailed,
    TimeoutError,
    SSLError,
    ConfigurationError,
    classify_requests_exception,
)

__all__ = [
    # Config
    "ClientDefaults",
    "AdapterConfig",
    # Environment
    "Env",
    "RequestOptions",
    "SSLOptions",
    "ProxyOptions",
    "BindOptions",
    # Client
    "HTTPClientHandle",
    "SSLConfig",
    "SocketLocal",
    "HandleTransport",
    "CacheKey",
    "ConnectionCache",
    "ResolvedTimeouts",
    "resolve_timeouts",
    "HTTPClientAdapter",
    # Exceptions
    "AdapterError",
    "ClientError",
    "ConnectionFailed",
    "TimeoutError",
    "SSLError",
    "ConfigurationError",
    "classify_requests_exception",
]
