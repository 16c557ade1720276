# src/http_adapter/core/connection_cache.py
"""
Thread-safe cache of client handles.

Handles are keyed on the connection-relevant part of a request
environment so that requests with equal settings share one handle and,
through it, one pool of open connections.
"""
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from .client_handle import HTTPClientHandle
from .env import Env, RequestOptions


@dataclass(frozen=True)
class CacheKey:
    """
    Connection-relevant settings of an environment.

    Request options that do not change how a client is built (multipart
    boundary, streaming callback, context, method, body, headers, URL) are
    not part of the key.
    """
    timeout: Optional[float] = None
    open_timeout: Optional[float] = None
    read_timeout: Optional[float] = None
    write_timeout: Optional[float] = None
    proxy: Optional[Tuple[str, Optional[str], Optional[str]]] = None
    bind: Optional[Tuple[str, int]] = None
    ssl: Optional[Tuple] = None

    @classmethod
    def from_env(cls, env: Env) -> 'CacheKey':
        """
        Derive the key from an environment.

        Example:
            >>> env = Env(url="https://example.com")
            >>> CacheKey.from_env(env) == CacheKey.from_env(env)
            True
        """
        # No request options means library defaults, same as empty ones
        request = env.request or RequestOptions()

        proxy = None
        if request.proxy is not None:
            proxy = (request.proxy.uri, request.proxy.user, request.proxy.password)

        bind = None
        if request.bind is not None:
            bind = (request.bind.host, request.bind.port)

        ssl_key = None
        if env.ssl is not None:
            options = env.ssl
            ssl_key = (
                options.verify,
                options.verify_mode,
                options.ca_file,
                options.ca_path,
                options.client_cert,
                options.client_key,
                options.verify_depth,
                # SSLContext hashes by identity
                options.cert_store,
            )

        return cls(
            timeout=request.timeout,
            open_timeout=request.open_timeout,
            read_timeout=request.read_timeout,
            write_timeout=request.write_timeout,
            proxy=proxy,
            bind=bind,
            ssl=ssl_key,
        )


class ConnectionCache:
    """
    Maps cache keys to client handles.

    Lookup and construction happen under one lock, so concurrent callers
    with the same key get the same handle and the factory runs once per key.

    Example:
        >>> cache = ConnectionCache()
        >>> handle = cache.get_or_create(key, lambda: HTTPClientHandle())
        >>> cache.get_or_create(key, lambda: HTTPClientHandle()) is handle
        True
        >>> cache.close_all()
    """

    def __init__(self):
        self._handles: Dict[CacheKey, HTTPClientHandle] = {}
        # Reentrant: a factory may request handles for other keys
        self._lock = threading.RLock()

    def get(self, key: CacheKey) -> Optional[HTTPClientHandle]:
        with self._lock:
            return self._handles.get(key)

    def get_or_create(
        self,
        key: CacheKey,
        factory: Callable[[], HTTPClientHandle]
    ) -> HTTPClientHandle:
        """
        Return the handle cached under ``key``, building it if missing.

        Args:
            key: Cache key
            factory: Builds and configures a new handle

        Returns:
            Cached or newly built handle

        Exceptions raised by ``factory`` propagate and nothing is cached.
        """
        with self._lock:
            handle = self._handles.get(key)
            if handle is None:
                handle = factory()
                self._handles[key] = handle
            return handle

    def handles(self) -> List[HTTPClientHandle]:
        with self._lock:
            return list(self._handles.values())

    def close_all(self):
        """
        Close every cached handle and empty the cache.

        Safe to call multiple times.
        """
        with self._lock:
            handles = list(self._handles.values())
            self._handles.clear()

        for handle in handles:
            handle.close()

    def __len__(self) -> int:
        with self._lock:
            return len(self._handles)

    def __contains__(self, key: CacheKey) -> bool:
        with self._lock:
            return key in self._handles

    def __iter__(self) -> Iterator[CacheKey]:
        with self._lock:
            return iter(list(self._handles))

    def __enter__(self):
        """Context manager support."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Close all handles on context exit."""
        self.close_all()
        return False
