# src/http_adapter/core/client_handle.py
"""
Reusable HTTP client handle backed by requests.

A handle carries the settable configuration of a stateful HTTP client
(timeouts, TLS settings, proxy, local socket binding) and lazily builds a
``requests.Session`` from it on first use. One handle may serve many
requests; the session keeps the TCP/TLS connections alive between them.
"""
import os
import ssl
import threading
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote, urlsplit, urlunsplit

import requests
from requests.adapters import HTTPAdapter

from .config import ClientDefaults
from .exceptions import ConfigurationError


@dataclass
class SSLConfig:
    """
    TLS settings of a handle.

    Attributes:
        timeout: TLS session timeout (seconds)
        verify_mode: ``ssl.CERT_*`` mode
        cert_store: SSL context holding trusted CAs
        trust_ca: CA files/directories added with ``add_trust_ca``
        client_cert: Client certificate file
        client_key: Client private key file
        verify_depth: Maximum chain depth
    """
    timeout: Optional[float] = None
    verify_mode: ssl.VerifyMode = ssl.CERT_REQUIRED
    cert_store: Optional[ssl.SSLContext] = None
    trust_ca: List[str] = field(default_factory=list)
    client_cert: Optional[str] = None
    client_key: Optional[str] = None
    verify_depth: Optional[int] = None

    def add_trust_ca(self, path: str) -> None:
        if path not in self.trust_ca:
            self.trust_ca.append(path)

    @property
    def verify(self) -> bool:
        """
        Value for the ``verify`` argument of requests.

        Trusted CA locations are loaded into the context from
        ``build_context``, not passed to requests.
        """
        return self.verify_mode != ssl.CERT_NONE

    @property
    def cert(self) -> Union[str, Tuple[str, str], None]:
        """Value for the ``cert`` argument of requests."""
        if self.client_cert and self.client_key:
            return (self.client_cert, self.client_key)
        return self.client_cert

    def build_context(self) -> Optional[ssl.SSLContext]:
        """
        SSL context for one handle's connections.

        urllib3 loads the client certificate into the context it is given,
        so ``cert_store`` (shared between handles) is returned as is only
        when there is neither a client certificate nor a trusted CA to load.
        Otherwise a new context is built: from ``trust_ca`` alone when it is
        set, from the system CAs otherwise, plus the CAs of ``cert_store``.

        Raises:
            ConfigurationError: A trusted CA location cannot be loaded
        """
        if self.verify_mode == ssl.CERT_NONE:
            return None
        if not self.client_cert and not self.trust_ca:
            return self.cert_store

        try:
            if self.trust_ca:
                context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
                for location in self.trust_ca:
                    if os.path.isdir(location):
                        context.load_verify_locations(capath=location)
                    else:
                        context.load_verify_locations(cafile=location)
            else:
                context = ssl.create_default_context()

            if self.cert_store is not None:
                ca_certs = self.cert_store.get_ca_certs(binary_form=True)
                if ca_certs:
                    context.load_verify_locations(cadata=b"".join(ca_certs))
        except OSError as exc:
            raise ConfigurationError(f"Cannot load trusted CA certificates: {exc}") from exc

        return context


@dataclass
class SocketLocal:
    """Local address for outgoing connections."""
    host: Optional[str] = None
    port: Optional[int] = None

    def source_address(self) -> Optional[Tuple[str, int]]:
        if not self.host:
            return None
        return (self.host, self.port or 0)


class HandleTransport(HTTPAdapter):
    """
    HTTPAdapter that forwards a local source address and an SSL context
    to the urllib3 pool managers.
    """

    def __init__(
        self,
        source_address: Optional[Tuple[str, int]] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
        **kwargs: Any
    ):
        # init_poolmanager is called from HTTPAdapter.__init__
        self.source_address = source_address
        self.ssl_context = ssl_context
        super().__init__(**kwargs)

    def _connection_kwargs(self, kwargs: dict) -> dict:
        if self.source_address is not None:
            kwargs['source_address'] = self.source_address
        if self.ssl_context is not None:
            kwargs['ssl_context'] = self.ssl_context
        return kwargs

    def init_poolmanager(self, *args, **kwargs):
        return super().init_poolmanager(*args, **self._connection_kwargs(kwargs))

    def proxy_manager_for(self, proxy, **proxy_kwargs):
        return super().proxy_manager_for(proxy, **self._connection_kwargs(proxy_kwargs))


class HTTPClientHandle:
    """
    Configured, reusable HTTP client.

    Handles returned by the adapter are shared: every request whose cache
    key matches receives the same instance. Treat them as non-owned
    references.

    Example:
        >>> handle = HTTPClientHandle()
        >>> handle.connect_timeout, handle.send_timeout, handle.receive_timeout
        (60, 120, 60)
        >>> handle.ssl_config.client_cert = "client.pem"
        >>> response = handle.request("GET", "https://example.com")
    """

    def __init__(
        self,
        defaults: Optional[ClientDefaults] = None,
        keep_alive_timeout: float = 15,
        pool_connections: int = 10,
        pool_maxsize: int = 10,
    ):
        defaults = defaults or ClientDefaults()

        self.connect_timeout = defaults.connect
        self.send_timeout = defaults.send
        self.receive_timeout = defaults.receive
        self.keep_alive_timeout = keep_alive_timeout
        self.transparent_gzip_decompression = False

        self.ssl_config = SSLConfig()
        self.socket_local = SocketLocal()
        self.proxy: Optional[str] = None
        self.proxy_auth: Optional[Tuple[str, str]] = None

        self._pool_connections = pool_connections
        self._pool_maxsize = pool_maxsize
        self._session: Optional[requests.Session] = None
        self._session_lock = threading.Lock()

    def set_proxy_auth(self, user: str, password: str) -> None:
        self.proxy_auth = (user, password)

    @property
    def timeout(self) -> Tuple[float, float]:
        """(connect, read) timeout tuple for requests."""
        return (self.connect_timeout, self.receive_timeout)

    def proxy_url(self) -> Optional[str]:
        """Proxy URL with credentials embedded when proxy auth is set."""
        if not self.proxy:
            return None
        if not self.proxy_auth:
            return self.proxy

        user, password = self.proxy_auth
        parts = urlsplit(self.proxy)
        netloc = f"{quote(user, safe='')}:{quote(password, safe='')}@{parts.netloc}"
        return urlunsplit(parts._replace(netloc=netloc))

    @property
    def session(self) -> requests.Session:
        """Session built from the current configuration, created lazily."""
        if self._session is None:
            with self._session_lock:
                if self._session is None:
                    self._session = self._create_session()
        return self._session

    def _create_session(self) -> requests.Session:
        """Create configured session."""
        session = requests.Session()

        ssl_context = self.ssl_config.build_context()

        transport = HandleTransport(
            source_address=self.socket_local.source_address(),
            ssl_context=ssl_context,
            pool_connections=self._pool_connections,
            pool_maxsize=self._pool_maxsize,
            max_retries=0
        )

        session.mount('http://', transport)
        session.mount('https://', transport)

        session.verify = self.ssl_config.verify
        if self.ssl_config.cert:
            session.cert = self.ssl_config.cert

        proxy = self.proxy_url()
        if proxy:
            session.proxies.update({'http': proxy, 'https': proxy})

        if not self.transparent_gzip_decompression:
            session.headers['Accept-Encoding'] = 'identity'

        return session

    def request(
        self,
        method: str,
        url: str,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> requests.Response:
        """
        Perform a request with this handle's configuration.

        Redirects are returned to the caller, not followed.
        """
        return self.session.request(
            method.upper(),
            url,
            data=body,
            headers=dict(headers) if headers else None,
            timeout=self.timeout,
            allow_redirects=False,
        )

    def close(self) -> None:
        """
        Close the underlying session.

        The next request builds a new session from the current configuration.
        """
        with self._session_lock:
            session, self._session = self._session, None
        if session is not None:
            session.close()

    def __enter__(self):
        """Context manager support."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self) -> str:
        return (
            f"<HTTPClientHandle connect={self.connect_timeout} "
            f"send={self.send_timeout} receive={self.receive_timeout}>"
        )
