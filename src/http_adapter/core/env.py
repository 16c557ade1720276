"""
Connection environment passed to the adapter for every request.

The caller owns an ``Env`` and may mutate it between adapter invocations.
The adapter reads the request/SSL options from it and writes the response
fields back with ``save_response``.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Union
from urllib.parse import urlsplit
import ssl

# Streaming callback: (chunk, total bytes received so far)
OnData = Callable[[bytes, int], None]


@dataclass
class ProxyOptions:
    """
    Proxy settings for a request.

    Args:
        uri: Proxy URL, e.g. ``http://proxy.local:3128``
        user: Proxy user (optional)
        password: Proxy password (optional)
    """
    uri: str
    user: Optional[str] = None
    password: Optional[str] = None


@dataclass
class BindOptions:
    """Local address the outgoing socket is bound to."""
    host: str
    port: int = 0


@dataclass
class RequestOptions:
    """
    Per-request options.

    Timeouts are in seconds. ``timeout`` is the blanket value applied to
    the connect, send and receive phases; ``open_timeout``,
    ``write_timeout`` and ``read_timeout`` set one phase each.

    Examples:
        >>> RequestOptions(timeout=5)
        >>> RequestOptions(open_timeout=1, read_timeout=30)
    """
    timeout: Optional[float] = None
    open_timeout: Optional[float] = None
    read_timeout: Optional[float] = None
    write_timeout: Optional[float] = None
    boundary: Optional[str] = None
    proxy: Optional[ProxyOptions] = None
    bind: Optional[BindOptions] = None
    on_data: Optional[OnData] = None
    context: Dict[str, Any] = field(default_factory=dict)

    def stream_response(self) -> bool:
        """True when the caller asked to receive the body through ``on_data``."""
        return self.on_data is not None


@dataclass
class SSLOptions:
    """
    TLS settings for https requests.

    Args:
        verify: Verify the server certificate
        verify_mode: Explicit ``ssl.CERT_*`` mode, overrides ``verify``
        ca_file: CA bundle file
        ca_path: Directory with CA certificates
        client_cert: Client certificate file
        client_key: Client private key file
        cert_store: Pre-built ``ssl.SSLContext`` holding trusted CAs
        verify_depth: Maximum certificate chain depth
    """
    verify: bool = True
    verify_mode: Optional[ssl.VerifyMode] = None
    ca_file: Optional[str] = None
    ca_path: Optional[str] = None
    client_cert: Optional[str] = None
    client_key: Optional[str] = None
    cert_store: Optional[ssl.SSLContext] = None
    verify_depth: Optional[int] = None


@dataclass
class Env:
    """
    Request/response environment.

    Examples:
        >>> env = Env(url="https://example.com", request=RequestOptions(timeout=5))
        >>> env.is_https
        True
    """
    url: str
    method: str = "get"
    body: Union[bytes, str, Any, None] = None
    request_headers: Dict[str, str] = field(default_factory=dict)
    request: RequestOptions = field(default_factory=RequestOptions)
    ssl: SSLOptions = field(default_factory=SSLOptions)

    # Filled by the adapter
    status: Optional[int] = None
    response_body: Optional[bytes] = None
    response_headers: Mapping[str, str] = field(default_factory=dict)
    reason_phrase: Optional[str] = None

    @property
    def is_https(self) -> bool:
        return urlsplit(self.url).scheme.lower() == "https"

    def save_response(
        self,
        status: int,
        body: Optional[bytes],
        headers: Mapping[str, str],
        reason_phrase: Optional[str] = None
    ) -> None:
        """Store the response received for this environment."""
        self.status = status
        self.response_body = body
        self.response_headers = headers
        self.reason_phrase = reason_phrase.strip() if reason_phrase else reason_phrase
