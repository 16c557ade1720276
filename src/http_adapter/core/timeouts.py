"""
Resolution of request timeout options into per-phase client timeouts.

Precedence:
    1. ``timeout`` set -> applied to connect, send and receive.
    2. Otherwise ``open_timeout`` -> connect, ``write_timeout`` -> send,
       ``read_timeout`` -> receive, each independently.

A phase with no value keeps whatever the client already has.
"""

from dataclasses import dataclass
from typing import Optional

from .env import RequestOptions


@dataclass(frozen=True)
class ResolvedTimeouts:
    """Per-phase timeouts; ``None`` means leave the client value untouched."""
    connect: Optional[float] = None
    send: Optional[float] = None
    receive: Optional[float] = None

    def is_empty(self) -> bool:
        return self.connect is None and self.send is None and self.receive is None


def resolve_timeouts(request: Optional[RequestOptions]) -> ResolvedTimeouts:
    """
    Compute the connect/send/receive timeouts for a request.

    Examples:
        >>> resolve_timeouts(RequestOptions(timeout=5))
        ResolvedTimeouts(connect=5, send=5, receive=5)
        >>> resolve_timeouts(RequestOptions(open_timeout=1))
        ResolvedTimeouts(connect=1, send=None, receive=None)
    """
    if request is None:
        return ResolvedTimeouts()

    if request.timeout is not None:
        return ResolvedTimeouts(
            connect=request.timeout,
            send=request.timeout,
            receive=request.timeout,
        )

    return ResolvedTimeouts(
        connect=request.open_timeout,
        send=request.write_timeout,
        receive=request.read_timeout,
    )
