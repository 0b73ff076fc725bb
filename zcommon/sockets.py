"""IPv4 socket addresses and an owned socket endpoint."""

from __future__ import annotations

import socket
from dataclasses import dataclass
from typing import Any, Optional

from zcommon.zprint import get_printer

ANY_IP = "0.0.0.0"


@dataclass(frozen=True)
class SocketAddress:
    """An IPv4 address and port."""

    ip: str = ANY_IP
    port: int = 0

    def __post_init__(self) -> None:
        try:
            socket.inet_aton(self.ip)
        except OSError as exc:
            raise ValueError(f"invalid IPv4 address {self.ip!r}") from exc
        if not 0 <= self.port <= 0xFFFF:
            raise ValueError(f"port {self.port} out of range")

    @staticmethod
    def any(port: int) -> "SocketAddress":
        """Return the wildcard address on *port*."""
        return SocketAddress(ANY_IP, port)

    @property
    def pair(self) -> tuple[str, int]:
        """The ``(ip, port)`` tuple used by the socket module."""
        return (self.ip, self.port)


class SocketEndpoint:
    """A remote or bind address together with the socket that uses it.

    With no *port* the address is the wildcard on port 0; with a *port* but
    no *ip* it is the wildcard on that port. A socket of *kind* is created
    when *kind* is given.
    """

    def __init__(
        self,
        port: Optional[int] = None,
        ip: Optional[str] = None,
        kind: Optional[int] = None,
    ) -> None:
        if port is None:
            self.address = SocketAddress()
        elif ip is None:
            self.address = SocketAddress.any(port)
        else:
            self.address = SocketAddress(ip, port)
        self.sock: Optional[socket.socket] = None
        if kind is not None:
            self.create(kind)

    def create(self, kind: int) -> socket.socket:
        """Create an IPv4 socket of *kind*, replacing any socket already held."""
        if self.sock is not None:
            self.sock.close()
            self.sock = None
        try:
            self.sock = socket.socket(socket.AF_INET, kind)
        except OSError as exc:
            get_printer().timemsprintf("socket: %s\n", exc)
            raise
        return self.sock

    def _require(self) -> socket.socket:
        if self.sock is None:
            raise OSError("socket is not open")
        return self.sock

    def close(self) -> None:
        """Shut down the write side and close the socket; safe to call twice."""
        if self.sock is None:
            return
        try:
            self.sock.shutdown(socket.SHUT_WR)
        except OSError as exc:
            get_printer().zprintf("shutdown: %s\n", exc)
        try:
            self.sock.close()
        except OSError as exc:
            get_printer().zprintf("close: %s\n", exc)
        self.sock = None

    def local_port(self) -> int:
        """Return the port the socket is bound to, or 0 without a socket."""
        if self.sock is None:
            return 0
        return self.sock.getsockname()[1]

    def __enter__(self) -> "SocketEndpoint":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()