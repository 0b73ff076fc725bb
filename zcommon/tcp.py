"""TCP connections and clients built on :class:`SocketEndpoint`."""

from __future__ import annotations

import socket
from typing import Optional

from zcommon.sockets import SocketEndpoint
from zcommon.zprint import get_printer


class TcpConnection(SocketEndpoint):
    """A stream socket aimed at an address; no socket is made without a port."""

    def __init__(self, port: Optional[int] = None, ip: Optional[str] = None) -> None:
        super().__init__(port, ip, socket.SOCK_STREAM if port is not None else None)

    def write(self, data: bytes) -> int:
        """Send *data*; return the number of bytes written."""
        sock = self._require()
        if data is None:
            raise TypeError("no data to write")
        return sock.send(data)

    def read(self, size: int) -> bytes:
        """Read up to *size* bytes; an empty result means the peer closed."""
        return self._require().recv(size)

    def recv(self, size: int) -> bytes:
        """Receive up to *size* bytes with no flags."""
        return self._require().recv(size, 0)


class TcpClient(TcpConnection):
    """A TCP connection that connects to its address."""

    def connect(self) -> None:
        """Connect to the configured address."""
        sock = self._require()
        try:
            sock.connect(self.address.pair)
        except OSError as exc:
            get_printer().timemsprintf(
                "tcp connect failed, errno:%s, %s\n", exc.errno, exc.strerror or exc
            )
            raise