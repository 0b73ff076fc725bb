"""UDP sockets: unicast, multicast and broadcast."""

from __future__ import annotations

import socket
from typing import Optional

from zcommon.sockets import ANY_IP, SocketAddress, SocketEndpoint
from zcommon.zprint import get_printer

READ_BUFFER_SIZE = 227680
MULTICAST_BUFFER_SIZE = 512 * 1024


class UdpSocket(SocketEndpoint):
    """A datagram socket sending to, or bound at, its address."""

    def __init__(self, port: Optional[int] = None, ip: Optional[str] = None) -> None:
        super().__init__(port, ip, socket.SOCK_DGRAM if port is not None else None)
        self.local_address = SocketAddress()

    def send(self, data: bytes) -> int:
        """Send *data* to the address; return the number of bytes sent."""
        sock = self._require()
        try:
            return sock.sendto(data, self.address.pair)
        except OSError as exc:
            get_printer().timemsprintf("udp send: %s\n", exc)
            raise

    def bind_for_read(self) -> None:
        """Bind to the address and enlarge the receive buffer."""
        sock = self._require()
        try:
            sock.bind(self.address.pair)
        except OSError as exc:
            get_printer().timemsprintf("udp bind: %s\n", exc)
            raise
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, READ_BUFFER_SIZE)
        except OSError:
            get_printer().timemsprintf("zty recv buf error!\n")
            raise
        try:
            size = sock.getsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF)
        except OSError:
            get_printer().timemsprintf("zty read rev buf size error!\n")
        else:
            get_printer().hprintf("zty read rev buf size %d!\n", size)

    def read(self, size: int) -> bytes:
        """Receive one datagram of at most *size* bytes."""
        data, _ = self._require().recvfrom(size)
        return data

    def read_from(self, size: int) -> tuple[bytes, SocketAddress]:
        """Receive one datagram and the address it came from."""
        data, (ip, port) = self._require().recvfrom(size)
        return data, SocketAddress(ip, port)

    def bind_port(self, port: int) -> None:
        """Bind the socket to *port* on every local interface."""
        self.local_address = SocketAddress.any(port)
        self._require().bind(self.local_address.pair)

    def set_timeout(self, seconds: float) -> None:
        """Limit blocking reads to *seconds*; zero means wait forever."""
        self._require().settimeout(seconds if seconds > 0 else None)

    def set_ms_timeout(self, ms: float) -> None:
        """Limit blocking reads to *ms* milliseconds; zero means wait forever."""
        self.set_timeout(ms / 1000.0)


class MulticastUdp(UdpSocket):
    """A UDP socket that can join a multicast group or send with a TTL."""

    def __init__(self, port: Optional[int] = None, ip: Optional[str] = None) -> None:
        super().__init__(port, ip)
        self.live_time = 0

    def join(self, group: str, local_ip: Optional[str] = None) -> None:
        """Bind for reading and join *group* on *local_ip* (any interface by default)."""
        self.bind_for_read()
        sock = self._require()
        request = socket.inet_aton(group) + socket.inet_aton(local_ip or ANY_IP)
        try:
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, request)
        except OSError as exc:
            get_printer().timemsprintf("mul set: %s\n", exc)
        if local_ip is None:
            try:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, MULTICAST_BUFFER_SIZE)
            except OSError as exc:
                get_printer().timemsprintf("mul rec buf: %s\n", exc)

    def set_ttl(self, ttl: int) -> None:
        """Set the time-to-live of outgoing multicast datagrams."""
        self.live_time = ttl
        self._require().setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, ttl)


class BroadcastUdp(UdpSocket):
    """A UDP socket allowed to send broadcast datagrams."""

    def __init__(self, port: Optional[int] = None, ip: Optional[str] = None) -> None:
        super().__init__(port, ip)
        self.live_time = 0
        self.broadcast = False

    def enable_broadcast(self, ttl: int) -> None:
        """Permit broadcasting and record *ttl*."""
        self.live_time = ttl
        self._require().setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
        self.broadcast = True