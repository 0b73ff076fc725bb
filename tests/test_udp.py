import socket

import pytest

from zcommon.sockets import SocketAddress
from zcommon.udp import BroadcastUdp, MulticastUdp, UdpSocket


@pytest.fixture
def receiver():
    udp = UdpSocket(0, "127.0.0.1")
    udp.bind_for_read()
    udp.set_timeout(5)
    yield udp
    udp.close()


def test_no_port_means_no_socket():
    udp = UdpSocket()
    assert udp.sock is None
    with pytest.raises(OSError):
        udp.send(b"x")


def test_send_and_read(receiver):
    port = receiver.local_port()
    with UdpSocket(port, "127.0.0.1") as sender:
        assert sender.send(b"hello") == 5
        assert receiver.read(100) == b"hello"


def test_read_from_reports_sender(receiver):
    port = receiver.local_port()
    with UdpSocket(port, "127.0.0.1") as sender:
        sender.send(b"ping")
        data, origin = receiver.read_from(100)
        assert data == b"ping"
        assert origin == SocketAddress("127.0.0.1", sender.local_port())


def test_read_times_out(receiver):
    receiver.set_ms_timeout(50)
    assert receiver.sock.gettimeout() == pytest.approx(0.05)
    with pytest.raises(socket.timeout):
        receiver.read(100)


def test_zero_timeout_blocks_forever(receiver):
    receiver.set_timeout(0)
    assert receiver.sock.gettimeout() is None


def test_read_buffer_enlarged(receiver):
    size = receiver.sock.getsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF)
    assert size >= 8192


def test_bind_port_records_local_address():
    with UdpSocket(0, "127.0.0.1") as udp:
        udp.bind_port(0)
        assert udp.local_address == SocketAddress.any(0)
        assert udp.local_port() > 0


def test_bind_twice_raises(receiver):
    with pytest.raises(OSError):
        receiver.bind_for_read()


def test_multicast_ttl():
    with MulticastUdp(0, "127.0.0.1") as udp:
        udp.set_ttl(3)
        assert udp.live_time == 3
        assert udp.sock.getsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL) == 3


def test_broadcast_enabled():
    with BroadcastUdp(0, "127.0.0.1") as udp:
        assert udp.sock.getsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST) == 0
        udp.enable_broadcast(2)
        assert udp.broadcast is True
        assert udp.live_time == 2
        assert udp.sock.getsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST) != 0


def test_broadcast_without_socket_raises():
    udp = BroadcastUdp()
    with pytest.raises(OSError):
        udp.enable_broadcast(1)
    assert udp.broadcast is False