import time
from datetime import datetime

import pytest

from zcommon.netprint import (
    BROADCAST,
    START_MESSAGE,
    STOP_MESSAGE,
    PrintClient,
    PrintServer,
    UpdateSocket,
)


def _poll(sock, predicate, timeout=2.0):
    end = time.monotonic() + timeout
    while time.monotonic() < end:
        sock.process_pending()
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def pair():
    server = PrintServer(send_port=0, recv_port=0)
    client = PrintClient(send_port=server.recv_port, recv_port=0)
    server.send_port = client.recv_port
    server.default_host = "127.0.0.1"
    try:
        yield server, client
    finally:
        server.close()
        client.close()


def test_default_host_is_broadcast():
    with UpdateSocket(0, 0) as sock:
        assert sock.default_host == BROADCAST
        assert sock.recv_port > 0


def test_send_data_between_sockets():
    with UpdateSocket(0, 0) as sender:
        with PrintClient(sender.recv_port, 0) as receiver:
            sender.send_port = receiver.recv_port
            sent = sender.send_data("hello", "127.0.0.1")
            assert sent == len("hello")
            _poll(receiver, lambda: receiver.messages)
            assert receiver.messages == ["hello"]


def test_process_pending_with_nothing_waiting():
    with UpdateSocket(0, 0) as sock:
        assert sock.process_pending() == 0


def test_process_pending_counts_datagrams():
    with UpdateSocket(0, 0) as sender, UpdateSocket(0, 0) as receiver:
        sender.send_port = receiver.recv_port
        sender.send_data("one", "127.0.0.1")
        sender.send_data("two", "127.0.0.1")
        total = 0
        end = time.monotonic() + 2.0
        while total < 2 and time.monotonic() < end:
            total += receiver.process_pending()
            time.sleep(0.01)
        assert total == 2


def test_start_and_stop_messages(pair):
    server, _ = pair
    server.handle_datagram(START_MESSAGE.encode(), "127.0.0.1")
    assert server.connected is True
    assert server.print_host == "127.0.0.1"
    server.handle_datagram(STOP_MESSAGE.encode(), "127.0.0.1")
    assert server.connected is False


def test_other_messages_are_ignored(pair):
    server, _ = pair
    server.handle_datagram(b"hello", "127.0.0.1")
    assert server.connected is False
    assert server.print_host is None


def test_netprintf_silent_when_disconnected(pair):
    server, client = pair
    server.netprintf("value %d\n", 7)
    time.sleep(0.1)
    assert client.process_pending() == 0
    assert client.messages == []


def test_end_to_end_lines_are_timestamped(pair):
    server, client = pair
    client.send_data(START_MESSAGE, "127.0.0.1")
    assert _poll(server, lambda: server.connected)
    server.netprintf("value %d\n", 7)
    assert _poll(client, lambda: client.messages)
    line = client.messages[0]
    assert line.endswith("  value 7\n")
    stamp = datetime.strptime(line[:26], "%Y-%m-%d %H:%M:%S.%f")
    assert abs((datetime.now() - stamp).total_seconds()) < 60


def test_end_to_end_order_is_kept(pair):
    server, client = pair
    server.handle_datagram(START_MESSAGE.encode(), "127.0.0.1")
    for index in range(3):
        server.netprintf("line %d", index)
    assert _poll(client, lambda: len(client.messages) >= 3)
    tails = [m.split("  ", 1)[1] for m in client.messages]
    assert tails == ["line 0", "line 1", "line 2"]


def test_long_messages_are_truncated(pair):
    server, client = pair
    server.handle_datagram(START_MESSAGE.encode(), "127.0.0.1")
    server.netprintf("x" * 5000)
    assert _poll(client, lambda: client.messages)
    body = client.messages[0].split("  ", 1)[1]
    assert body == "x" * 1023