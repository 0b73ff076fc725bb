"""Diagnostic printing over UDP: a server that forwards timestamped lines to a client."""

from __future__ import annotations

import heapq
import itertools
import logging
import socket
import threading
from datetime import datetime
from typing import Any, Optional

from zcommon.zprint import format_ms_timestamp, get_printer

BROADCAST = "<broadcast>"
START_MESSAGE = "start printf!"
STOP_MESSAGE = "stop printf!"
MESSAGE_LIMIT = 1023

_log = logging.getLogger(__name__)


class UpdateSocket:
    """A UDP socket bound to *recv_port* that sends to *send_port*."""

    def __init__(self, send_port: int = 0xFFF1, recv_port: int = 0xFFF2) -> None:
        self.send_port = send_port
        self.default_host = BROADCAST
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
            sock.bind(("", recv_port))
            sock.setblocking(False)
        except OSError:
            sock.close()
            raise
        self._sock = sock
        self.recv_port: int = sock.getsockname()[1]

    def send_data(self, msg: str, host: Optional[str] = None) -> int:
        """Send *msg* as UTF-8 to *host* (default: broadcast); return bytes sent."""
        target = self.default_host if host is None else host
        return self._sock.sendto(msg.encode("utf-8"), (target, self.send_port))

    def process_pending(self) -> int:
        """Handle every datagram already received; return how many there were."""
        count = 0
        while True:
            try:
                data, address = self._sock.recvfrom(65535)
            except (BlockingIOError, InterruptedError):
                return count
            self.handle_datagram(data, address[0])
            count += 1

    def handle_datagram(self, data: bytes, host: str) -> None:
        _log.debug("%r from %s", data, host)

    def close(self) -> None:
        self._sock.close()

    def __enter__(self) -> "UpdateSocket":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class PrintServer(UpdateSocket):
    """Queues formatted messages once a client asks for them and sends them in time order."""

    def __init__(self, send_port: int = 0xF418, recv_port: int = 0xF419) -> None:
        super().__init__(send_port, recv_port)
        self.connected = False
        self.print_host: Optional[str] = None
        self._queue: list[tuple[datetime, int, str]] = []
        self._seq = itertools.count()
        self._lock = threading.Lock()
        self._pending = threading.Semaphore(0)
        self._running = False
        self._thread: Optional[threading.Thread] = None

    def handle_datagram(self, data: bytes, host: str) -> None:
        msg = data.decode("utf-8", errors="replace")
        if msg == START_MESSAGE:
            get_printer().timemsprintf("net printf start!\n")
            self.connected = True
            self.print_host = host
            self._start()
        elif msg == STOP_MESSAGE:
            get_printer().timemsprintf("net printf stop!\n")
            self.connected = False

    def _start(self) -> None:
        with self._lock:
            if self._running:
                return
            self._running = True
        self._thread = threading.Thread(target=self._run, name="netprint", daemon=True)
        self._thread.start()

    def netprintf(self, fmt: str, *args: Any) -> None:
        """Queue a formatted message, stamped with the current time, if connected."""
        if not self.connected:
            return
        moment = datetime.now()
        text = (fmt % args if args else fmt)[:MESSAGE_LIMIT]
        with self._lock:
            heapq.heappush(self._queue, (moment, next(self._seq), text))
        self._pending.release()

    def _run(self) -> None:
        while True:
            self._pending.acquire()
            if not self._running:
                return
            with self._lock:
                if not self._queue:
                    continue
                moment, _, text = heapq.heappop(self._queue)
            line = format_ms_timestamp(moment) + " " + " " + text
            try:
                self.send_data(line)
            except OSError as exc:
                get_printer().timemsprintf("net printf send failed: %s\n", exc)

    def close(self) -> None:
        self.connected = False
        with self._lock:
            was_running = self._running
            self._running = False
        if was_running:
            self._pending.release()
            if self._thread is not None and self._thread is not threading.current_thread():
                self._thread.join()
            self._thread = None
        super().close()


class PrintClient(UpdateSocket):
    """Asks a print server to start sending and collects the lines it receives."""

    def __init__(self, send_port: int = 0xF419, recv_port: int = 0xF418) -> None:
        super().__init__(send_port, recv_port)
        self.messages: list[str] = []
        try:
            self.send_data(START_MESSAGE)
        except OSError as exc:
            get_printer().timemsprintf("net printf start request failed: %s\n", exc)

    def handle_datagram(self, data: bytes, host: str) -> None:
        msg = data.decode("utf-8", errors="replace")
        _log.debug("%s", msg)
        self.messages.append(msg)