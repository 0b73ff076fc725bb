"""A fixed-capacity ring of byte buffers shared between threads."""

from __future__ import annotations

import threading
from typing import Any, BinaryIO, Optional

from zcommon.zprint import get_printer


class BufferRingError(Exception):
    """Raised when the ring cannot accept or release a buffer."""


class BufferRing:
    """Ring of ``count`` slots, each holding up to ``size`` bytes plus extra data."""

    def __init__(self, count: int = 2, size: int = 2048) -> None:
        self.count = count
        self.size = size
        self._slots: list[Optional[tuple[bytes, Any]]] = [None] * count
        self._wr = 0
        self._rd = 0
        self._num = 0
        self.max_used = 0
        self._lock = threading.Lock()

    def _store(self, data: bytes, extra: Any) -> None:
        self._slots[self._wr] = (data, extra)
        self._wr = (self._wr + 1) % self.count
        self._num += 1

    def write(self, data: bytes, extra: Any = None) -> None:
        """Store a copy of *data* with *extra* in the next free slot."""
        with self._lock:
            if self._num >= self.count:
                get_printer().timemsprintf("Write buf over!\n")
                raise BufferRingError("buffer ring is full")
            if len(data) > self.size:
                get_printer().timemsprintf("Write data over!\n")
                raise BufferRingError(f"data of {len(data)} bytes exceeds slot size {self.size}")
            self._store(bytes(data), extra)
            if self._num > self.max_used:
                self.max_used = self._num
                get_printer().timemsprintf("buf max write is %d!\n", self.max_used)

    def write_from_file(self, fp: Optional[BinaryIO], num: int, extra: Any = None) -> int:
        """Read *num* bytes from *fp* into a slot, rewriting the 4-byte length header."""
        if fp is None:
            raise BufferRingError("no file to read from")
        with self._lock:
            if self._num >= self.count:
                get_printer().timemsprintf("Write buf over!\n")
                raise BufferRingError("buffer ring is full")
            if num > self.size:
                get_printer().timemsprintf("Write data over!\n")
                raise BufferRingError(f"read of {num} bytes exceeds slot size {self.size}")
            if num < 4:
                raise BufferRingError("a record needs at least a 4-byte header")
            chunk = bytearray(fp.read(num))
            if len(chunk) != num:
                get_printer().timemsprintf("zty file read %d error!\n", len(chunk))
                raise BufferRingError(f"short read: {len(chunk)} of {num} bytes")
            body = num - 4
            chunk[0:4] = bytes((0, 0, (body >> 8) & 0xFF, body & 0xFF))
            self._store(bytes(chunk), extra)
            return num

    def peek(self) -> Optional[tuple[bytes, Any]]:
        """Return the oldest ``(data, extra)`` without removing it, or None if empty."""
        with self._lock:
            if self._num == 0:
                return None
            return self._slots[self._rd]

    def advance(self) -> None:
        """Release the oldest slot."""
        with self._lock:
            if self._num == 0:
                get_printer().timemsprintf("zbufmodel add buf rd error!\n")
                raise BufferRingError("buffer ring is empty")
            self._slots[self._rd] = None
            self._rd = (self._rd + 1) % self.count
            self._num -= 1

    def __len__(self) -> int:
        return self._num