"""Levelled diagnostic printing to a stream or a log file."""

from __future__ import annotations

import os
import re
import sys
import threading
from datetime import datetime
from typing import IO, Optional

MAIN_VER = 1
SLAVE_VER = 8
PRINT_PRO = 4
DEBUG_F_DIR = "/media/mmcblk0p1/debug"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def read_level_config(path: str) -> int:
    """Read the print level from the first characters of *path*.

    Returns -1 if the file cannot be opened and 0 if it holds no number.
    """
    try:
        with open(path, "r", encoding="latin-1") as fp:
            head = fp.readline(7)
    except OSError:
        get_printer().timemsprintf("hn m_level config no!\n")
        return -1
    match = _LEADING_INT.match(head)
    return int(match.group(1)) if match else 0


def format_ms_timestamp(moment: datetime) -> str:
    """Format *moment* as ``YYYY-MM-DD HH:MM:SS.uuuuuu``."""
    return (
        f"{moment.year}-{moment.month:02d}-{moment.day:02d} "
        f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}."
        f"{moment.microsecond:06d}"
    )


def _render(fmt: str, args: tuple) -> str:
    return fmt % args if args else fmt


class Printer:
    """Writes messages gated by an enabled flag and a numeric level."""

    def __init__(self, stream: Optional[IO[str]] = None) -> None:
        self._stream: Optional[IO[str]] = stream if stream is not None else sys.stdout
        self._owns_stream = False
        self.enabled = False
        self.level = PRINT_PRO
        self._lock = threading.Lock()

    def configure(self, directory: str, name: str = "") -> None:
        """Enable output to stdout or to a log file inside *directory*."""
        if not directory:
            self.enabled = False
            return
        if directory == "stdout":
            self.enabled = True
            return
        if not os.path.exists(directory):
            return
        if name:
            log_path = name
        else:
            now = datetime.now()
            log_path = directory + (
                f"{now.month:02d}-{now.day:02d}_{now.hour:02d}_"
                f"{now.minute:02d}_{now.second:02d}.log"
            )
        value = read_level_config(directory + "m_level")
        if value > 0:
            self.level = value
        try:
            stream = open(log_path, "a+", encoding="utf-8")
        except OSError:
            print(f"file {log_path} open fail!")
            return
        self._replace_stream(stream, owned=True)
        self.enabled = True
        self.timemsprintf("commlib version %d_%d!\n", MAIN_VER, SLAVE_VER)

    def open(self, name: Optional[str], fd: int) -> None:
        """Send output to stdout when *fd* is 1, otherwise to the file *name*."""
        if fd == 1:
            self._replace_stream(sys.stdout, owned=False)
            return
        self._replace_stream(None, owned=False)
        if name is not None:
            try:
                self._replace_stream(open(name, "a+", encoding="utf-8"), owned=True)
            except OSError:
                print(f"file {name} open fail")

    def close(self) -> None:
        """Close an owned log file."""
        self._replace_stream(None, owned=False)

    def _replace_stream(self, stream: Optional[IO[str]], owned: bool) -> None:
        with self._lock:
            if self._owns_stream and self._stream is not None:
                self._stream.flush()
                self._stream.close()
            self._stream = stream
            self._owns_stream = owned

    def _emit(self, target: Optional[IO[str]], text: str) -> None:
        with self._lock:
            if target is None:
                return
            target.write(text)
            target.flush()

    def zprintf(self, fmt: str, *args) -> None:
        if not self.enabled or self.level < 3:
            return
        self._emit(self._stream, _render(fmt, args))

    def hprintf(self, fmt: str, *args) -> None:
        if not self.enabled or self.level < 4:
            return
        self._emit(sys.stdout, _render(fmt, args))

    def timeprintf(self, fmt: str, *args) -> None:
        if not self.enabled or self.level < 2:
            return
        now = datetime.now()
        prefix = (
            f"{now.year}-{now.month:02d}-{now.day:02d} "
            f"{now.hour:02d}:{now.minute:03d}:{now.second:02d} "
        )
        self._emit(self._stream, prefix + _render(fmt, args))

    def timemsprintf(self, fmt: str, *args) -> None:
        if not self.enabled or self.level < 1:
            return
        prefix = format_ms_timestamp(datetime.now()) + " "
        self._emit(self._stream, prefix + _render(fmt, args))


_instance: Optional[Printer] = None
_instance_lock = threading.Lock()


def get_printer() -> Printer:
    """Return the process-wide printer."""
    global _instance
    with _instance_lock:
        if _instance is None:
            _instance = Printer()
        return _instance