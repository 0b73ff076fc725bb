"""Interval timers dispatched from a background thread, plus small delay helpers."""

from __future__ import annotations

import itertools
import threading
import time
from typing import Any, Callable, Optional

from zcommon.zprint import get_printer

TIMER_SIZE_MAX = 16

_event_ids = itertools.count(1)


class TimerEvent:
    """One registered timer: its callback, owner, argument and schedule."""

    def __init__(
        self,
        callback: Optional[Callable[["TimerEvent"], Any]] = None,
        owner: Any = None,
        arg: Any = None,
    ) -> None:
        self.callback = callback
        self.owner = owner
        self.arg = arg
        self.id = next(_event_ids)
        self.interval = 0.0
        self.repeat = False
        self.due: Optional[float] = None

    def _arm(self, interval: float, repeat: bool, now: float) -> None:
        self.interval = interval
        self.repeat = repeat
        # A zero or negative interval leaves the timer disarmed.
        self.due = now + interval if interval > 0 else None

    def _reschedule(self, now: float) -> None:
        if not self.repeat or self.due is None:
            self.due = None
            return
        # Missed expirations collapse into the one callback just delivered.
        while self.due <= now:
            self.due += self.interval

    def _fire(self) -> Any:
        if self.callback is not None:
            return self.callback(self)
        return None


class Timer:
    """Runs the callbacks of registered timer events on a worker thread."""

    def __init__(self, max_events: int = 20) -> None:
        if max_events <= 0:
            raise ValueError("max_events must be positive")
        self.max_events = max_events
        self._events: dict[int, TimerEvent] = {}
        self._cond = threading.Condition()
        self._running = False
        self._thread: Optional[threading.Thread] = None

    def add_event(
        self,
        interval: float,
        callback: Optional[Callable[[TimerEvent], Any]] = None,
        owner: Any = None,
        arg: Any = None,
        repeat: bool = True,
    ) -> int:
        """Register a timer firing after *interval* seconds; return its id."""
        get_printer().zprintf("timer is %f!\n", interval)
        event = TimerEvent(callback, owner, arg)
        with self._cond:
            self._events[event.id] = event
            event._arm(interval, repeat, time.monotonic())
            self._cond.notify_all()
        return event.id

    def delete_event(self, event_id: int) -> None:
        """Remove the timer *event_id*."""
        if event_id <= 0:
            raise ValueError(f"invalid event id {event_id}")
        with self._cond:
            if event_id not in self._events:
                raise KeyError(event_id)
            del self._events[event_id]
            self._cond.notify_all()

    def start(self) -> None:
        """Start dispatching timers; does nothing if already running."""
        with self._cond:
            if self._running:
                return
            self._running = True
        self._thread = threading.Thread(target=self._run, name="timer", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the worker thread and drop every registered event."""
        with self._cond:
            was_running = self._running
            self._running = False
            self._cond.notify_all()
        if was_running and self._thread is not None:
            if self._thread is not threading.current_thread():
                self._thread.join()
            self._thread = None
        with self._cond:
            self._events.clear()

    def __enter__(self) -> "Timer":
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        self.stop()

    def __len__(self) -> int:
        with self._cond:
            return len(self._events)

    def __contains__(self, event_id: object) -> bool:
        with self._cond:
            return event_id in self._events

    def _collect_due(self) -> Optional[list[TimerEvent]]:
        """Wait until events are due; return them, or None once stopped."""
        with self._cond:
            while self._running:
                now = time.monotonic()
                armed = [e for e in self._events.values() if e.due is not None]
                due = sorted((e for e in armed if e.due <= now), key=lambda e: e.due)
                if due:
                    due = due[: self.max_events]
                    for event in due:
                        event._reschedule(now)
                    return due
                timeout = min((e.due for e in armed), default=None)
                self._cond.wait(None if timeout is None else max(timeout - now, 0.0))
            return None

    def _run(self) -> None:
        while True:
            due = self._collect_due()
            if due is None:
                return
            for event in due:
                try:
                    event._fire()
                except Exception as exc:  # keep the dispatcher alive
                    get_printer().timemsprintf("timer callback error: %s\n", exc)


def delay(seconds: float, ms: float = 0) -> None:
    """Sleep for *seconds* plus *ms* milliseconds; negative values do nothing."""
    if seconds < 0 or ms < 0:
        return
    time.sleep(seconds + ms / 1000.0)


def deadline(seconds: float) -> float:
    """Return the wall-clock time, in epoch seconds, *seconds* from now."""
    return time.time() + seconds