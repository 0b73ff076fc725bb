"""Minimal signal/slot dispatch."""

from __future__ import annotations

from typing import Any, Callable


class Signal:
    """Calls every bound slot, in binding order, with the emitted arguments."""

    def __init__(self) -> None:
        self._slots: list[Callable[..., Any]] = []

    def bind(self, slot: Callable[..., Any]) -> None:
        """Add *slot* to the slots called on emission."""
        if not callable(slot):
            raise TypeError("slot must be callable")
        self._slots.append(slot)

    def __call__(self, *args: Any) -> None:
        for slot in list(self._slots):
            slot(*args)

    def __len__(self) -> int:
        return len(self._slots)


def connect(sender: Any, signal_name: str, slot: Callable[..., Any]) -> None:
    """Bind *slot* to the signal named *signal_name* on *sender*."""
    signal = getattr(sender, signal_name)
    if not isinstance(signal, Signal):
        raise TypeError(f"{signal_name!r} is not a Signal")
    signal.bind(slot)