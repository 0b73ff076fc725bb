"""Levelled printing, a buffer ring, signals, struct reflection with XML, timers and UDP/TCP helpers."""

__version__ = "1.8.0"