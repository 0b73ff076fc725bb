"""A string-keyed bag of loosely typed values."""

from __future__ import annotations

from typing import Any


def _to_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return ""


def _to_int(value: Any) -> int:
    if isinstance(value, (bool, int)):
        return int(value)
    if isinstance(value, float):
        return round(value)
    if isinstance(value, (str, bytes, bytearray)):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0


class Bundle:
    """Maps string keys to values with typed accessors that fall back to defaults."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    def put(self, key: str, value: Any) -> None:
        self._data[key] = value

    def get(self, key: str) -> Any:
        """Return the stored value, or None when *key* is absent."""
        return self._data.get(key)

    def put_string(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def get_string(self, key: str) -> str:
        """Return the value as text, or an empty string if absent or not convertible."""
        if key not in self._data:
            return ""
        return _to_string(self._data[key])

    def put_int(self, key: str, value: int) -> None:
        self._data[key] = int(value)

    def get_int(self, key: str) -> int:
        """Return the value as an integer, or 0 if absent or not convertible."""
        if key not in self._data:
            return 0
        return _to_int(self._data[key])

    def put_enum(self, key: str, value: int) -> None:
        self.put_int(key, value)

    def get_enum(self, key: str) -> int:
        return self.get_int(key)

    def __contains__(self, key: object) -> bool:
        return key in self._data