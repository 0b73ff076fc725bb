"""Field descriptors, enum entries and the value conversions used by struct reflection."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

ENUM_TYPE = 0x01
BIT_TYPE = 0x02

Value = Union[int, float, str]

_INT_TEXT = re.compile(r"\s*[+-]?\d+\s*")


class FieldType(Enum):
    """The field types a reflected struct may hold."""

    INT = "int"
    SHORT = "short"
    INT8 = "int8"
    UINT = "uint"
    USHORT = "ushort"
    CHAR = "char"
    UCHAR = "uchar"
    DOUBLE = "double"
    STRING = "string"

    @property
    def is_integer(self) -> bool:
        return self in _INT_LAYOUT

    @property
    def default(self) -> Value:
        """The zero value of this type."""
        if self is FieldType.DOUBLE:
            return 0.0
        if self is FieldType.STRING:
            return ""
        return 0

    def wrap(self, value: int) -> int:
        """Truncate *value* to the width and signedness of this integer type."""
        if self not in _INT_LAYOUT:
            raise TypeError(f"{self.value} is not an integer type")
        bits, signed = _INT_LAYOUT[self]
        value &= (1 << bits) - 1
        if signed and value >= 1 << (bits - 1):
            value -= 1 << bits
        return value


_INT_LAYOUT: dict[FieldType, tuple[int, bool]] = {
    FieldType.INT: (32, True),
    FieldType.SHORT: (16, True),
    FieldType.INT8: (8, True),
    FieldType.UINT: (32, False),
    FieldType.USHORT: (16, False),
    FieldType.CHAR: (8, True),
    FieldType.UCHAR: (8, False),
}


@dataclass(frozen=True)
class FieldMeta:
    """Describes one struct member: its name, type and optional enum/bit styling."""

    name: str
    type: FieldType
    style: int = 0
    bit: int = 0
    bit_size: int = 0

    @property
    def is_enum(self) -> bool:
        return bool(self.style & ENUM_TYPE)

    @property
    def is_bit(self) -> bool:
        return bool(self.style & BIT_TYPE)


@dataclass(frozen=True)
class EnumEntry:
    """A named enum value belonging to enum group *node*."""

    node: int
    name: str
    value: int


def byte_swap(data: bytes, width: int) -> bytes:
    """Reverse the byte order of each *width*-byte word in *data*.

    Data whose length is not a multiple of *width* is returned unchanged, as
    are widths other than 2 and 4.
    """
    data = bytes(data)
    if width <= 0 or len(data) % width or width not in (2, 4):
        return data
    return b"".join(data[start:start + width][::-1] for start in range(0, len(data), width))


def bit_clear(value: int, bit: int, size: int) -> int:
    """Clear the *size* bits of *value* starting at *bit*."""
    mask = (1 << size) - 1
    return value & ~(mask << bit)


def bit_set(value: int, bit: int, size: int, val: int) -> int:
    """Store *val* in the *size*-bit field of *value* at *bit*.

    A *val* that does not fit in *size* bits leaves *value* unchanged.
    """
    if val >= 1 << size:
        return value
    return bit_clear(value, bit, size) | (val << bit)


def _parse_int(text: str, low: int, high: int) -> int:
    if not _INT_TEXT.fullmatch(text):
        return 0
    number = int(text.strip())
    return number if low <= number <= high else 0


def _parse_double(text: str) -> float:
    stripped = text.strip()
    if not stripped or "_" in stripped:
        return 0.0
    try:
        return float(stripped)
    except ValueError:
        return 0.0


def _first_char(text: str) -> int:
    if not text:
        return 0
    code = ord(text[0])
    if code > 0xFF:
        code = ord("?")
    return FieldType.CHAR.wrap(code)


def convert_text(field_type: FieldType, text: str) -> Value:
    """Convert *text* to a value of *field_type*; unparsable text gives zero."""
    if field_type is FieldType.INT:
        return _parse_int(text, -(1 << 31), (1 << 31) - 1)
    if field_type is FieldType.SHORT:
        return _parse_int(text, -(1 << 15), (1 << 15) - 1)
    if field_type is FieldType.INT8:
        return FieldType.INT8.wrap(_parse_int(text, -(1 << 15), (1 << 15) - 1))
    if field_type is FieldType.UINT:
        return _parse_int(text, 0, (1 << 32) - 1)
    if field_type is FieldType.USHORT:
        return _parse_int(text, 0, (1 << 16) - 1)
    if field_type is FieldType.UCHAR:
        return FieldType.UCHAR.wrap(_parse_int(text, 0, (1 << 16) - 1))
    if field_type is FieldType.CHAR:
        return _first_char(text)
    if field_type is FieldType.DOUBLE:
        return _parse_double(text)
    if field_type is FieldType.STRING:
        return str(text)
    raise TypeError(f"unsupported field type {field_type!r}")