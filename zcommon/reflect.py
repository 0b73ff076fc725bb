"""Reflection over plain objects: fill fields from text, XML elements and bundles."""

from __future__ import annotations

import re
from collections.abc import MutableMapping
from typing import Any, Callable, Iterable, Optional, Union
from xml.etree.ElementTree import Element

from zcommon.bundle import Bundle
from zcommon.fields import EnumEntry, FieldMeta, FieldType, bit_set, convert_text

FieldSpec = Union[FieldMeta, "tuple[FieldMeta, str]"]

_ATOI = re.compile(r"\s*([+-]?\d+)")
_ATOF = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

_COPYABLE = (FieldType.INT, FieldType.DOUBLE, FieldType.STRING)


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    return FieldType.INT.wrap(int(match.group(1))) if match else 0


def _atof(text: str) -> float:
    match = _ATOF.match(text)
    return float(match.group(1)) if match else 0.0


def _get(obj: Any, name: str, default: Any) -> Any:
    if isinstance(obj, MutableMapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _set(obj: Any, name: str, value: Any) -> None:
    if isinstance(obj, MutableMapping):
        obj[name] = value
    else:
        setattr(obj, name, value)


class StructParser:
    """Reads and writes the described fields of objects built by *factory*.

    Each entry of *fields* is a :class:`FieldMeta`, or a ``(FieldMeta, storage)``
    pair when the field is a bit range of another member named *storage*.
    Objects may be mappings or plain objects with attributes.
    """

    def __init__(
        self,
        factory: Callable[[], Any],
        fields: Iterable[FieldSpec],
        enums: Iterable[EnumEntry] = (),
    ) -> None:
        self.factory = factory
        self.fields: list[FieldMeta] = []
        self.storage: dict[FieldMeta, str] = {}
        for spec in fields:
            if isinstance(spec, FieldMeta):
                field, storage = spec, spec.name
            else:
                field, storage = spec
            if field.type is FieldType.DOUBLE and field.is_bit:
                raise ValueError(f"double field {field.name!r} cannot be a bit field")
            self.fields.append(field)
            self.storage[field] = storage
        self.enums: list[EnumEntry] = list(enums)

    def _check_copyable(self) -> None:
        for field in self.fields:
            if field.type not in _COPYABLE:
                raise TypeError(
                    f"field {field.name!r} of type {field.type.value} is not supported;"
                    " only int, double and string are"
                )

    def parse(self, obj: Any, text: str) -> Any:
        """Fill fields from ``"a=5;b=6.0;c=text"``, matching segments to fields by position.

        Segments are reused from the start when the fields outnumber them;
        strings are appended to the current value.
        """
        self._check_copyable()
        segments = text.split(";")
        for index, field in enumerate(self.fields):
            segment = segments[index % len(segments)]
            _, sep, value = segment.partition("=")
            if not sep:
                value = segment
            storage = self.storage[field]
            if field.type is FieldType.INT:
                _set(obj, storage, _atoi(value))
            elif field.type is FieldType.DOUBLE:
                _set(obj, storage, _atof(value))
            else:
                _set(obj, storage, _get(obj, storage, "") + value)
        return obj

    def copy_values(self, source: Any, target: Any) -> Any:
        """Copy int and double fields to *target* and append its string fields."""
        self._check_copyable()
        for field in self.fields:
            storage = self.storage[field]
            value = _get(source, storage, field.type.default)
            if field.type is FieldType.STRING:
                _set(target, storage, _get(target, storage, "") + value)
            else:
                _set(target, storage, value)
        return target

    def string_data(self, field: FieldMeta, obj: Any, text: str) -> None:
        """Convert *text* to the field's type and store it, honouring enum and bit styling."""
        storage = self.storage.get(field, field.name)
        if field.type is FieldType.STRING:
            _set(obj, storage, str(text))
            return
        if field.is_enum:
            try:
                number = self.enum_value(text)
            except KeyError:
                number = 0
            value: Any = float(number) if field.type is FieldType.DOUBLE else field.type.wrap(number)
        else:
            value = convert_text(field.type, text)
        if field.is_bit:
            current = int(_get(obj, storage, 0))
            value = field.type.wrap(bit_set(current, field.bit, field.bit_size, value))
        _set(obj, storage, value)

    def enum_value(self, name: str, node: Optional[int] = None) -> int:
        """Return the value of enum *name*, restricted to group *node* if given."""
        for entry in self.enums:
            if entry.name == name and (node is None or entry.node == node):
                return entry.value
        raise KeyError(name)

    def enum_names(self, node: int) -> list[str]:
        """Return the names of the enum entries in group *node*, in order."""
        return [entry.name for entry in self.enums if entry.node == node]

    def read_field(self, obj: Any, name: str, text: str) -> Any:
        """Set every field called *name* from *text*."""
        for field in self.fields:
            if field.name == name:
                self.string_data(field, obj, text)
        return obj

    def read_element(self, obj: Any, element: Element) -> Any:
        """Set every field from the same-named attribute of *element* (missing means empty)."""
        for field in self.fields:
            self.string_data(field, obj, element.get(field.name, ""))
        return obj

    def from_element(self, element: Element) -> Any:
        """Build a new object with the factory and fill it from *element*."""
        return self.read_element(self.factory(), element)

    def set_bundle(self, obj: Any, bundle: Bundle) -> Any:
        """Set the fields whose names are keys of *bundle*."""
        for field in self.fields:
            if field.name in bundle:
                self.string_data(field, obj, bundle.get_string(field.name))
        return obj