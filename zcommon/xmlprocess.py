"""Writing reflected objects out as XML attribute elements."""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any, Iterable
from xml.etree.ElementTree import Element, SubElement

from zcommon.fields import FieldType
from zcommon.reflect import StructParser

ITEM_TAG = "lh"


def _read_member(obj: Any, name: str, default: Any) -> Any:
    if isinstance(obj, MutableMapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _format(field_type: FieldType, value: Any) -> str:
    if field_type is FieldType.STRING:
        return str(value)
    if field_type is FieldType.DOUBLE:
        return "%g" % float(value)
    if field_type is FieldType.CHAR:
        code = int(value) & 0xFF
        return chr(code) if code else ""
    return str(int(value))


class XmlWriter:
    """Serialises objects described by a :class:`StructParser` as ``<lh .../>`` elements."""

    def __init__(self, parser: StructParser) -> None:
        self.parser = parser

    def write_attributes(self, parent: Element, obj: Any) -> Element:
        """Append an ``lh`` element holding one attribute per field of *obj*."""
        item = SubElement(parent, ITEM_TAG)
        for field in self.parser.fields:
            storage = self.parser.storage[field]
            value = _read_member(obj, storage, field.type.default)
            item.set(field.name, _format(field.type, value))
        return item

    def write_doc(self, root: Element, name: str, items: Iterable[Any]) -> Element:
        """Append an element called *name* to *root* with one ``lh`` child per item."""
        element = SubElement(root, name)
        for obj in items:
            self.write_attributes(element, obj)
        return element