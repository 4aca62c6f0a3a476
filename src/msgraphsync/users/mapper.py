"""Flatten Graph user payloads into attribute sets.

Graph returns complex properties as nested objects, for instance::

    {"onPremisesExtensionAttributes": {"extensionAttribute1": "toto", ...}}

These are exposed as ``"<key>/<childKey>"`` entries, e.g.
``"onPremisesExtensionAttributes/extensionAttribute1": "toto"``. Null values
become an empty list so that consumers never see ``None``.
"""

from __future__ import annotations

from typing import Any, Iterator

from .models import (
    AttributeSet,
    JsonList,
    JsonMap,
    JsonNull,
    JsonScalar,
    JsonValue,
    RawRecord,
    to_json_value,
)

SEPARATOR = "/"


def normalize(record: RawRecord) -> AttributeSet:
    """Return the flattened attribute set of a raw Graph record."""
    attributes: AttributeSet = {}
    for key, value in record.items():
        for flat_key, flat_value in _flatten(str(key), to_json_value(value)):
            attributes[flat_key] = flat_value
    return attributes


def _flatten(key: str, value: JsonValue) -> Iterator[tuple[str, Any]]:
    match value:
        case JsonMap(entries=entries):
            for child_key, child_value in entries:
                yield from _flatten(f"{key}{SEPARATOR}{child_key}", child_value)
        case JsonNull():
            yield key, []
        case JsonList() | JsonScalar():
            yield key, value.to_python()


def first_value(value: Any) -> Any:
    """Return the first element of a collection value, or the value itself.

    Empty collections and ``None`` give ``None``.
    """
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    if isinstance(value, (set, frozenset)):
        return next(iter(value), None)
    return value
