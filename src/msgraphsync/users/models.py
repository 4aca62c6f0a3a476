from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from msgraphsync.errors import MsGraphSyncError

RawRecord = Mapping[str, Any]
AttributeSet = dict[str, Any]
PivotIndex = dict[str, AttributeSet]


# Decoded JSON as a closed set of shapes.


@dataclass(frozen=True)
class JsonNull:
    def to_python(self) -> None:
        return None


@dataclass(frozen=True)
class JsonScalar:
    value: str | int | float | bool

    def to_python(self) -> str | int | float | bool:
        return self.value


@dataclass(frozen=True)
class JsonList:
    items: tuple["JsonValue", ...] = ()

    def to_python(self) -> list[Any]:
        return [item.to_python() for item in self.items]


@dataclass(frozen=True)
class JsonMap:
    entries: tuple[tuple[str, "JsonValue"], ...] = ()

    def to_python(self) -> dict[str, Any]:
        return {key: value.to_python() for key, value in self.entries}


JsonValue = Union[JsonNull, JsonScalar, JsonList, JsonMap]


def to_json_value(obj: Any) -> JsonValue:
    """Wrap a decoded JSON value (``json.loads`` output) in its variant.

    Raises:
        TypeError: If ``obj`` is not something a JSON decoder produces.
    """
    if obj is None:
        return JsonNull()
    if isinstance(obj, Mapping):
        return JsonMap(tuple((str(k), to_json_value(v)) for k, v in obj.items()))
    if isinstance(obj, (list, tuple, set, frozenset)):
        return JsonList(tuple(to_json_value(v) for v in obj))
    if isinstance(obj, (str, int, float, bool)):
        return JsonScalar(obj)
    raise TypeError(f"Unsupported JSON value: {type(obj).__name__}")


@dataclass
class Page:
    """One page of a Graph collection response."""

    values: list[RawRecord] = field(default_factory=list)
    next_link: str | None = None

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "Page":
        """Read a collection page.

        Raises:
            ValueError: ``value`` is not a list of JSON objects.
        """
        next_link = payload.get("@odata.nextLink")
        if isinstance(next_link, str) and not next_link.strip():
            next_link = None
        values = payload.get("value") or []
        if not isinstance(values, list) or not all(
            isinstance(v, Mapping) for v in values
        ):
            raise ValueError("Page value must be a list of JSON objects")
        return cls(values=list(values), next_link=next_link)


@dataclass
class Entity:
    """A user as handed to the synchronization engine."""

    main_identifier: str
    attributes: AttributeSet = field(default_factory=dict)


@dataclass(frozen=True)
class Found:
    entity: Any


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class Failed:
    error: MsGraphSyncError


LookupResult = Union[Found, NotFound, Failed]
