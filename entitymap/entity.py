"""
Entity capability: base class, class decorator and protocol.

A class becomes an entity type either by subclassing ``Entity`` or by
decorating it with ``@entity``. Its public annotated attributes are its
fields; the annotations are the single source of truth for mapping.

    class UserLocation(Entity):
        city: str

    class User(Entity):
        name: str
        age: int
        location: UserLocation
        friend: "User | None" = None

    user = User({"name": "Bob", "age": 30, "location": {"city": "Tampa"}})
    user.to_map()
"""

from collections.abc import Mapping
from typing import Any, ClassVar, Protocol, TypeVar, runtime_checkable

from entitymap.mappers.entity_mapper import get_mapper
from entitymap.mappers.field_inspector import describe_fields

T = TypeVar("T", bound=type)

_UNSET = object()


@runtime_checkable
class SupportsEntityMap(Protocol):
    """Anything that can be populated from, and rendered to, a source map."""

    def from_map(self, source: Mapping[str, Any]) -> None: ...

    def to_map(self) -> dict[str, Any]: ...


def _from_map(self: Any, source: Mapping[str, Any]) -> None:
    """Populate this instance in place from ``source``."""
    get_mapper().populate(self, source)


def _to_map(self: Any) -> dict[str, Any]:
    """Return this instance's public fields as a new nested map."""
    return get_mapper().to_map(self)


class Entity:
    """
    Base class for entity types.

    Args:
        data:   Optional source map, applied through ``from_map``.
        values: Field values assigned directly (may hold entity instances).
    """

    __entity__: ClassVar[bool] = True

    def __init__(self, data: Mapping[str, Any] | None = None, /, **values: Any) -> None:
        if values:
            get_mapper().assign(self, values)
        if data:
            self.from_map(data)

    from_map = _from_map
    to_map = _to_map

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return all(
            getattr(self, name, _UNSET) == getattr(other, name, _UNSET)
            for name in describe_fields(type(self)).names
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        parts = []
        for name in describe_fields(type(self)).names:
            value = getattr(self, name, _UNSET)
            if value is not _UNSET:
                parts.append(f"{name}={value!r}")
        return f"{type(self).__name__}({', '.join(parts)})"


def entity(cls: T) -> T:
    """
    Class decorator granting the entity capability without inheritance.

    Adds ``from_map`` and ``to_map`` unless the class defines its own.
    The class must still be constructible with zero arguments to be used
    as a nested field type.
    """
    cls.__entity__ = True
    if "from_map" not in vars(cls):
        cls.from_map = _from_map
    if "to_map" not in vars(cls):
        cls.to_map = _to_map
    return cls
