"""
Pydantic schemas describing the declared shape of entity types.

A FieldDescriptor is derived once per annotated field by the field
inspector; an EntitySchema groups the descriptors of one class.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FieldKind(str, Enum):
    """Declared type tag of an entity field."""

    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STR = "str"
    MAP = "map"
    ENTITY = "entity"
    OPAQUE = "opaque"
    CLASS = "class"


# Kinds copied verbatim by to_map
BASIC_KINDS = frozenset(
    {FieldKind.BOOL, FieldKind.INT, FieldKind.FLOAT, FieldKind.STR, FieldKind.MAP}
)

# Kinds whose values are plain scalars
SCALAR_KINDS = frozenset(
    {FieldKind.BOOL, FieldKind.INT, FieldKind.FLOAT, FieldKind.STR}
)


class FieldDescriptor(BaseModel):
    """
    Introspected metadata for one public field of an entity type.

    ``target`` is the resolved class for scalar, entity and class kinds;
    it is None for map and opaque kinds.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., description="Attribute name")
    kind: FieldKind = Field(..., description="Declared type tag")
    annotation: Any = Field(default=None, description="Resolved annotation")
    target: Any = Field(default=None, description="Declared class, if any")
    nullable: bool = Field(default=False, description="Declared as X | None")


class EntitySchema(BaseModel):
    """
    All field descriptors of one entity type, in declaration order.

    ``hidden`` holds annotated names that exist on the type but are not
    publicly writable (underscore-prefixed or ClassVar).
    """

    model_config = ConfigDict(frozen=True)

    entity: str
    fields: tuple[FieldDescriptor, ...] = Field(default_factory=tuple)
    hidden: frozenset[str] = Field(default_factory=frozenset)

    def get(self, name: str) -> FieldDescriptor | None:
        """Return the public descriptor named ``name``, if any."""
        for descriptor in self.fields:
            if descriptor.name == name:
                return descriptor
        return None

    @property
    def names(self) -> list[str]:
        return [d.name for d in self.fields]


__all__ = [
    "BASIC_KINDS",
    "SCALAR_KINDS",
    "EntitySchema",
    "FieldDescriptor",
    "FieldKind",
]
