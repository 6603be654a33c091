"""
entitymap: reflective mapping between plain nested maps and typed entities.
"""

from entitymap.core.exceptions import (
    AccessibilityError,
    EntityError,
    InvalidFieldTypeError,
    MissingTypeDeclarationError,
    TypeMismatchError,
    UninitializedFieldError,
    UnknownFieldError,
    UnsupportedTypeError,
    UnsupportedValueError,
)
from entitymap.entity import Entity, SupportsEntityMap, entity
from entitymap.mappers.entity_mapper import EntityMapper, get_mapper
from entitymap.mappers.field_inspector import describe_fields, is_entity_type
from entitymap.schemas import EntitySchema, FieldDescriptor, FieldKind

__version__ = "1.0.0"

__all__ = [
    "AccessibilityError",
    "Entity",
    "EntityError",
    "EntityMapper",
    "EntitySchema",
    "FieldDescriptor",
    "FieldKind",
    "InvalidFieldTypeError",
    "MissingTypeDeclarationError",
    "SupportsEntityMap",
    "TypeMismatchError",
    "UninitializedFieldError",
    "UnknownFieldError",
    "UnsupportedTypeError",
    "UnsupportedValueError",
    "describe_fields",
    "entity",
    "get_mapper",
    "is_entity_type",
]
