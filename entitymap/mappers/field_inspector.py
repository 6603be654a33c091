"""
Field inspector: derive field descriptors from class annotations.

Annotations are resolved with ``typing.get_type_hints`` across the MRO,
base classes first. The schema is cached on the class itself (never
inherited by subclasses), so each entity type is inspected once and the
cache goes away with the class.
"""

from collections.abc import Mapping, MutableMapping
from types import UnionType
from typing import Any, ClassVar, Union, get_args, get_origin, get_type_hints

from entitymap.core.exceptions import (
    MissingTypeDeclarationError,
    UnsupportedTypeError,
)
from entitymap.core.logging import get_logger
from entitymap.schemas import EntitySchema, FieldDescriptor, FieldKind

logger = get_logger(__name__)

_NONE_TYPE = type(None)

# Per-class cache slot, looked up in the class __dict__ only
_SCHEMA_ATTR = "__entity_schema__"

_SCALAR_KINDS: dict[type, FieldKind] = {
    bool: FieldKind.BOOL,
    int: FieldKind.INT,
    float: FieldKind.FLOAT,
    str: FieldKind.STR,
}

_MAP_TYPES = (dict, Mapping, MutableMapping)

_COLLECTION_TYPES = (list, tuple, set, frozenset)


def is_entity_type(obj: Any) -> bool:
    """True if ``obj`` is a class carrying the entity capability."""
    return isinstance(obj, type) and getattr(obj, "__entity__", False) is True


def describe_fields(cls: type) -> EntitySchema:
    """
    Return the EntitySchema of ``cls``.

    Raises:
        MissingTypeDeclarationError: A public class attribute has no annotation.
        UnsupportedTypeError:        An annotation is not a mappable type.
    """
    cached = vars(cls).get(_SCHEMA_ATTR)
    if cached is not None:
        return cached

    entity = cls.__name__

    try:
        hints = get_type_hints(cls, localns={entity: cls})
    except (NameError, TypeError) as exc:
        raise UnsupportedTypeError(
            entity, reason=f"annotations could not be resolved: {exc}"
        ) from exc

    _check_declarations(cls, hints)

    fields: list[FieldDescriptor] = []
    hidden: set[str] = set()

    for name, annotation in hints.items():
        if name.startswith("_") or annotation is ClassVar or get_origin(annotation) is ClassVar:
            hidden.add(name)
            continue

        kind, target, nullable = _classify(entity, name, annotation)
        fields.append(
            FieldDescriptor(
                name=name,
                kind=kind,
                annotation=annotation,
                target=target,
                nullable=nullable,
            )
        )

    schema = EntitySchema(entity=entity, fields=tuple(fields), hidden=frozenset(hidden))
    setattr(cls, _SCHEMA_ATTR, schema)

    logger.debug(
        "Entity fields described",
        extra={"entity": entity, "fields": schema.names, "hidden": sorted(hidden)},
    )
    return schema


# ── Private helpers ───────────────────────────────────────────────────


def _check_declarations(cls: type, hints: dict[str, Any]) -> None:
    """Every public data attribute defined on the class must be annotated."""
    for base in cls.__mro__:
        if base is object:
            continue
        for name, value in vars(base).items():
            if name.startswith("_") or name in hints:
                continue
            # methods, properties, nested classes and other descriptors
            if callable(value) or hasattr(type(value), "__get__"):
                continue
            raise MissingTypeDeclarationError(cls.__name__, name)


def _classify(entity: str, name: str, annotation: Any) -> tuple[FieldKind, type | None, bool]:
    """Map an annotation to (kind, target class, nullable)."""
    nullable = False

    origin = get_origin(annotation)
    if origin is Union or origin is UnionType:
        members = get_args(annotation)
        args = [a for a in members if a is not _NONE_TYPE]
        nullable = len(args) < len(members)
        if len(args) != 1:
            raise UnsupportedTypeError(
                entity, name, reason=f"union type {annotation!r} is unsupported"
            )
        annotation = args[0]
        origin = get_origin(annotation)

    if annotation is Any or annotation is object:
        return FieldKind.OPAQUE, None, nullable

    if annotation in _MAP_TYPES or origin in _MAP_TYPES:
        return FieldKind.MAP, None, nullable

    if origin is not None or not isinstance(annotation, type) or annotation is _NONE_TYPE:
        raise UnsupportedTypeError(
            entity, name, reason=f"type {annotation!r} is unsupported"
        )

    if annotation in _SCALAR_KINDS:
        return _SCALAR_KINDS[annotation], annotation, nullable

    if issubclass(annotation, _COLLECTION_TYPES):
        raise UnsupportedTypeError(
            entity, name, reason=f"collection type {annotation.__name__!r} is unsupported"
        )

    if is_entity_type(annotation):
        return FieldKind.ENTITY, annotation, nullable

    return FieldKind.CLASS, annotation, nullable
