"""
Concrete mapper: source map <-> entity instance.

Walks the field descriptors of an entity type and converts nested maps
into nested entity instances (``from_map``) and back (``to_map``).
"""

import copy
from collections.abc import Iterable, Mapping
from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter, ValidationError

from entitymap.config import get_settings
from entitymap.core.exceptions import (
    AccessibilityError,
    EntityError,
    InvalidFieldTypeError,
    TypeMismatchError,
    UninitializedFieldError,
    UnknownFieldError,
    UnsupportedTypeError,
    UnsupportedValueError,
)
from entitymap.core.logging import get_logger
from entitymap.mappers.base_mapper import BaseMapper
from entitymap.mappers.field_inspector import describe_fields, is_entity_type
from entitymap.schemas import (
    BASIC_KINDS,
    SCALAR_KINDS,
    EntitySchema,
    FieldDescriptor,
    FieldKind,
)

logger = get_logger(__name__)

_SCALAR_TYPES = (bool, int, float, str)

# Marks an attribute that was never assigned
_UNSET = object()


class EntityMapper(BaseMapper[Any]):
    """Map plain nested maps onto entity types and back."""

    def __init__(self, strict_scalars: bool = False) -> None:
        self._strict_scalars = strict_scalars

    @property
    def strict_scalars(self) -> bool:
        return self._strict_scalars

    # ── map → entity ──────────────────────────────────────────────────

    def from_map(self, target_type: type, source: Mapping[str, Any]) -> Any:
        """
        Create a zero-argument instance of ``target_type`` and populate it.

        Raises:
            InvalidFieldTypeError: ``target_type`` is not an entity type.
            EntityError:           Any failure raised by ``populate``.
        """
        if not is_entity_type(target_type):
            raise InvalidFieldTypeError(
                getattr(target_type, "__name__", repr(target_type)),
                reason="is not an entity type",
            )
        instance = target_type()
        self.populate(instance, source)
        return instance

    def populate(self, instance: Any, source: Mapping[str, Any]) -> None:
        """
        Assign every key of ``source`` onto ``instance``, in source order.

        Nested maps become nested entity instances unless the field is
        declared as a map. After assignment every public field must be
        initialised. On failure the instance may be partially mutated and
        should be discarded.

        Raises:
            UnknownFieldError:       A key names no field.
            AccessibilityError:      A key names a hidden field.
            InvalidFieldTypeError:   A nested map targets a non-entity field.
            UnsupportedValueError:   A value is not null, scalar or mapping.
            TypeMismatchError:       Strict mode only, scalar of the wrong type.
            UninitializedFieldError: A public field is still unset.
        """
        schema = self._schema_of(instance)

        if not isinstance(source, Mapping):
            raise UnsupportedValueError(
                schema.entity,
                reason=f"source must be a mapping, got {type(source).__name__}",
            )

        for key, value in source.items():
            descriptor = self._writable_field(schema, key)

            if value is None or isinstance(value, _SCALAR_TYPES):
                if self._strict_scalars:
                    self._check_scalar(schema.entity, descriptor, value)
                setattr(instance, key, value)

            elif isinstance(value, Mapping):
                if descriptor.kind is FieldKind.MAP:
                    setattr(instance, key, _copy_map(value))
                    continue

                if descriptor.kind is not FieldKind.ENTITY:
                    raise InvalidFieldTypeError(
                        schema.entity,
                        key,
                        reason=(
                            f"has type declaration {_type_name(descriptor)}, "
                            "which must be an entity type to accept a mapping"
                        ),
                    )

                nested = descriptor.target()
                setattr(instance, key, nested)
                self.populate(nested, value)

            else:
                raise UnsupportedValueError(
                    schema.entity,
                    key,
                    reason=(
                        "value type in source must be null, scalar or mapping, "
                        f"got {type(value).__name__}"
                    ),
                )

        for descriptor in schema.fields:
            if getattr(instance, descriptor.name, _UNSET) is _UNSET:
                raise UninitializedFieldError(
                    schema.entity,
                    descriptor.name,
                    reason="is required and has not been initialized from source",
                    details={"source": dict(source)},
                )

        logger.debug(
            "Entity populated from source map",
            extra={"entity": schema.entity, "key_count": len(source)},
        )

    def assign(self, instance: Any, values: Mapping[str, Any]) -> None:
        """
        Assign already-typed ``values`` directly, without conversion.

        Used for direct construction, where values may be entity instances.
        No completeness check is made; ``to_map`` reports unset fields.
        """
        schema = self._schema_of(instance)
        for key, value in values.items():
            self._writable_field(schema, key)
            setattr(instance, key, value)

    # ── entity → map ──────────────────────────────────────────────────

    def to_map(self, instance: Any) -> dict[str, Any]:
        """
        Return the public fields of ``instance`` as a new nested map.

        Raises:
            UninitializedFieldError: A public field was never assigned.
            UnsupportedTypeError:    Opaque declared type, null in a
                                     non-nullable field, or a scalar held by
                                     an entity-typed field.
            InvalidFieldTypeError:   A held object is not an entity.
        """
        schema = self._schema_of(instance)
        result: dict[str, Any] = {}

        for descriptor in schema.fields:
            name = descriptor.name
            value = getattr(instance, name, _UNSET)

            if value is _UNSET:
                raise UninitializedFieldError(
                    schema.entity,
                    name,
                    reason="must not be accessed before initialization",
                )

            if descriptor.kind is FieldKind.OPAQUE:
                raise UnsupportedTypeError(
                    schema.entity,
                    name,
                    reason=f'type "{_type_name(descriptor)}" is unsupported',
                )

            if value is None:
                if descriptor.nullable:
                    result[name] = None
                    continue
                raise UnsupportedTypeError(
                    schema.entity,
                    name,
                    reason='type "NoneType" is unsupported for a non-nullable field',
                )

            if descriptor.kind is FieldKind.MAP:
                result[name] = _copy_map(value)
                continue

            if descriptor.kind in BASIC_KINDS:
                result[name] = value
                continue

            if isinstance(value, _SCALAR_TYPES):
                raise UnsupportedTypeError(
                    schema.entity,
                    name,
                    reason=f'type "{type(value).__name__}" is unsupported',
                )

            if not is_entity_type(type(value)):
                raise InvalidFieldTypeError(
                    schema.entity,
                    name,
                    reason=(
                        f"holds {type(value).__name__}, "
                        "which must be an entity type"
                    ),
                )

            result[name] = self.to_map(value)

        logger.debug(
            "Entity converted to map",
            extra={"entity": schema.entity, "field_count": len(result)},
        )
        return result

    # ── Batch ─────────────────────────────────────────────────────────

    def from_many(
        self, target_type: type, sources: Iterable[Mapping[str, Any]]
    ) -> list[Any]:
        """Map a batch of source maps; the first failure stops the batch."""
        results = []
        for index, source in enumerate(sources):
            try:
                results.append(self.from_map(target_type, source))
            except EntityError as exc:
                logger.error(
                    "Batch mapping from source maps failed",
                    extra={
                        "entity": getattr(target_type, "__name__", repr(target_type)),
                        "index": index,
                        "error_code": exc.error_code,
                        "error": exc.message,
                    },
                )
                raise
        return results

    def to_many(self, instances: Iterable[Any]) -> list[dict[str, Any]]:
        """Convert a batch of instances; the first failure stops the batch."""
        results = []
        for index, instance in enumerate(instances):
            try:
                results.append(self.to_map(instance))
            except EntityError as exc:
                logger.error(
                    "Batch conversion to maps failed",
                    extra={
                        "entity": type(instance).__name__,
                        "index": index,
                        "error_code": exc.error_code,
                        "error": exc.message,
                    },
                )
                raise
        return results

    # ── Private helpers ───────────────────────────────────────────────

    @staticmethod
    def _schema_of(instance: Any) -> EntitySchema:
        cls = type(instance)
        if not is_entity_type(cls):
            raise InvalidFieldTypeError(cls.__name__, reason="is not an entity type")
        return describe_fields(cls)

    @staticmethod
    def _writable_field(schema: EntitySchema, key: Any) -> FieldDescriptor:
        """Resolve a source key to a public field descriptor."""
        descriptor = schema.get(key)
        if descriptor is not None:
            return descriptor
        if key in schema.hidden:
            raise AccessibilityError(schema.entity, key)
        raise UnknownFieldError(schema.entity, str(key))

    @staticmethod
    def _check_scalar(entity: str, descriptor: FieldDescriptor, value: Any) -> None:
        """Strict mode: the scalar must match the declared type exactly."""
        if value is None:
            if descriptor.nullable:
                return
            raise TypeMismatchError(
                entity, descriptor.name, reason="is not nullable and cannot be set to null"
            )

        if descriptor.kind is FieldKind.OPAQUE:
            return

        expected = _type_name(descriptor)
        if descriptor.kind not in SCALAR_KINDS:
            raise TypeMismatchError(
                entity,
                descriptor.name,
                reason=f"expects {expected}, got {type(value).__name__}",
            )

        try:
            _scalar_adapter(descriptor.target).validate_python(value, strict=True)
        except ValidationError as exc:
            raise TypeMismatchError(
                entity,
                descriptor.name,
                reason=f"expects {expected}, got {type(value).__name__}",
            ) from exc


@lru_cache(maxsize=None)
def _scalar_adapter(python_type: type) -> TypeAdapter:
    return TypeAdapter(python_type)


def _copy_map(value: Any) -> Any:
    """Detached plain-dict copy of a map value; other values pass through."""
    if isinstance(value, Mapping):
        return copy.deepcopy(dict(value))
    return value


def _type_name(descriptor: FieldDescriptor) -> str:
    if descriptor.target is not None:
        return descriptor.target.__name__
    return descriptor.kind.value


@lru_cache
def get_mapper() -> EntityMapper:
    """
    Cached default mapper configured from settings.
    """
    return EntityMapper(strict_scalars=get_settings().strict_scalars)
