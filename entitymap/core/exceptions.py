"""
Exception hierarchy for entity mapping.

All mapping failures inherit from EntityError, so callers can catch a
single type while still branching on the precise kind.

Hierarchy:
    EntityError
    ├── MissingTypeDeclarationError : Public attribute without an annotation
    ├── UnsupportedTypeError        : Declared type / value type not mappable
    ├── UnknownFieldError           : Source key with no matching field
    ├── AccessibilityError          : Field exists but is not publicly writable
    ├── InvalidFieldTypeError       : Nested target is not an entity type
    ├── UnsupportedValueError       : Source value is not null, scalar or map
    ├── UninitializedFieldError     : Required field was never assigned
    └── TypeMismatchError           : Scalar does not match declared type (strict mode)
"""

from typing import Any


class EntityError(Exception):
    """
    Base exception for all entity mapping errors.

    Attributes:
        message:    Human-readable error description.
        error_code: Machine-readable error identifier (e.g. "UNKNOWN_FIELD").
        details:    Extra context for debugging (entity, field, source, ...).
    """

    def __init__(
        self,
        message: str = "Entity mapping failed.",
        error_code: str = "ENTITY_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the exception into a JSON-friendly dict."""
        payload: dict[str, Any] = {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
        }
        if self.details:
            payload["details"] = self.details
        return payload


class _FieldError(EntityError):
    """
    Shared constructor for errors about an entity type or one of its fields.

    ``field_name`` is omitted when the error concerns the type as a whole.
    """

    default_reason = "mapping failed"
    error_code = "ENTITY_ERROR"

    def __init__(
        self,
        entity: str,
        field_name: str | None = None,
        reason: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.entity = entity
        self.field_name = field_name

        context: dict[str, Any] = {**(details or {}), "entity": entity}
        if field_name is None:
            subject = f"Entity {entity}"
        else:
            subject = f"Entity property {entity}.{field_name}"
            context["field"] = field_name

        super().__init__(
            message=f"{subject} {reason or self.default_reason}",
            error_code=self.error_code,
            details=context,
        )


# ─── Definition Errors ───────────────────────────────────────────────


class MissingTypeDeclarationError(_FieldError):
    """Raised when a public class attribute has no type annotation."""

    default_reason = "must have a type declaration"
    error_code = "MISSING_TYPE_DECLARATION"


class UnsupportedTypeError(_FieldError):
    """Raised when a declared type (or a held value's type) cannot be mapped."""

    default_reason = "type is unsupported"
    error_code = "UNSUPPORTED_TYPE"


# ─── Source Map Errors ───────────────────────────────────────────────


class UnknownFieldError(_FieldError):
    """Raised when a source key names no field of the target entity."""

    default_reason = "does not exist"
    error_code = "UNKNOWN_FIELD"


class AccessibilityError(_FieldError):
    """Raised when a source key names a hidden (non-public) field."""

    default_reason = "must have public accessibility"
    error_code = "FIELD_NOT_ACCESSIBLE"


class InvalidFieldTypeError(_FieldError):
    """Raised when a nested value targets a type that is not an entity."""

    default_reason = "must be declared as an entity type"
    error_code = "INVALID_FIELD_TYPE"


class UnsupportedValueError(_FieldError):
    """Raised when a source value is not null, a scalar or a mapping."""

    default_reason = "value type must be null, scalar or mapping"
    error_code = "UNSUPPORTED_VALUE"


class UninitializedFieldError(_FieldError):
    """Raised when a public field has never been assigned."""

    default_reason = "has not been initialized"
    error_code = "UNINITIALIZED_FIELD"


class TypeMismatchError(_FieldError):
    """Raised in strict mode when a scalar does not match the declared type."""

    default_reason = "value does not match its declared type"
    error_code = "TYPE_MISMATCH"
