from entitymap.core.exceptions import (
    EntityError,
    MissingTypeDeclarationError,
    UnsupportedTypeError,
    UnknownFieldError,
    AccessibilityError,
    InvalidFieldTypeError,
    UnsupportedValueError,
    UninitializedFieldError,
    TypeMismatchError,
)
from entitymap.core.logging import setup_logging, get_logger

__all__ = [
    "EntityError",
    "MissingTypeDeclarationError",
    "UnsupportedTypeError",
    "UnknownFieldError",
    "AccessibilityError",
    "InvalidFieldTypeError",
    "UnsupportedValueError",
    "UninitializedFieldError",
    "TypeMismatchError",
    "setup_logging",
    "get_logger",
]
