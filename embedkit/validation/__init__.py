"""Validation package."""

from embedkit.validation.attribute_validator import AttributeValidator, coerce_value, validate
from embedkit.validation.models import (
    AttributeKind,
    AttributeSchema,
    AttributeSpec,
    ValidationReport,
)

__all__ = [
    "AttributeKind",
    "AttributeSchema",
    "AttributeSpec",
    "AttributeValidator",
    "ValidationReport",
    "coerce_value",
    "validate",
]
