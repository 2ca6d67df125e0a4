"""Embed-code extraction and block attribute validation."""

from embedkit.extraction import (
    EmbedExtractor,
    ExtractionResult,
    ShapeDescriptor,
    ShapeKind,
    extract,
)
from embedkit.integrations import Integration, IntegrationRegistry
from embedkit.pipeline import EmbedParser, ParseOutcome
from embedkit.validation import AttributeSchema, AttributeSpec, AttributeValidator, validate

__version__ = "0.1.0"

__all__ = [
    "AttributeSchema",
    "AttributeSpec",
    "AttributeValidator",
    "EmbedExtractor",
    "EmbedParser",
    "ExtractionResult",
    "Integration",
    "IntegrationRegistry",
    "ParseOutcome",
    "ShapeDescriptor",
    "ShapeKind",
    "extract",
    "validate",
]
