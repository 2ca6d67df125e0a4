"""Extraction package exports."""

from embedkit.extraction.embed_extractor import EmbedExtractor, extract
from embedkit.extraction.models import ExtractionResult, ShapeDescriptor, ShapeKind

__all__ = [
    "EmbedExtractor",
    "ExtractionResult",
    "ShapeDescriptor",
    "ShapeKind",
    "extract",
]
