"""Pipeline package."""

from embedkit.pipeline.embed_parser import EmbedParser, ParseOutcome

__all__ = ["EmbedParser", "ParseOutcome"]
