"""Regex-based extractor for pasted third-party embed snippets."""

from __future__ import annotations

import html
import re
from functools import lru_cache
from typing import Dict, List, Optional
from urllib.parse import parse_qs, urlsplit

from loguru import logger

from embedkit.extraction.models import ExtractionResult, ShapeDescriptor, ShapeKind

# name="value" or name='value'; the value may not contain its own quote character.
ATTRIBUTE_RE = re.compile(r"(?:^|\s)([\w:.-]+)\s*=\s*([\"'])(.*?)\2", re.DOTALL)


@lru_cache(maxsize=64)
def _opening_pattern(tag: str) -> re.Pattern[str]:
    # Quoted values may contain '<' or '>' so the opening tag is read token by token.
    # Every character belongs to exactly one token and the loop never gives any back.
    return re.compile(
        rf"<\s*{re.escape(tag)}\b(?P<attrs>(?:[^<>\"']|\"[^\"]*\"|'[^']*')*+)>",
        re.IGNORECASE,
    )


@lru_cache(maxsize=64)
def _closing_pattern(tag: str) -> re.Pattern[str]:
    return re.compile(rf"<\s*/\s*{re.escape(tag)}\s*>", re.IGNORECASE)


@lru_cache(maxsize=64)
def _compiled(pattern: str, flags: int = 0) -> re.Pattern[str]:
    return re.compile(pattern, flags)


def _find_element(text: str, shape: ShapeDescriptor) -> Optional[re.Match[str]]:
    element = _opening_pattern(shape.tag).search(text)
    if element is None:
        return None
    # No later opening tag can have a closing tag if the first one has none.
    if shape.require_closing_tag and not _closing_pattern(shape.tag).search(text, element.end()):
        return None
    return element


def _attributes(element: re.Match[str]) -> List[re.Match[str]]:
    attrs = element.group("attrs").rstrip()
    if attrs.endswith("/"):
        attrs = attrs[:-1]
    return list(ATTRIBUTE_RE.finditer(attrs))


class EmbedExtractor:
    """Extracts structured fields from raw embed text using a shape descriptor.

    The extractor is stateless apart from its input length limit, so a single
    instance can be shared freely.
    """

    def __init__(self, max_input_length: Optional[int] = None) -> None:
        self.max_input_length = max_input_length

    def extract(self, raw_text: str | None, shape: ShapeDescriptor) -> ExtractionResult:
        """Match ``raw_text`` against ``shape``.

        Never raises for malformed input; a failed match is returned as an
        ``ExtractionResult`` with ``matched=False``.
        """
        if not isinstance(raw_text, str) or not raw_text.strip():
            return self._miss(shape, "empty input")

        if self.max_input_length is not None and len(raw_text) > self.max_input_length:
            return self._miss(shape, f"input longer than {self.max_input_length} characters")

        working = raw_text.strip()

        if shape.kind == ShapeKind.IDENTIFIER:
            return self._extract_identifier(working, shape)
        if shape.kind == ShapeKind.WIDGET:
            return self._extract_widget(working, shape)
        return self._extract_markup(working, shape)

    def extract_first(
        self, raw_text: str | None, shapes: List[ShapeDescriptor]
    ) -> ExtractionResult:
        """Try each shape in order and return the first match (or the last miss)."""
        result = ExtractionResult.no_match("none", "no shapes configured")
        for shape in shapes:
            result = self.extract(raw_text, shape)
            if result.matched:
                return result
        return result

    def _extract_markup(self, text: str, shape: ShapeDescriptor) -> ExtractionResult:
        url_re = _compiled(shape.url_pattern, re.IGNORECASE)

        if shape.accept_bare_url and url_re.match(text):
            return self._finish(shape, {shape.url_field: html.unescape(text).strip()})

        element = _find_element(text, shape)
        if element is None:
            return self._miss(shape, f"no complete <{shape.tag}> element found")

        fields: Dict[str, str] = {}
        for attr in _attributes(element):
            name = attr.group(1).lower()
            value = html.unescape(attr.group(3)).strip()

            # A URL-shaped value always lands on the url field, whatever its attribute name.
            if url_re.match(value):
                fields.setdefault(shape.url_field, value)
                continue
            if name == shape.url_field:
                continue
            if shape.capture and name not in shape.capture:
                continue
            fields.setdefault(name, value)

        return self._finish(shape, fields)

    def _extract_identifier(self, text: str, shape: ShapeDescriptor) -> ExtractionResult:
        if _compiled(shape.numeric_pattern).fullmatch(text):
            return self._finish(shape, {shape.field: text})

        # The label is "<anything> (MARKER:value)" on the last line; the value
        # runs from the first marker to the closing parenthesis.
        label = text.rsplit("\n", 1)[-1]
        opener = f"({shape.marker}:"
        start = label.find(opener)
        value = ""
        if start >= 0 and label.endswith(")"):
            value = label[start + len(opener) : -1].strip()
        if not value:
            return self._miss(shape, f"no identifier or ({shape.marker}:...) label found")

        return self._finish(shape, {shape.field: value})

    def _extract_widget(self, text: str, shape: ShapeDescriptor) -> ExtractionResult:
        src = None
        element = _find_element(text, shape)
        if element is not None:
            for attr in _attributes(element):
                if attr.group(1).lower() == "src":
                    src = html.unescape(attr.group(3)).strip()
                    break
        elif shape.accept_bare_url and _compiled(shape.url_pattern, re.IGNORECASE).match(text):
            src = html.unescape(text)

        if not src:
            return self._miss(shape, f"no <{shape.tag}> source URL found")

        if src.startswith("//"):
            src = "https:" + src
        parsed = urlsplit(src)
        if not parsed.netloc or not _compiled(shape.host_pattern, re.IGNORECASE).search(
            parsed.netloc
        ):
            return self._miss(shape, f"source host does not match {shape.host_pattern}")

        query = parse_qs(parsed.query)
        fields: Dict[str, str] = {}
        for param, target in shape.params.items():
            values = query.get(param, []) + query.get(f"{param}[]", [])
            if param in shape.list_params:
                tokens = [token.strip() for value in values for token in value.split(",")]
                tokens = [token for token in tokens if token]
                if tokens:
                    fields[target] = ",".join(tokens)
            elif values and values[0].strip():
                fields[target] = values[0].strip()

        return self._finish(shape, fields)

    def _finish(self, shape: ShapeDescriptor, fields: Dict[str, str]) -> ExtractionResult:
        missing = [name for name in shape.required if not fields.get(name)]
        if missing:
            return self._miss(shape, f"missing required field(s): {', '.join(missing)}")
        logger.debug(f"Shape '{shape.name}' matched with fields {sorted(fields)}")
        return ExtractionResult.match(shape.name, fields)

    def _miss(self, shape: ShapeDescriptor, reason: str) -> ExtractionResult:
        logger.debug(f"Shape '{shape.name}' did not match: {reason}")
        return ExtractionResult.no_match(shape.name, reason)


_default_extractor = EmbedExtractor()


def extract(raw_text: str | None, shape: ShapeDescriptor) -> ExtractionResult:
    """Match ``raw_text`` against ``shape`` with no input length limit."""
    return _default_extractor.extract(raw_text, shape)
