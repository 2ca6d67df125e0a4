"""Shape descriptors and result models for embed extraction."""

from __future__ import annotations

import re
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Generic "is this a URL" check used when a descriptor does not narrow it.
DEFAULT_URL_PATTERN = r"^\s*(?:https?:)?//[^\s\"'<>]+\s*$"


class ShapeKind(str, Enum):
    """Family of embed snippet a descriptor recognises."""

    MARKUP = "markup"
    IDENTIFIER = "identifier"
    WIDGET = "widget"


class ShapeDescriptor(BaseModel):
    """Static description of one embed snippet shape.

    ``markup`` shapes match an element such as ``<iframe ...></iframe>`` and
    capture its attribute pairs. ``identifier`` shapes match a bare numeric id
    or a label ending in ``(<marker>:<value>)``. ``widget`` shapes match a
    script tag (or bare URL) pointing at a widget loader and read its query
    string parameters.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    kind: ShapeKind = ShapeKind.MARKUP

    # markup / widget
    tag: str = "iframe"
    url_pattern: str = DEFAULT_URL_PATTERN
    url_field: str = "url"
    capture: List[str] = Field(default_factory=list)
    required: List[str] = Field(default_factory=list)
    require_closing_tag: bool = True
    accept_bare_url: bool = False

    # identifier
    marker: str = "ID"
    field: str = "id"
    numeric_pattern: str = r"[0-9]+"

    # widget
    host_pattern: str = r".+"
    params: Dict[str, str] = Field(default_factory=dict)
    list_params: List[str] = Field(default_factory=list)

    @field_validator("url_pattern", "numeric_pattern", "host_pattern")
    @classmethod
    def _validate_regex(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"Invalid regex '{value}': {exc}") from exc
        return value

    @field_validator("tag", "marker")
    @classmethod
    def _validate_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Value must not be blank.")
        return value.strip()

    @model_validator(mode="after")
    def _check_widget_params(self) -> "ShapeDescriptor":
        if self.kind == ShapeKind.WIDGET and not self.params:
            raise ValueError(f"Widget shape '{self.name}' must declare at least one param.")
        return self


class ExtractionResult(BaseModel):
    """Outcome of matching one shape against raw text.

    A result is either matched, with every required field present, or a
    no-match with no fields at all.
    """

    model_config = ConfigDict(frozen=True)

    shape: str
    matched: bool
    fields: Dict[str, str] = Field(default_factory=dict)
    reason: Optional[str] = None

    @classmethod
    def match(cls, shape: str, fields: Dict[str, str]) -> "ExtractionResult":
        return cls(shape=shape, matched=True, fields=dict(fields))

    @classmethod
    def no_match(cls, shape: str, reason: str) -> "ExtractionResult":
        return cls(shape=shape, matched=False, reason=reason)

    def __bool__(self) -> bool:
        return self.matched
