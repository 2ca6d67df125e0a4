"""OpenTable reservation block.

Accepts the widget ``<script>`` embed code (or its bare loader URL), a bare
numeric restaurant id, or a picker label such as ``"Trattoria Roma (ID:98765)"``.
"""

from typing import Any, Dict, Optional

from embedkit.extraction.models import ShapeDescriptor, ShapeKind
from embedkit.integrations.models import Integration
from embedkit.validation.models import AttributeKind, AttributeSchema, AttributeSpec

STYLE_VALUES = ["standard", "tall", "wide", "button"]
LANGUAGE_VALUES = ["en-US", "fr-CA", "de-DE", "es-MX", "ja-JP", "nl-NL", "it-IT"]

OPENTABLE_SHAPES = [
    ShapeDescriptor(
        name="opentable-widget",
        kind=ShapeKind.WIDGET,
        tag="script",
        host_pattern=r"(?:^|\.)opentable\.",
        params={
            "rid": "rid",
            "type": "type",
            "theme": "theme",
            "iframe": "iframe",
            "domain": "domain",
            "lang": "lang",
            "newtab": "newtab",
        },
        list_params=["rid"],
        required=["rid"],
        accept_bare_url=True,
    ),
    ShapeDescriptor(
        name="opentable-restaurant-id",
        kind=ShapeKind.IDENTIFIER,
        marker="ID",
        field="rid",
    ),
]

OPENTABLE_SCHEMA = AttributeSchema(
    attributes={
        "rid": AttributeSpec(default=[], kind=AttributeKind.LIST, pattern=r"[0-9]+"),
        "style": AttributeSpec(
            default="standard", kind=AttributeKind.STRING, allowed_values=STYLE_VALUES
        ),
        "language": AttributeSpec(
            default="en-US", kind=AttributeKind.STRING, allowed_values=LANGUAGE_VALUES
        ),
        "newTab": AttributeSpec(default=False, kind=AttributeKind.BOOLEAN),
        "useIframe": AttributeSpec(default=True, kind=AttributeKind.BOOLEAN),
        "domain": AttributeSpec(
            default="com", kind=AttributeKind.STRING, pattern=r"[a-z]{2,3}(?:\.[a-z]{2,3})?"
        ),
    }
)

_RENAMED_FIELDS = {
    "iframe": "useIframe",
    "newtab": "newTab",
    "lang": "language",
    "domain": "domain",
}


def style_from_widget(widget_type: Optional[str], theme: Optional[str]) -> Optional[str]:
    """Derive the block style from the widget's ``type`` and ``theme`` parameters."""
    if widget_type == "button":
        return "button"
    return theme or None


def opentable_attributes(fields: Dict[str, str]) -> Dict[str, Any]:
    """Map extracted widget or identifier fields onto OpenTable block attributes."""
    attributes: Dict[str, Any] = {}
    if fields.get("rid"):
        attributes["rid"] = [rid.strip() for rid in fields["rid"].split(",") if rid.strip()]

    style = style_from_widget(fields.get("type"), fields.get("theme"))
    if style:
        attributes["style"] = style

    for source, target in _RENAMED_FIELDS.items():
        if source in fields:
            attributes[target] = fields[source]
    return attributes


def enforce_multi_restaurant_style(attributes: Dict[str, Any]) -> Dict[str, Any]:
    """The button style only exists for a single restaurant."""
    if len(attributes.get("rid") or []) > 1 and attributes.get("style") == "button":
        return {**attributes, "style": "standard"}
    return attributes


OPENTABLE = Integration(
    name="opentable",
    title="OpenTable",
    notice="Please ensure this embed matches the one from your OpenTable account.",
    shapes=OPENTABLE_SHAPES,
    attribute_schema=OPENTABLE_SCHEMA,
    adapter=opentable_attributes,
    finalizer=enforce_multi_restaurant_style,
)
