"""Tests for AttributeSpec / AttributeSchema construction."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from embedkit.validation.models import AttributeKind, AttributeSchema, AttributeSpec


@pytest.mark.parametrize(
    ("default", "kind"),
    [
        (True, AttributeKind.BOOLEAN),
        (3, AttributeKind.INTEGER),
        ([], AttributeKind.LIST),
        ("x", AttributeKind.STRING),
        (None, AttributeKind.ANY),
    ],
)
def test_kind_inferred_from_default(default: object, kind: AttributeKind) -> None:
    assert AttributeSpec(default=default).kind == kind


def test_allowed_values_aliases() -> None:
    for alias in ("allowed_values", "allowedValues", "validValues"):
        spec = AttributeSpec.model_validate({"default": "a", alias: ["a", "b"]})
        assert spec.allowed_values == ["a", "b"]


def test_default_value_alias() -> None:
    spec = AttributeSpec.model_validate({"defaultValue": "standard", "allowedValues": ["standard"]})

    assert spec.default == "standard"
    assert spec.kind == AttributeKind.STRING

    schema = AttributeSchema.from_mapping({"rid": {"defaultValue": []}})
    assert schema.spec_for("rid").kind == AttributeKind.LIST


def test_default_must_satisfy_constraints() -> None:
    with pytest.raises(ValidationError, match="does not satisfy"):
        AttributeSpec(default="xx", allowed_values=["a", "b"])

    with pytest.raises(ValidationError, match="does not satisfy"):
        AttributeSpec(default="true", kind=AttributeKind.BOOLEAN)


def test_invalid_pattern_rejected() -> None:
    with pytest.raises(ValidationError, match="Invalid regex"):
        AttributeSpec(default="", pattern="(")


def test_unknown_spec_field_rejected() -> None:
    with pytest.raises(ValidationError):
        AttributeSpec.model_validate({"default": "", "validator": "x"})


def test_schema_from_mapping_keeps_order() -> None:
    schema = AttributeSchema.from_mapping(
        {
            "url": {"default": ""},
            "width": "800",
            "newTab": AttributeSpec(default=False),
        }
    )

    assert schema.names() == ["url", "width", "newTab"]
    assert schema.spec_for("width").default == "800"
    assert "url" in schema
    assert len(schema) == 3


def test_schema_is_frozen() -> None:
    schema = AttributeSchema.from_mapping({"url": ""})

    with pytest.raises(ValidationError):
        schema.attributes = {}
