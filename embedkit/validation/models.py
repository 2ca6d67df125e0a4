"""Schema models for block attribute validation."""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class AttributeKind(str, Enum):
    """Value shape an attribute is coerced to."""

    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    LIST = "list"
    ANY = "any"


class AttributeSpec(BaseModel):
    """Default value and constraints for one attribute."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    default: Any = Field(
        default=None, validation_alias=AliasChoices("default", "defaultValue")
    )
    kind: AttributeKind = AttributeKind.ANY
    allowed_values: Optional[List[Any]] = Field(
        default=None,
        validation_alias=AliasChoices(
            "allowed_values", "allowedValues", "valid_values", "validValues"
        ),
    )
    pattern: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _infer_kind(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "kind" in data:
            return data
        default = data.get("default", data.get("defaultValue"))
        if isinstance(default, bool):
            kind = AttributeKind.BOOLEAN
        elif isinstance(default, int):
            kind = AttributeKind.INTEGER
        elif isinstance(default, (list, tuple)):
            kind = AttributeKind.LIST
        elif isinstance(default, str):
            kind = AttributeKind.STRING
        else:
            kind = AttributeKind.ANY
        return {**data, "kind": kind}

    @field_validator("pattern")
    @classmethod
    def _validate_pattern(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"Invalid regex '{value}': {exc}") from exc
        return value

    @model_validator(mode="after")
    def _check_default(self) -> "AttributeSpec":
        # Normalizing twice must give the same answer, so a default has to be a fixed point.
        from embedkit.validation.attribute_validator import coerce_value

        if self.default is None:
            return self
        ok, coerced = coerce_value(self.default, self)
        if not ok or coerced != self.default:
            raise ValueError(
                f"Default {self.default!r} does not satisfy its own {self.kind.value} constraints."
            )
        return self


class AttributeSchema(BaseModel):
    """Ordered, immutable mapping of attribute name to spec for one integration."""

    model_config = ConfigDict(frozen=True)

    attributes: Dict[str, AttributeSpec] = Field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "AttributeSchema":
        """Build a schema from ``{name: {"defaultValue": ..., "allowedValues": [...]}}``.

        A value that is not a mapping is taken as the default itself.
        """
        attributes: Dict[str, AttributeSpec] = {}
        for name, spec in raw.items():
            if isinstance(spec, AttributeSpec):
                attributes[str(name)] = spec
            elif isinstance(spec, Mapping):
                attributes[str(name)] = AttributeSpec.model_validate(dict(spec))
            else:
                attributes[str(name)] = AttributeSpec.model_validate({"default": spec})
        return cls(attributes=attributes)

    def names(self) -> List[str]:
        return list(self.attributes)

    def spec_for(self, name: str) -> AttributeSpec:
        return self.attributes[name]

    def items(self) -> Iterator[tuple[str, AttributeSpec]]:
        return iter(self.attributes.items())

    def __contains__(self, name: object) -> bool:
        return name in self.attributes

    def __len__(self) -> int:
        return len(self.attributes)


class ValidationReport(BaseModel):
    """Normalized attributes plus what the validator had to change."""

    attributes: Dict[str, Any]
    replaced: List[str] = Field(default_factory=list)
    missing: List[str] = Field(default_factory=list)
    dropped: List[str] = Field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.replaced or self.missing or self.dropped)
