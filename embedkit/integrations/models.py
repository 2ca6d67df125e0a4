"""Integration model: the static configuration of one embed block."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from embedkit.extraction.models import ShapeDescriptor, ShapeKind
from embedkit.validation.models import AttributeSchema

FieldAdapter = Callable[[Dict[str, str]], Dict[str, Any]]
AttributeFinalizer = Callable[[Dict[str, Any]], Dict[str, Any]]

DEFAULT_NOTICE = "We ran into an issue. Please check that the embed code is correct."


class Integration(BaseModel):
    """Shape descriptors, attribute schema and field mapping for one block."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    title: str = ""
    notice: str = DEFAULT_NOTICE
    shapes: List[ShapeDescriptor] = Field(default_factory=list)
    attribute_schema: AttributeSchema = Field(
        default_factory=AttributeSchema, alias="schema"
    )
    field_map: Dict[str, str] = Field(default_factory=dict)
    adapter: Optional[FieldAdapter] = Field(default=None, exclude=True)
    finalizer: Optional[AttributeFinalizer] = Field(default=None, exclude=True)

    @field_validator("attribute_schema", mode="before")
    @classmethod
    def _coerce_schema(cls, value: Any) -> Any:
        if isinstance(value, dict) and "attributes" not in value:
            return AttributeSchema.from_mapping(value)
        return value

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("Integration name must not be blank.")
        return value

    def identifier_shapes(self) -> List[ShapeDescriptor]:
        return [shape for shape in self.shapes if shape.kind == ShapeKind.IDENTIFIER]

    def to_candidate(self, fields: Dict[str, str]) -> Dict[str, Any]:
        """Map extracted string fields onto schema attribute names."""
        if self.adapter is not None:
            return self.adapter(dict(fields))
        return {self.field_map.get(name, name): value for name, value in fields.items()}
