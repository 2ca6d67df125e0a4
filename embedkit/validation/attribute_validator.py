"""Reconcile stored or extracted block attributes against an attribute schema."""

from __future__ import annotations

import copy
import re
from typing import Any, Dict, List, Mapping, Tuple

from loguru import logger

from embedkit.validation.models import (
    AttributeKind,
    AttributeSchema,
    AttributeSpec,
    ValidationReport,
)

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def _allowed(value: Any, spec: AttributeSpec) -> bool:
    return spec.allowed_values is None or value in spec.allowed_values


def _matches_pattern(value: str, spec: AttributeSpec) -> bool:
    return spec.pattern is None or re.fullmatch(spec.pattern, value) is not None


def _coerce_list(value: Any, spec: AttributeSpec) -> Tuple[bool, Any]:
    if isinstance(value, str):
        items: List[Any] = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        return False, None

    kept: List[str] = []
    for item in items:
        # Each element stands on its own; a bad one is dropped, not the whole list.
        if isinstance(item, bool):
            continue
        if isinstance(item, int):
            item = str(item)
        if not isinstance(item, str):
            continue
        item = item.strip()
        if item and _matches_pattern(item, spec) and _allowed(item, spec):
            kept.append(item)
    return True, kept


def coerce_value(value: Any, spec: AttributeSpec) -> Tuple[bool, Any]:
    """Return ``(ok, coerced)`` for a single candidate value."""
    if spec.kind == AttributeKind.LIST:
        return _coerce_list(value, spec)

    if spec.kind == AttributeKind.BOOLEAN:
        if isinstance(value, str) and value.strip().lower() == "false":
            coerced: Any = False
        else:
            coerced = bool(value)
    elif spec.kind == AttributeKind.INTEGER:
        if isinstance(value, bool):
            return False, None
        if isinstance(value, int):
            coerced = value
        elif isinstance(value, str) and _INTEGER_RE.fullmatch(value.strip()):
            coerced = int(value.strip())
        else:
            return False, None
    elif spec.kind == AttributeKind.STRING:
        if not isinstance(value, str) or not _matches_pattern(value, spec):
            return False, None
        coerced = value
    else:
        coerced = value

    if not _allowed(coerced, spec):
        return False, None
    return True, coerced


class AttributeValidator:
    """Normalizes candidate attribute mappings so they always conform to a schema."""

    def reconcile(
        self, candidate: Any, schema: AttributeSchema | Mapping[str, Any]
    ) -> ValidationReport:
        """Normalize ``candidate`` and report which keys were replaced, filled or dropped."""
        if not isinstance(schema, AttributeSchema):
            schema = AttributeSchema.from_mapping(schema)
        if not isinstance(candidate, Mapping):
            candidate = {}

        attributes: Dict[str, Any] = {}
        replaced: List[str] = []
        missing: List[str] = []

        for name, spec in schema.items():
            if name not in candidate:
                attributes[name] = copy.deepcopy(spec.default)
                missing.append(name)
                continue

            original = candidate[name]
            ok, coerced = coerce_value(original, spec)
            attributes[name] = coerced if ok else copy.deepcopy(spec.default)
            if attributes[name] != original:
                replaced.append(name)

        dropped = [str(key) for key in candidate if key not in schema]

        if replaced or dropped:
            logger.debug(
                f"Normalized attributes: replaced={replaced}, dropped={dropped}, missing={missing}"
            )

        return ValidationReport(
            attributes=attributes, replaced=replaced, missing=missing, dropped=dropped
        )

    def validate(
        self, candidate: Any, schema: AttributeSchema | Mapping[str, Any]
    ) -> Dict[str, Any]:
        """Return a mapping whose keys are exactly the schema's keys."""
        return self.reconcile(candidate, schema).attributes

    def needs_update(
        self, stored: Any, schema: AttributeSchema | Mapping[str, Any]
    ) -> bool:
        """Whether ``stored`` differs from its normalized form (the caller decides to persist)."""
        if not isinstance(stored, Mapping):
            return True
        return dict(stored) != self.validate(stored, schema)


_default_validator = AttributeValidator()


def validate(candidate: Any, schema: AttributeSchema | Mapping[str, Any]) -> Dict[str, Any]:
    """Normalize ``candidate`` against ``schema``; never raises for bad candidates."""
    return _default_validator.validate(candidate, schema)
