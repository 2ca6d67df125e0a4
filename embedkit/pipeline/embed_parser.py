"""Embed parsing pipeline: raw pasted text to schema-conformant block attributes."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from loguru import logger
from pydantic import BaseModel, Field

from embedkit.extraction.embed_extractor import EmbedExtractor
from embedkit.extraction.models import ShapeKind
from embedkit.integrations.models import Integration
from embedkit.integrations.registry import IntegrationRegistry
from embedkit.utils.config import Config
from embedkit.validation.attribute_validator import AttributeValidator
from embedkit.validation.models import AttributeKind, ValidationReport


class ParseOutcome(BaseModel):
    """What the editor receives back after a paste or submit."""

    integration: str
    matched: bool
    shape: Optional[str] = None
    fields: Dict[str, str] = Field(default_factory=dict)
    attributes: Dict[str, Any]
    notice: Optional[str] = None
    reason: Optional[str] = None


class EmbedParser:
    """Runs raw text through an integration's shapes, adapter and schema."""

    def __init__(
        self,
        config: Config | None = None,
        registry: IntegrationRegistry | None = None,
    ) -> None:
        self.config = config or Config()
        # An empty registry is falsy, so compare against None. YAML integrations
        # go into a copy; the caller's registry is left as it was.
        if registry is None:
            self.registry = IntegrationRegistry.with_builtins()
        else:
            self.registry = registry.copy()

        integrations_file = self.config.extraction.integrations_file
        if integrations_file:
            self.registry.load_yaml(integrations_file)

        self.extractor = EmbedExtractor(max_input_length=self.config.extraction.max_input_length)
        self.validator = AttributeValidator()

        logger.info(
            f"Initialized EmbedParser with {len(self.registry)} integrations "
            f"(max_input_length={self.config.extraction.max_input_length})"
        )

    def parse(self, raw_text: str | None, integration: str | Integration) -> ParseOutcome:
        """Extract and normalize attributes from pasted text.

        A miss still returns schema defaults, together with the integration's
        notice for the editor to show.
        """
        integration = self._resolve(integration)
        result = self.extractor.extract_first(raw_text, integration.shapes)

        if not result.matched:
            logger.debug(f"No {integration.name} shape matched: {result.reason}")
            return self._miss(integration, result.reason or "no shape matched")

        shape = next(shape for shape in integration.shapes if shape.name == result.shape)
        key_fields = list(shape.required)
        if shape.kind == ShapeKind.IDENTIFIER:
            key_fields.append(shape.field)

        attributes = self._finalize(integration.to_candidate(result.fields), integration)
        rejected = self._rejected(result.fields, key_fields, attributes, integration)
        if rejected:
            logger.debug(f"{integration.name} rejected extracted {rejected}")
            return self._miss(integration, f"invalid value for {', '.join(rejected)}")

        return ParseOutcome(
            integration=integration.name,
            matched=True,
            shape=result.shape,
            fields=result.fields,
            attributes=attributes,
        )

    def parse_selection(
        self, labels: Sequence[str], integration: str | Integration
    ) -> ParseOutcome:
        """Turn picker selections (bare ids or ``"Name (ID:123)"`` labels) into attributes.

        Labels that carry no identifier are skipped; the outcome is a miss only
        when none of them does.
        """
        integration = self._resolve(integration)
        shapes = integration.identifier_shapes()

        collected: Dict[str, List[str]] = {}
        for label in labels:
            result = self.extractor.extract_first(label, shapes)
            if not result.matched:
                logger.debug(f"Skipping picker label {label!r}: {result.reason}")
                continue
            for name, value in result.fields.items():
                collected.setdefault(name, []).append(value)

        if not collected:
            return self._miss(integration, "no identifier found in selection")

        schema = integration.attribute_schema
        fields = {
            # Single-valued attributes keep the first selection.
            name: (
                ",".join(values)
                if name in schema and schema.spec_for(name).kind == AttributeKind.LIST
                else values[0]
            )
            for name, values in collected.items()
        }
        attributes = self._finalize(integration.to_candidate(fields), integration)
        rejected = self._rejected(fields, list(fields), attributes, integration)
        if rejected:
            return self._miss(integration, f"invalid value for {', '.join(rejected)}")

        return ParseOutcome(
            integration=integration.name,
            matched=True,
            shape=shapes[0].name,
            fields=fields,
            attributes=attributes,
        )

    def normalize(self, stored: Any, integration: str | Integration) -> ValidationReport:
        """Reconcile previously stored block attributes with the current schema."""
        integration = self._resolve(integration)
        report = self.validator.reconcile(stored, integration.attribute_schema)
        if integration.finalizer is None:
            return report

        finalized = self._finalize(report.attributes, integration)
        if finalized == report.attributes:
            return report
        replaced = [
            name for name, value in finalized.items() if report.attributes.get(name) != value
        ]
        return report.model_copy(
            update={
                "attributes": finalized,
                "replaced": sorted(set(report.replaced) | set(replaced)),
            }
        )

    def _finalize(self, candidate: Dict[str, Any], integration: Integration) -> Dict[str, Any]:
        attributes = self.validator.validate(candidate, integration.attribute_schema)
        if integration.finalizer is not None:
            # The finalizer may only pick among valid values, so validate its output again.
            attributes = self.validator.validate(
                integration.finalizer(attributes), integration.attribute_schema
            )
        return attributes

    def _rejected(
        self,
        fields: Dict[str, str],
        key_fields: List[str],
        attributes: Dict[str, Any],
        integration: Integration,
    ) -> List[str]:
        """Schema attributes fed by identifying fields that came out empty after validation."""
        keys = integration.to_candidate(
            {name: fields[name] for name in key_fields if name in fields}
        )
        return [
            name
            for name in keys
            if name in integration.attribute_schema and not attributes.get(name)
        ]

    def _miss(self, integration: Integration, reason: str) -> ParseOutcome:
        return ParseOutcome(
            integration=integration.name,
            matched=False,
            attributes=self.validator.validate({}, integration.attribute_schema),
            notice=integration.notice,
            reason=reason,
        )

    def _resolve(self, integration: str | Integration) -> Integration:
        if isinstance(integration, Integration):
            return integration
        return self.registry.get(integration)
