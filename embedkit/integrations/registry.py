"""Registry of known integrations, built-in and loaded from YAML."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List

import yaml
from loguru import logger

from embedkit.integrations.amazon import AMAZON
from embedkit.integrations.google_calendar import GOOGLE_CALENDAR
from embedkit.integrations.models import Integration
from embedkit.integrations.opentable import OPENTABLE

BUILTIN_INTEGRATIONS = (GOOGLE_CALENDAR, OPENTABLE, AMAZON)


class IntegrationRegistry:
    """Name-indexed collection of integrations."""

    def __init__(self, integrations: Iterable[Integration] = ()) -> None:
        self._integrations: Dict[str, Integration] = {}
        for integration in integrations:
            self.register(integration)

    @classmethod
    def with_builtins(cls) -> "IntegrationRegistry":
        return cls(BUILTIN_INTEGRATIONS)

    def register(self, integration: Integration) -> None:
        if integration.name in self._integrations:
            logger.info(f"Replacing integration '{integration.name}'")
        self._integrations[integration.name] = integration

    def get(self, name: str) -> Integration:
        """Look up an integration by name.

        Raises:
            KeyError: If no integration has that name
        """
        key = name.strip().lower()
        if key not in self._integrations:
            raise KeyError(
                f"Unknown integration '{name}'. Known: {', '.join(self.names()) or 'none'}"
            )
        return self._integrations[key]

    def copy(self) -> "IntegrationRegistry":
        return IntegrationRegistry(self._integrations.values())

    def names(self) -> List[str]:
        return list(self._integrations)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().lower() in self._integrations

    def __len__(self) -> int:
        return len(self._integrations)

    def load_yaml(self, path: str | Path) -> List[str]:
        """Register every integration declared in a YAML file.

        The file holds an ``integrations`` list whose entries follow the
        ``Integration`` fields (``schema`` may be a plain
        ``{name: {default, allowedValues}}`` mapping).

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the YAML root is not a mapping or ``integrations`` is not a list
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Integrations file not found: {path}")

        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Integrations file root must be a mapping/dict: {path}")

        entries = data.get("integrations", [])
        if not isinstance(entries, list):
            raise ValueError(f"'integrations' must be a list: {path}")

        loaded: List[str] = []
        for entry in entries:
            integration = Integration.model_validate(entry)
            self.register(integration)
            loaded.append(integration.name)

        logger.info(f"Loaded {len(loaded)} integration(s) from {path}")
        return loaded
