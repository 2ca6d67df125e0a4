"""Built-in integrations and the registry that indexes them."""

from embedkit.integrations.amazon import AMAZON
from embedkit.integrations.google_calendar import GOOGLE_CALENDAR
from embedkit.integrations.models import Integration
from embedkit.integrations.opentable import OPENTABLE
from embedkit.integrations.registry import BUILTIN_INTEGRATIONS, IntegrationRegistry

__all__ = [
    "AMAZON",
    "BUILTIN_INTEGRATIONS",
    "GOOGLE_CALENDAR",
    "Integration",
    "IntegrationRegistry",
    "OPENTABLE",
]
