"""Google Calendar block: iframe embed code or a bare public calendar URL."""

from embedkit.extraction.models import ShapeDescriptor, ShapeKind
from embedkit.integrations.models import Integration
from embedkit.validation.models import AttributeKind, AttributeSchema, AttributeSpec

CALENDAR_URL_PATTERN = r"^\s*https?://calendar\.google\.com/calendar/\S*\s*$"
DIMENSION_PATTERN = r"[0-9]+(?:px|%)?"

CALENDAR_SHAPES = [
    ShapeDescriptor(
        name="google-calendar-iframe",
        kind=ShapeKind.MARKUP,
        tag="iframe",
        url_pattern=CALENDAR_URL_PATTERN,
        capture=["width", "height"],
        required=["url"],
        accept_bare_url=True,
    ),
]

CALENDAR_SCHEMA = AttributeSchema(
    attributes={
        "url": AttributeSpec(
            default="",
            kind=AttributeKind.STRING,
            pattern=r"(?:https?://calendar\.google\.com/calendar/\S*)?",
        ),
        "width": AttributeSpec(
            default="800", kind=AttributeKind.STRING, pattern=DIMENSION_PATTERN
        ),
        "height": AttributeSpec(
            default="600", kind=AttributeKind.STRING, pattern=DIMENSION_PATTERN
        ),
    }
)

GOOGLE_CALENDAR = Integration(
    name="google-calendar",
    title="Google Calendar",
    notice="Please enter a valid Google Calendar embed code or public calendar URL.",
    shapes=CALENDAR_SHAPES,
    attribute_schema=CALENDAR_SCHEMA,
)
