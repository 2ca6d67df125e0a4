"""Amazon product block: a bare numeric id or a ``"Title (ASIN:...)"`` suggestion label."""

from embedkit.extraction.models import ShapeDescriptor, ShapeKind
from embedkit.integrations.models import Integration
from embedkit.validation.models import AttributeKind, AttributeSchema, AttributeSpec

AMAZON_SHAPES = [
    ShapeDescriptor(
        name="amazon-asin",
        kind=ShapeKind.IDENTIFIER,
        marker="ASIN",
        field="asin",
    ),
]

AMAZON_SCHEMA = AttributeSchema(
    attributes={
        "asin": AttributeSpec(default="", kind=AttributeKind.STRING, pattern=r"[A-Za-z0-9]*"),
        "backgroundColor": AttributeSpec(default=None, kind=AttributeKind.STRING),
        "textColor": AttributeSpec(default=None, kind=AttributeKind.STRING),
        "buttonAndLinkColor": AttributeSpec(default=None, kind=AttributeKind.STRING),
        "showImage": AttributeSpec(default=True, kind=AttributeKind.BOOLEAN),
        "showTitle": AttributeSpec(default=True, kind=AttributeKind.BOOLEAN),
        "showSeller": AttributeSpec(default=False, kind=AttributeKind.BOOLEAN),
        "showPrice": AttributeSpec(default=True, kind=AttributeKind.BOOLEAN),
        "showPurchaseButton": AttributeSpec(default=True, kind=AttributeKind.BOOLEAN),
    }
)

AMAZON = Integration(
    name="amazon",
    title="Amazon",
    notice="Search by entering an Amazon product name or ID.",
    shapes=AMAZON_SHAPES,
    attribute_schema=AMAZON_SCHEMA,
)
