"""Tests for EmbedExtractor across markup, identifier and widget shapes."""

from __future__ import annotations

import time

import pytest

from embedkit.extraction.embed_extractor import EmbedExtractor, extract
from embedkit.extraction.models import ShapeDescriptor, ShapeKind
from embedkit.integrations.amazon import AMAZON_SHAPES
from embedkit.integrations.google_calendar import CALENDAR_SHAPES
from embedkit.integrations.opentable import OPENTABLE_SHAPES

CALENDAR_IFRAME = CALENDAR_SHAPES[0]
OPENTABLE_WIDGET, OPENTABLE_ID = OPENTABLE_SHAPES
AMAZON_ASIN = AMAZON_SHAPES[0]

CALENDAR_EMBED = (
    '<iframe src="https://calendar.google.com/calendar/embed?src=abc" '
    'width="800" height="600" frameborder="0"></iframe>'
)
WIDGET_EMBED = (
    "<script type='text/javascript' src='//www.opentable.com/widget/reservation/loader"
    "?rid=412810&domain=com&type=standard&theme=tall&iframe=true&lang=fr-CA"
    "&newtab=false&ot_source=Restaurant%20website'></script>"
)


@pytest.fixture
def generic_iframe() -> ShapeDescriptor:
    return ShapeDescriptor(name="iframe", kind=ShapeKind.MARKUP, tag="iframe")


class TestMarkupShapes:
    """Iframe-like embed snippets."""

    def test_calendar_iframe(self) -> None:
        result = extract(CALENDAR_EMBED, CALENDAR_IFRAME)

        assert result.matched
        assert result.fields == {
            "url": "https://calendar.google.com/calendar/embed?src=abc",
            "width": "800",
            "height": "600",
        }

    def test_plain_text_is_no_match(self, generic_iframe: ShapeDescriptor) -> None:
        assert not extract("not an embed at all", CALENDAR_IFRAME).matched
        assert not extract("not an embed at all", generic_iframe).matched

    def test_missing_closing_tag_is_no_match(self) -> None:
        text = '<iframe src="https://calendar.google.com/calendar/embed?src=abc" width="800">'

        result = extract(text, CALENDAR_IFRAME)

        assert not result.matched
        assert result.fields == {}

    def test_element_without_attributes_matches_empty(
        self, generic_iframe: ShapeDescriptor
    ) -> None:
        result = extract("<iframe></iframe>", generic_iframe)

        assert result.matched
        assert result.fields == {}

    def test_only_url_attribute(self, generic_iframe: ShapeDescriptor) -> None:
        result = extract('<iframe src="https://example.com/embed"></iframe>', generic_iframe)

        assert result.fields == {"url": "https://example.com/embed"}

    def test_url_shaped_value_wins_url_key(self, generic_iframe: ShapeDescriptor) -> None:
        text = '<iframe url="not-a-url" data-src="https://example.com/x"></iframe>'

        result = extract(text, generic_iframe)

        assert result.fields == {"url": "https://example.com/x"}

    def test_first_url_wins(self, generic_iframe: ShapeDescriptor) -> None:
        text = '<iframe src="https://a.example/1" data-alt="https://b.example/2"></iframe>'

        assert extract(text, generic_iframe).fields == {"url": "https://a.example/1"}

    def test_single_quotes_and_entities(self) -> None:
        text = (
            "<IFRAME src='https://calendar.google.com/calendar/embed?src=abc&amp;ctz=UTC' "
            "style=\"border: 0\" width='100%' height='400' scrolling='no'></IFRAME>"
        )

        result = extract(text, CALENDAR_IFRAME)

        assert result.fields == {
            "url": "https://calendar.google.com/calendar/embed?src=abc&ctz=UTC",
            "width": "100%",
            "height": "400",
        }

    def test_quoted_angle_bracket_inside_value(self, generic_iframe: ShapeDescriptor) -> None:
        text = '<iframe title="a > b" src="https://example.com/e"></iframe>'

        result = extract(text, generic_iframe)

        assert result.fields == {"title": "a > b", "url": "https://example.com/e"}

    def test_bare_calendar_url(self) -> None:
        url = "https://calendar.google.com/calendar/embed?src=abc"

        assert extract(f"  {url}\n", CALENDAR_IFRAME).fields == {"url": url}

    def test_required_url_from_other_host_is_no_match(self) -> None:
        text = '<iframe src="https://example.com/calendar" width="800"></iframe>'

        result = extract(text, CALENDAR_IFRAME)

        assert not result.matched
        assert "url" in (result.reason or "")

    def test_embedded_in_surrounding_text(self) -> None:
        text = f"<p>Our calendar:</p>\n{CALENDAR_EMBED}\n<p>See you!</p>"

        assert extract(text, CALENDAR_IFRAME).fields["width"] == "800"


class TestIdentifierShapes:
    """Bare ids and picker labels."""

    def test_bare_numeric(self) -> None:
        assert extract("12345", OPENTABLE_ID).fields == {"rid": "12345"}

    def test_bare_numeric_with_whitespace(self) -> None:
        assert extract("  12345 \n", OPENTABLE_ID).fields == {"rid": "12345"}

    def test_labelled(self) -> None:
        assert extract("Trattoria Roma (ID:98765)", OPENTABLE_ID).fields == {"rid": "98765"}

    def test_marker_is_literal(self) -> None:
        assert not extract("Bistro (id:42)", OPENTABLE_ID).matched
        assert not extract("Bistro ( ID : 42)", OPENTABLE_ID).matched

    def test_labelled_value_runs_to_closing_parenthesis(self) -> None:
        result = extract("Bistro (ID:4(2))", OPENTABLE_ID)

        assert result.fields == {"rid": "4(2)"}

    def test_unicode_digits_are_not_numeric(self) -> None:
        result = extract("\u0661\u0662\u0663\u0664\u0665", OPENTABLE_ID)

        assert not result.matched

    @pytest.mark.parametrize(
        "text",
        ["(ID:)", "Bistro (ID:   )", "Trattoria Roma", "Bistro (ID:42) downtown", "12a45"],
    )
    def test_no_identifier(self, text: str) -> None:
        result = extract(text, OPENTABLE_ID)

        assert not result.matched
        assert result.fields == {}

    def test_asin_marker(self) -> None:
        result = extract("Echo Dot (3rd Gen) (ASIN:B07XJ8C8F5)", AMAZON_ASIN)

        assert result.fields == {"asin": "B07XJ8C8F5"}


class TestWidgetShapes:
    """OpenTable loader script embed codes."""

    def test_script_embed(self) -> None:
        result = extract(WIDGET_EMBED, OPENTABLE_WIDGET)

        assert result.matched
        assert result.fields == {
            "rid": "412810",
            "type": "standard",
            "theme": "tall",
            "iframe": "true",
            "domain": "com",
            "lang": "fr-CA",
            "newtab": "false",
        }

    def test_multiple_restaurants(self) -> None:
        text = (
            '<script src="https://www.opentable.com/widget/reservation/loader'
            '?rid=1&rid=2%2C3&type=multi&theme=wide"></script>'
        )

        result = extract(text, OPENTABLE_WIDGET)

        assert result.fields["rid"] == "1,2,3"
        assert result.fields["type"] == "multi"

    def test_bare_loader_url(self) -> None:
        text = "https://www.opentable.co.uk/widget/reservation/loader?rid=77&domain=co.uk"

        assert extract(text, OPENTABLE_WIDGET).fields == {"rid": "77", "domain": "co.uk"}

    def test_other_host_is_no_match(self) -> None:
        text = '<script src="https://example.com/loader?rid=1"></script>'

        assert not extract(text, OPENTABLE_WIDGET).matched

    def test_missing_rid_is_no_match(self) -> None:
        text = '<script src="//www.opentable.com/widget/reservation/loader?type=standard"></script>'

        assert not extract(text, OPENTABLE_WIDGET).matched


class TestExtractorBehaviour:
    """Cross-cutting guarantees."""

    @pytest.mark.parametrize("text", [None, "", "   \n\t"])
    def test_empty_input(self, text: str | None) -> None:
        result = extract(text, CALENDAR_IFRAME)

        assert not result.matched
        assert result.reason == "empty input"

    @pytest.mark.parametrize("text", [CALENDAR_EMBED, "12345", "garbage <iframe", WIDGET_EMBED])
    def test_deterministic(self, text: str) -> None:
        for shape in (CALENDAR_IFRAME, OPENTABLE_ID, OPENTABLE_WIDGET):
            assert extract(text, shape) == extract(text, shape)

    def test_max_input_length(self) -> None:
        extractor = EmbedExtractor(max_input_length=20)

        result = extractor.extract(CALENDAR_EMBED, CALENDAR_IFRAME)

        assert not result.matched
        assert "longer than 20" in (result.reason or "")

    def test_extract_first_returns_first_match(self) -> None:
        extractor = EmbedExtractor()

        result = extractor.extract_first("Trattoria Roma (ID:98765)", OPENTABLE_SHAPES)

        assert result.shape == "opentable-restaurant-id"
        assert result.fields == {"rid": "98765"}

    def test_extract_first_without_shapes(self) -> None:
        assert not EmbedExtractor().extract_first("12345", []).matched

    @pytest.mark.parametrize(
        "text",
        [
            '<iframe src="https://calendar.google.com/calendar/embed?src=abc',
            "<iframe " + 'a="1" ' * 2000,
            "<<<iframe>>></iframe",
            "\x00\x01<iframe src='\"'></iframe>",
        ],
    )
    def test_malformed_markup_never_raises(self, text: str) -> None:
        result = extract(text, CALENDAR_IFRAME)

        assert not result.matched


class TestPathologicalInput:
    """Long runs that used to make the tag pattern backtrack."""

    N = 20000

    @pytest.mark.parametrize(
        "text",
        [
            "<iframe" + " " * N + "x",
            "<iframe" + " " * N + ">" + "a" * N,
            "<iframe" + " " * N + "></iframe>",
            "<iframe " + "<iframe " * (N // 8),
            "x (ID:" * (N // 6),
        ],
    )
    def test_finishes_quickly(self, text: str) -> None:
        started = time.perf_counter()
        for shape in (CALENDAR_IFRAME, OPENTABLE_WIDGET, OPENTABLE_ID):
            assert not extract(text, shape).matched
        assert time.perf_counter() - started < 2.0

    def test_script_without_closing_tag(self) -> None:
        text = "<script src='//www.opentable.com/widget/reservation/loader?rid=1'" + " " * self.N

        started = time.perf_counter()
        result = extract(text, OPENTABLE_WIDGET)

        assert not result.matched
        assert time.perf_counter() - started < 2.0

    def test_self_closing_element(self) -> None:
        result = extract(
            '<iframe src="https://calendar.google.com/calendar/embed?src=abc" width="1"/>',
            ShapeDescriptor(name="iframe", require_closing_tag=False),
        )

        assert result.fields == {
            "url": "https://calendar.google.com/calendar/embed?src=abc",
            "width": "1",
        }
