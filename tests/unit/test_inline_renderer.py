#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_inline_renderer.py
"""Unit tests for inline rendering.

Tests cover:
- Emphasis variants and their styles
- Links, autolinks and email autolinks
- Images, resolved and unresolved, and image scaling
- Code spans, entities and line breaks
- Unknown inline kinds

"""

import asyncio
import base64

import pytest

from mdcompose.ast import Document, Paragraph, Text
from mdcompose.composition import LayoutDocument
from mdcompose.constants import UNKNOWN_INLINE_BACKGROUND
from mdcompose.options import MarkdownRendererOptions
from mdcompose.renderer import MarkdownRenderer, scale_image_dimensions
from mdcompose.resources import ParsedMarkdownDocument


def _span_map(layout):
    return {span.props["text"]: span for span in layout.find_all("span")}


def _data_uri(png: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")


def _resolved(markdown: str) -> ParsedMarkdownDocument:
    document = ParsedMarkdownDocument.from_text(markdown)
    asyncio.run(document.resolve_images())
    return document


@pytest.mark.unit
class TestEmphasisStyles:
    """Tests for emphasis variant styling."""

    @pytest.mark.parametrize(
        "markdown,attribute,value",
        [
            ("*word*", "italic", True),
            ("_word_", "italic", True),
            ("**word**", "bold", True),
            ("__word__", "bold", True),
            ("~~word~~", "strikethrough", True),
            ("++word++", "underline", True),
            ("x^word^", "superscript", True),
            ("H~word~", "subscript", True),
            ("==word==", "background_color", "#FFF59D"),
        ],
    )
    def test_variant_style(self, render, markdown, attribute, value):
        """Test the style each emphasis variant applies."""
        span = _span_map(render(markdown))["word"]
        assert getattr(span.props["style"], attribute) == value

    def test_nested_emphasis_combines(self, render):
        """Test that nested emphasis accumulates styles."""
        span = _span_map(render("**bold *both***"))["both"]
        assert span.props["style"].bold is True
        assert span.props["style"].italic is True

    def test_marked_background_option(self, render):
        """Test a configured highlight background."""
        options = MarkdownRendererOptions(marked_text_background_color="#00FF00")
        span = _span_map(render("==hi==", options))["hi"]
        assert span.props["style"].background_color == "#00FF00"

    def test_plain_text_unstyled(self, render):
        """Test that text outside emphasis keeps the default style."""
        span = _span_map(render("plain *em*"))["plain "]
        assert span.props["style"].italic is False


@pytest.mark.unit
class TestLinks:
    """Tests for links and autolinks."""

    def test_link_span(self, render):
        """Test link URL and styling."""
        span = _span_map(render("[docs](https://example.com/docs)"))["docs"]
        assert span.props["url"] == "https://example.com/docs"
        style = span.props["style"]
        assert style.font_color == "#2196F3"
        assert style.underline is True
        assert style.decoration_color == "#2196F3"

    def test_link_color_option(self, render):
        """Test a configured link color."""
        span = _span_map(render("[x](https://a.org)", MarkdownRendererOptions(link_text_color="#FF0000")))["x"]
        assert span.props["style"].font_color == "#FF0000"

    def test_emphasis_inside_link(self, render):
        """Test that every text run in a link carries the URL."""
        spans = _span_map(render("[**bold** rest](https://a.org)"))
        assert spans["bold"].props["url"] == "https://a.org"
        assert spans["bold"].props["style"].bold is True
        assert spans[" rest"].props["url"] == "https://a.org"

    def test_link_state_restored(self, render):
        """Test that text after a link is not linked."""
        spans = _span_map(render("[a](https://a.org) after"))
        assert "url" not in spans[" after"].props
        assert spans[" after"].props["style"].underline is False

    def test_autolink(self, render):
        """Test ``<url>`` autolinks."""
        span = _span_map(render("<https://example.com>"))["https://example.com"]
        assert span.props["url"] == "https://example.com"

    def test_email_autolink(self, render):
        """Test that email autolinks use a mailto URL."""
        span = _span_map(render("<user@example.com>"))["user@example.com"]
        assert span.props["url"] == "mailto:user@example.com"

    def test_autolink_inherits_emphasis(self, render):
        """Test that autolinks pick up surrounding styles."""
        span = _span_map(render("**<https://example.com>**"))["https://example.com"]
        assert span.props["style"].bold is True


@pytest.mark.unit
class TestImages:
    """Tests for image rendering."""

    def test_unresolved_image_becomes_hyperlink(self, render):
        """Test that an unresolved image renders its alt text linked to the source."""
        span = _span_map(render("![a diagram](images/missing.png)"))["a diagram"]
        assert span.props["url"] == "images/missing.png"
        assert span.props["style"].font_color == "#2196F3"

    def test_unresolved_image_without_alt_shows_url(self, render):
        """Test that an unresolved image without alt text shows its URL."""
        span = _span_map(render("![](images/missing.png)"))["images/missing.png"]
        assert span.props["url"] == "images/missing.png"

    def test_resolved_image_is_scaled(self, render, png_factory):
        """Test that a resolved image is drawn at the scaled size."""
        document = _resolved(f"![chart]({_data_uri(png_factory(200, 100))})")
        layout = render(document)
        image = layout.find_all("image")[0]
        assert (image.props["width"], image.props["height"]) == (100.0, 50.0)
        assert image.props["format"] == "png"
        # the alt text is replaced by the image
        assert layout.plain_text() == ""

    def test_resolved_image_respects_max_width(self, render, png_factory):
        """Test uniform downscaling to the maximum width."""
        document = _resolved(f"![chart]({_data_uri(png_factory(200, 100))})")
        layout = render(document, MarkdownRendererOptions(max_image_width=80))
        image = layout.find_all("image")[0]
        assert (image.props["width"], image.props["height"]) == (80.0, 40.0)

    def test_image_emitted_once_for_multi_run_alt(self, render, png_factory):
        """Test that an alt text made of several runs still yields one image."""
        document = _resolved(f"![a *b* c]({_data_uri(png_factory(10, 10))})")
        assert len(render(document).find_all("image")) == 1

    def test_image_without_alt_is_emitted(self, render, png_factory):
        """Test that a resolved image with empty alt text is drawn."""
        document = _resolved(f"![]({_data_uri(png_factory(10, 10))})")
        assert len(render(document).find_all("image")) == 1

    def test_linked_image(self, render, png_factory):
        """Test that an image inside a link is wrapped in a hyperlink."""
        document = _resolved(f"[![logo]({_data_uri(png_factory(10, 10))})](https://site.org)")
        layout = render(document)
        hyperlink = layout.find_all("hyperlink")[0]
        assert hyperlink.props["url"] == "https://site.org"
        assert hyperlink.content.kind == "image"

    def test_image_sits_in_text_element(self, render, png_factory):
        """Test that images are inline elements of the text region."""
        document = _resolved(f"before ![x]({_data_uri(png_factory(4, 4))}) after")
        text = render(document).find_all("text")[0]
        assert [child.kind for child in text.children] == ["span", "element", "span"]


@pytest.mark.unit
class TestScaleImageDimensions:
    """Tests for image size computation."""

    def test_factor_only(self):
        """Test scaling without bounds."""
        assert scale_image_dimensions(200, 100, 0.5) == (100.0, 50.0)

    def test_width_bound_is_uniform(self):
        """Test that a width bound keeps the aspect ratio."""
        assert scale_image_dimensions(200, 100, 0.5, max_width=80) == (80.0, 40.0)

    def test_height_bound(self):
        """Test a height bound."""
        assert scale_image_dimensions(100, 400, 1.0, max_height=100) == (25.0, 100.0)

    def test_tightest_bound_wins(self):
        """Test that the smaller ratio of both bounds applies."""
        assert scale_image_dimensions(400, 400, 1.0, max_width=200, max_height=100) == (100.0, 100.0)

    def test_never_enlarges(self):
        """Test that bounds larger than the image do not enlarge it."""
        assert scale_image_dimensions(10, 10, 1.0, max_width=500, max_height=500) == (10.0, 10.0)


@pytest.mark.unit
class TestOtherInlines:
    """Tests for code spans, entities, breaks and unknown inlines."""

    def test_code_span(self, render):
        """Test code span background and font."""
        style = _span_map(render("run `make`"))["make"].props["style"]
        assert style.background_color == "#EEEEEE"
        assert style.font_family == "Courier"

    def test_entity(self, render):
        """Test that entities render their decoded text."""
        assert render("a &copy; b").plain_text() == "a © b"

    def test_hard_break(self, render):
        """Test that hard breaks emit a newline."""
        assert render("one  \ntwo").plain_text() == "one\ntwo"

    def test_soft_break(self, render):
        """Test that soft breaks emit a space."""
        assert render("one\ntwo").plain_text() == "one two"

    def test_unknown_inline_placeholder(self):
        """Test that a block inside inline content renders a placeholder."""
        document = Document(children=[Paragraph(content=[Text("ok "), Paragraph()])])
        layout = LayoutDocument()
        MarkdownRenderer(document).compose(layout.container())
        span = _span_map(layout)["Unknown inline: Paragraph"]
        assert span.props["style"].background_color == UNKNOWN_INLINE_BACKGROUND
