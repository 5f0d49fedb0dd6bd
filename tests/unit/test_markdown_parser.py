#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_markdown_parser.py
"""Unit tests for the mistune-based markdown parser.

Tests cover:
- Block structure (headings, lists, quotes, code, tables)
- Inline structure (emphasis variants, links, autolinks, breaks, entities)
- Template tag recognition
- Raw HTML being kept as literal text
- Parser option toggles

"""

import io

import pytest

from mdcompose.ast import (
    AutoLink,
    BlockQuote,
    Code,
    CodeBlock,
    Emphasis,
    Heading,
    HtmlEntity,
    LineBreak,
    Link,
    List,
    Paragraph,
    Table,
    TaskListMarker,
    TemplateTag,
    Text,
    ThematicBreak,
    walk,
)
from mdcompose.exceptions import InvalidOptionsError
from mdcompose.options import MarkdownParserOptions, MarkdownRendererOptions
from mdcompose.parsers import MarkdownParser, markdown_to_ast


def _inlines(markdown: str, options=None):
    doc = MarkdownParser(options).parse(markdown)
    paragraph = doc.children[0]
    assert isinstance(paragraph, (Paragraph, Heading))
    return paragraph.content


def _text_of(nodes) -> str:
    return "".join(node.content for node in nodes if isinstance(node, Text))


@pytest.mark.unit
class TestBlockParsing:
    """Tests for block-level structure."""

    def test_heading_levels(self):
        """Test ATX heading levels."""
        doc = markdown_to_ast("# One\n\n### Three")
        assert [child.level for child in doc.children] == [1, 3]
        assert _text_of(doc.children[1].content) == "Three"

    def test_paragraphs(self):
        """Test that blank lines separate paragraphs."""
        doc = markdown_to_ast("First\n\nSecond")
        assert len(doc.children) == 2
        assert all(isinstance(child, Paragraph) for child in doc.children)

    def test_fenced_code_block_keeps_lines_and_info(self):
        """Test that code blocks keep their raw lines and info string."""
        doc = markdown_to_ast("```python\ndef f():\n    return *x*\n```")
        block = doc.children[0]
        assert isinstance(block, CodeBlock)
        assert block.info == "python"
        assert block.lines == ["def f():", "    return *x*"]

    def test_block_quote_children(self):
        """Test that block quotes contain block children."""
        doc = markdown_to_ast("> quoted\n>\n> - item")
        quote = doc.children[0]
        assert isinstance(quote, BlockQuote)
        assert isinstance(quote.children[0], Paragraph)
        assert isinstance(quote.children[1], List)

    def test_thematic_break(self):
        """Test thematic breaks."""
        doc = markdown_to_ast("above\n\n---\n\nbelow")
        assert isinstance(doc.children[1], ThematicBreak)

    def test_unordered_list_delimiter(self):
        """Test that unordered lists keep their bullet character."""
        doc = markdown_to_ast("* a\n* b")
        lst = doc.children[0]
        assert lst.ordered is False
        assert lst.delimiter == "*"
        assert len(lst.items) == 2

    def test_ordered_list_start_and_order(self):
        """Test that ordered list items count from the list start."""
        doc = markdown_to_ast("3. three\n4. four\n5. five")
        lst = doc.children[0]
        assert lst.ordered is True
        assert lst.start == 3
        assert lst.delimiter == "."
        assert [item.order for item in lst.items] == [3, 4, 5]

    def test_ordered_list_paren_delimiter(self):
        """Test ``1)`` style ordered lists."""
        lst = markdown_to_ast("1) a\n2) b").children[0]
        assert lst.delimiter == ")"
        assert [item.order for item in lst.items] == [1, 2]

    def test_task_list_markers(self):
        """Test that task list items start with a task marker."""
        lst = markdown_to_ast("- [x] done\n- [ ] todo").children[0]
        markers = [item.children[0].content[0] for item in lst.items]
        assert all(isinstance(marker, TaskListMarker) for marker in markers)
        assert [marker.checked for marker in markers] == [True, False]
        assert _text_of(lst.items[0].children[0].content).strip() == "done"

    def test_pipe_table(self):
        """Test pipe tables with alignment and a header row."""
        doc = markdown_to_ast("| a | b |\n|:--|--:|\n| 1 | 2 |\n| 3 | 4 |")
        table = doc.children[0]
        assert isinstance(table, Table)
        assert [column.alignment for column in table.columns] == ["left", "right"]
        assert [row.is_header for row in table.rows] == [True, False, False]
        assert all(column.width == 0 for column in table.columns)
        first_cell = table.rows[1].cells[0]
        assert _text_of(first_cell.children[0].content) == "1"

    def test_html_block_is_literal(self):
        """Test that raw HTML blocks are kept as text, not passed through."""
        doc = markdown_to_ast("<div>hi</div>")
        texts = [node.content for node in walk(doc) if isinstance(node, Text)]
        lines = [line for node in walk(doc) if isinstance(node, Paragraph) for line in node.lines]
        assert "<div>" in "".join(texts) + "".join(lines)


@pytest.mark.unit
class TestInlineParsing:
    """Tests for inline structure."""

    @pytest.mark.parametrize(
        "markdown,char,count",
        [
            ("*em*", "*", 1),
            ("**strong**", "*", 2),
            ("~~gone~~", "~", 2),
            ("H~2~O", "~", 1),
            ("x^2^", "^", 1),
            ("==marked==", "=", 2),
            ("++inserted++", "+", 2),
        ],
    )
    def test_emphasis_variants(self, markdown, char, count):
        """Test the delimiter of each emphasis variant."""
        emphasis = [node for node in _inlines(markdown) if isinstance(node, Emphasis)]
        assert len(emphasis) == 1
        assert (emphasis[0].delimiter_char, emphasis[0].delimiter_count) == (char, count)

    def test_extended_emphasis_can_be_disabled(self):
        """Test that the emphasis extras are plain text when disabled."""
        options = MarkdownParserOptions(parse_extended_emphasis=False)
        nodes = _inlines("==marked==", options)
        assert not any(isinstance(node, Emphasis) for node in nodes)

    def test_nested_emphasis(self):
        """Test emphasis nested inside strong emphasis."""
        nodes = _inlines("**bold *both***")
        outer = nodes[0]
        assert outer.delimiter_count == 2
        assert any(isinstance(node, Emphasis) and node.delimiter_count == 1 for node in outer.content)

    def test_code_span(self):
        """Test inline code."""
        nodes = _inlines("use `x = 1` here")
        assert Code(content="x = 1") in nodes

    def test_link(self):
        """Test an inline link with a label and title."""
        nodes = _inlines('[the docs](https://example.com/docs "Docs")')
        link = nodes[0]
        assert isinstance(link, Link)
        assert link.url == "https://example.com/docs"
        assert link.title == "Docs"
        assert link.is_image is False
        assert _text_of(link.content) == "the docs"

    def test_image_is_link_with_alt_content(self):
        """Test that images become image links whose content is the alt text."""
        image = _inlines("![a diagram](images/diagram.png)")[0]
        assert isinstance(image, Link)
        assert image.is_image is True
        assert image.url == "images/diagram.png"
        assert _text_of(image.content) == "a diagram"

    def test_angle_autolink(self):
        """Test ``<url>`` autolinks."""
        nodes = _inlines("<https://example.com>")
        assert nodes == [AutoLink(url="https://example.com", is_email=False)]

    def test_email_autolink(self):
        """Test ``<email>`` autolinks."""
        nodes = _inlines("<user@example.com>")
        assert nodes == [AutoLink(url="user@example.com", is_email=True)]

    def test_bare_url_autolink(self):
        """Test bare URLs become autolinks."""
        nodes = _inlines("Visit https://example.com/page now")
        autolinks = [node for node in nodes if isinstance(node, AutoLink)]
        assert autolinks == [AutoLink(url="https://example.com/page")]

    def test_bare_url_disabled(self):
        """Test that bare URLs stay text when disabled."""
        nodes = _inlines("Visit https://example.com now", MarkdownParserOptions(parse_bare_urls=False))
        assert not any(isinstance(node, AutoLink) for node in nodes)

    def test_hard_and_soft_breaks(self):
        """Test that trailing double spaces give a hard break and plain newlines a soft one."""
        nodes = _inlines("one  \ntwo\nthree")
        breaks = [node for node in nodes if isinstance(node, LineBreak)]
        assert [node.soft for node in breaks] == [False, True]

    def test_entities_are_split_out(self):
        """Test that character references become HtmlEntity nodes."""
        nodes = _inlines("Fish &amp; Chips &copy; 2025")
        entities = [node for node in nodes if isinstance(node, HtmlEntity)]
        assert [(e.original, e.transcoded) for e in entities] == [("&amp;", "&"), ("&copy;", "©")]
        assert _text_of(nodes) == "Fish  Chips  2025"

    def test_unknown_entity_stays_text(self):
        """Test that unknown entity names are left as text."""
        nodes = _inlines("a &bogusname; b")
        assert not any(isinstance(node, HtmlEntity) for node in nodes)

    def test_inline_html_is_text(self):
        """Test that inline HTML is kept as literal text."""
        nodes = _inlines("a <b>bold</b> tag")
        assert "<b>" in _text_of(nodes)


@pytest.mark.unit
class TestTemplateTags:
    """Tests for ``{name}`` template tag recognition."""

    def test_tag_in_text(self):
        """Test a tag between text runs."""
        nodes = _inlines("Hello {name}!")
        assert nodes == [Text(content="Hello "), TemplateTag(tag="name"), Text(content="!")]

    def test_multiple_tags_in_order(self):
        """Test that several tags keep document order."""
        nodes = _inlines("{a} and {b2} and {a}")
        assert [node.tag for node in nodes if isinstance(node, TemplateTag)] == ["a", "b2", "a"]

    @pytest.mark.parametrize("markdown", ["{}", "{{name}}", "{has space}", "{dash-ed}", "{ümlaut}"])
    def test_non_tags(self, markdown):
        """Test strings that must not be recognized as tags."""
        nodes = _inlines(markdown)
        assert not any(isinstance(node, TemplateTag) for node in nodes)

    def test_tag_inside_emphasis(self):
        """Test tags nested inside emphasis."""
        emphasis = _inlines("*{name}*")[0]
        assert emphasis.content == [TemplateTag(tag="name")]

    def test_tags_can_be_disabled(self):
        """Test that tags stay text when disabled."""
        nodes = _inlines("Hello {name}", MarkdownParserOptions(parse_template_tags=False))
        assert _text_of(nodes) == "Hello {name}"


@pytest.mark.unit
class TestParserInputs:
    """Tests for input handling and options validation."""

    def test_bytes_input(self):
        """Test that bytes are decoded."""
        text = "# Café crème brûlée à déjà vu"
        doc = MarkdownParser().parse(text.encode("utf-8"))
        assert _text_of(doc.children[0].content) == text[2:]

    def test_stream_input(self):
        """Test that binary streams are read."""
        doc = MarkdownParser().parse(io.BytesIO(b"plain"))
        assert _text_of(doc.children[0].content) == "plain"

    def test_path_input(self, tmp_path):
        """Test that Path objects are read as files."""
        source = tmp_path / "doc.md"
        source.write_text("## From file", encoding="utf-8")
        doc = MarkdownParser().parse(source)
        assert doc.children[0].level == 2

    def test_string_is_never_a_path(self, tmp_path):
        """Test that a str naming an existing file is parsed as text."""
        source = tmp_path / "doc.md"
        source.write_text("# Heading", encoding="utf-8")
        doc = MarkdownParser().parse(str(source))
        assert isinstance(doc.children[0], Paragraph)

    def test_empty_input(self):
        """Test that empty input gives an empty document."""
        assert markdown_to_ast("").children == []

    def test_wrong_options_type(self):
        """Test that renderer options are rejected by the parser."""
        with pytest.raises(InvalidOptionsError):
            MarkdownParser(MarkdownRendererOptions())
