#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdcompose/parsers/markdown.py
"""Markdown to AST parser.

This module converts markdown text into the mdcompose AST using the mistune
parser. mistune runs without a renderer so its token stream can be mapped
onto AST nodes directly. Raw HTML passthrough is always disabled: HTML in
the source ends up as literal text.
"""

from __future__ import annotations

import html
import logging
import re
from pathlib import Path
from typing import IO, Any, Union
from urllib.parse import unquote

from mdcompose.ast import (
    AutoLink,
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    HtmlEntity,
    LineBreak,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    Table,
    TableCell,
    TableColumn,
    TableRow,
    TaskListMarker,
    TemplateTag,
    Text,
    ThematicBreak,
)
from mdcompose.constants import DEPS_MARKDOWN
from mdcompose.exceptions import InvalidOptionsError, ParsingError
from mdcompose.options.markdown import MarkdownParserOptions
from mdcompose.parsers.plugins import disable_html, grid_tables, template_tags, underline
from mdcompose.utils.decorators import requires_dependencies
from mdcompose.utils.encoding import normalize_stream_to_text, read_text_with_encoding_detection

logger = logging.getLogger(__name__)

_ENTITY_RE = re.compile(r"&(?:#[0-9]{1,7}|#[xX][0-9a-fA-F]{1,6}|[A-Za-z][A-Za-z0-9]{1,31});")

# (delimiter_char, delimiter_count) for each emphasis-like token type
_EMPHASIS_DELIMITERS: dict[str, tuple[str, int]] = {
    "emphasis": ("*", 1),
    "strong": ("*", 2),
    "strikethrough": ("~", 2),
    "subscript": ("~", 1),
    "superscript": ("^", 1),
    "mark": ("=", 2),
    "underline": ("+", 2),
}


class MarkdownParser:
    """Convert markdown text to an AST Document.

    Parameters
    ----------
    options : MarkdownParserOptions or None, default = None
        Parser configuration options

    Examples
    --------
    >>> parser = MarkdownParser()
    >>> doc = parser.parse("# Hello {name}")
    >>> doc.children[0].content[1]
    TemplateTag(tag='name')

    """

    def __init__(self, options: MarkdownParserOptions | None = None):
        """Initialize the parser with options."""
        if options is not None and not isinstance(options, MarkdownParserOptions):
            raise InvalidOptionsError(
                component_name="markdown",
                expected_type=MarkdownParserOptions,
                received_type=type(options),
            )
        self.options: MarkdownParserOptions = options or MarkdownParserOptions()

    def _build_plugins(self) -> list[Any]:
        plugins: list[Any] = [disable_html]
        if self.options.parse_extended_emphasis:
            # strikethrough must come before subscript so that ``~~`` wins over ``~``
            plugins.extend(["strikethrough", "subscript", "superscript", "mark", underline])
        if self.options.parse_tables:
            plugins.extend(["table", "mistune.plugins.table.table_in_quote", "mistune.plugins.table.table_in_list"])
        if self.options.parse_grid_tables:
            plugins.append(grid_tables)
        if self.options.parse_task_lists:
            plugins.append("task_lists")
        if self.options.parse_bare_urls:
            plugins.append("url")
        if self.options.parse_template_tags:
            plugins.append(template_tags)
        return plugins

    @requires_dependencies("markdown", DEPS_MARKDOWN)
    def parse(self, input_data: Union[str, Path, IO[bytes], IO[str], bytes]) -> Document:
        """Parse markdown input into an AST Document.

        Parameters
        ----------
        input_data : str, Path, IO[bytes], IO[str], or bytes
            Markdown input. A ``str`` is always treated as markdown text; pass
            a ``Path`` to read a file.

        Returns
        -------
        Document
            AST document node

        Raises
        ------
        ParsingError
            If mistune fails on the input

        """
        markdown_content = self._load_text_content(input_data)

        import mistune

        markdown = mistune.create_markdown(renderer=None, plugins=self._build_plugins())
        try:
            tokens, _state = markdown.parse(markdown_content)
        except Exception as e:
            raise ParsingError(
                f"Failed to parse markdown: {e!s}", parsing_stage="tokenize", original_error=e
            ) from e

        children = self._process_tokens(tokens) if isinstance(tokens, list) else []
        return Document(children=children)

    @staticmethod
    def _load_text_content(input_data: Union[str, Path, IO[bytes], IO[str], bytes]) -> str:
        if isinstance(input_data, str):
            return input_data
        if isinstance(input_data, bytes):
            return read_text_with_encoding_detection(input_data)
        if isinstance(input_data, Path):
            with open(input_data, "rb") as f:
                return read_text_with_encoding_detection(f.read())
        return normalize_stream_to_text(input_data)

    # ------------------------------------------------------------------
    # Block tokens
    # ------------------------------------------------------------------

    def _process_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        """Process a list of mistune block tokens into AST nodes.

        Parameters
        ----------
        tokens : list of dict
            Mistune token dictionaries

        Returns
        -------
        list of Node
            AST nodes

        """
        nodes: list[Node] = []
        for token in tokens:
            node = self._process_token(token)
            if node is not None:
                nodes.append(node)
        return nodes

    def _process_token(self, token: dict[str, Any]) -> Node | None:
        """Process a single mistune block token into an AST node.

        Parameters
        ----------
        token : dict
            Mistune token dictionary with 'type' and other fields

        Returns
        -------
        Node or None
            Resulting AST node, or None for tokens without content

        """
        token_type = token.get("type", "")

        handler_map: dict[str, Any] = {
            "heading": self._process_heading,
            "paragraph": self._process_paragraph,
            # block_text is used for tight list items
            "block_text": self._process_paragraph,
            "block_code": self._process_code_block,
            "block_quote": self._process_block_quote,
            "list": self._process_list,
            "table": self._process_table,
            "grid_table": self._process_grid_table,
            "block_html": self._process_html_block,
        }

        if token_type == "thematic_break":
            return ThematicBreak()
        if token_type == "blank_line":
            return None

        handler = handler_map.get(token_type)
        if handler:
            return handler(token)

        logger.debug(f"Skipping unsupported block token: {token_type}")
        return None

    def _process_heading(self, token: dict[str, Any]) -> Heading:
        level = token.get("attrs", {}).get("level", 1)
        content = self._process_inline_tokens(token.get("children", []))
        return Heading(level=level, content=content)

    def _process_paragraph(self, token: dict[str, Any]) -> Paragraph:
        content = self._process_inline_tokens(token.get("children", []))
        return Paragraph(content=content)

    def _process_code_block(self, token: dict[str, Any]) -> CodeBlock:
        """Process a fenced or indented code block.

        The raw text is kept line by line; the fence info string is kept
        when present.
        """
        raw = token.get("raw", "")
        info = token.get("attrs", {}).get("info") or None
        return CodeBlock(lines=raw.splitlines(), info=info)

    def _process_block_quote(self, token: dict[str, Any]) -> BlockQuote:
        return BlockQuote(children=self._process_tokens(token.get("children", [])))

    def _process_html_block(self, token: dict[str, Any]) -> Paragraph:
        """Keep an HTML block as literal text lines."""
        return Paragraph(lines=token.get("raw", "").splitlines())

    def _process_list(self, token: dict[str, Any]) -> List:
        """Process list token.

        Parameters
        ----------
        token : dict
            List token with 'children', 'bullet' and 'attrs' (ordered, start)

        Returns
        -------
        List
            List AST node with 1-based item ordinals

        """
        attrs = token.get("attrs", {})
        ordered = bool(attrs.get("ordered", False))
        start = int(attrs.get("start", 1))
        delimiter = token.get("bullet", "." if ordered else "-")

        items = []
        for offset, child in enumerate(token.get("children", [])):
            items.append(self._process_list_item(child, order=start + offset))
        return List(items=items, ordered=ordered, start=start, delimiter=delimiter)

    def _process_list_item(self, token: dict[str, Any], order: int) -> ListItem:
        children = self._process_tokens(token.get("children", []))

        if token.get("type") == "task_list_item":
            marker = TaskListMarker(checked=bool(token.get("attrs", {}).get("checked", False)))
            if children and isinstance(children[0], Paragraph):
                children[0].content.insert(0, marker)
            else:
                children.insert(0, Paragraph(content=[marker]))

        return ListItem(children=children, order=order)

    def _process_table(self, token: dict[str, Any]) -> Table:
        """Process a pipe table token.

        Column alignment comes from the header cells. Pipe tables carry no
        column widths, so every column is proportional.
        """
        columns: list[TableColumn] = []
        rows: list[TableRow] = []

        for section in token.get("children", []):
            section_type = section.get("type", "")
            if section_type == "table_head":
                # header cells are direct children of table_head
                head_cells = section.get("children", [])
                columns = [TableColumn(alignment=cell.get("attrs", {}).get("align")) for cell in head_cells]
                rows.append(TableRow(cells=self._process_pipe_cells(head_cells), is_header=True))
            elif section_type == "table_body":
                for row_token in section.get("children", []):
                    rows.append(TableRow(cells=self._process_pipe_cells(row_token.get("children", []))))

        return Table(columns=columns, rows=rows)

    def _process_pipe_cells(self, cell_tokens: list[dict[str, Any]]) -> list[TableCell]:
        cells = []
        for cell_token in cell_tokens:
            content = self._process_inline_tokens(cell_token.get("children", []))
            children: list[Node] = [Paragraph(content=content)] if content else []
            cells.append(TableCell(children=children))
        return cells

    def _process_grid_table(self, token: dict[str, Any]) -> Table:
        """Process a grid table token, keeping explicit cell positions and spans."""
        columns = [
            TableColumn(width=column.get("width", 0), alignment=column.get("align"))
            for column in token.get("attrs", {}).get("columns", [])
        ]

        rows = []
        for row_token in token.get("children", []):
            cells = []
            for cell_token in row_token.get("children", []):
                attrs = cell_token.get("attrs", {})
                cells.append(
                    TableCell(
                        children=self._process_tokens(cell_token.get("children", [])),
                        column_index=attrs.get("column_index", -1),
                        row_span=attrs.get("row_span", 1),
                        column_span=attrs.get("column_span", 1),
                    )
                )
            rows.append(TableRow(cells=cells, is_header=bool(row_token.get("attrs", {}).get("head", False))))

        return Table(columns=columns, rows=rows)

    # ------------------------------------------------------------------
    # Inline tokens
    # ------------------------------------------------------------------

    def _process_inline_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        """Process inline tokens.

        Parameters
        ----------
        tokens : list of dict
            Inline token dictionaries

        Returns
        -------
        list of Node
            Inline AST nodes

        """
        nodes: list[Node] = []
        for token in tokens:
            node = self._process_inline_token(token)
            if node is None:
                continue
            if isinstance(node, list):
                nodes.extend(node)
            else:
                nodes.append(node)
        return nodes

    def _handle_text_token(self, token: dict[str, Any]) -> list[Node]:
        """Split character references out of a text run."""
        raw = token.get("raw", "")
        nodes: list[Node] = []
        pos = 0
        for match in _ENTITY_RE.finditer(raw):
            original = match.group(0)
            decoded = html.unescape(original)
            if decoded == original:
                continue
            if match.start() > pos:
                nodes.append(Text(content=raw[pos : match.start()]))
            nodes.append(HtmlEntity(original=original, transcoded=decoded))
            pos = match.end()
        if pos < len(raw):
            nodes.append(Text(content=raw[pos:]))
        return nodes

    def _handle_emphasis_token(self, token: dict[str, Any]) -> Emphasis:
        delimiter_char, delimiter_count = _EMPHASIS_DELIMITERS[token["type"]]
        return Emphasis(
            content=self._process_inline_tokens(token.get("children", [])),
            delimiter_char=delimiter_char,
            delimiter_count=delimiter_count,
        )

    def _handle_codespan_token(self, token: dict[str, Any]) -> Code:
        return Code(content=token.get("raw", ""))

    def _handle_link_token(self, token: dict[str, Any]) -> Node:
        """Handle link token.

        mistune reports ``<url>`` autolinks, ``<user@host>`` email links and
        bare URLs as links whose only child is the URL text itself; those
        become AutoLink nodes.
        """
        attrs = token.get("attrs", {})
        url = attrs.get("url", "")
        children = token.get("children", [])

        if len(children) == 1 and children[0].get("type") == "text":
            label = html.unescape(children[0].get("raw", ""))
            if url == f"mailto:{label}":
                return AutoLink(url=label, is_email=True)
            if unquote(url) == unquote(label):
                return AutoLink(url=url)

        return Link(url=url, content=self._process_inline_tokens(children), title=attrs.get("title"))

    def _handle_image_token(self, token: dict[str, Any]) -> Link:
        """Images are links flagged ``is_image`` whose content is the alt text."""
        attrs = token.get("attrs", {})
        return Link(
            url=attrs.get("url", ""),
            content=self._process_inline_tokens(token.get("children", [])),
            title=attrs.get("title"),
            is_image=True,
        )

    def _handle_linebreak_token(self, token: dict[str, Any]) -> LineBreak:
        return LineBreak(soft=token.get("type") == "softbreak")

    def _handle_inline_html_token(self, token: dict[str, Any]) -> Text:
        return Text(content=token.get("raw", ""))

    def _handle_template_tag_token(self, token: dict[str, Any]) -> TemplateTag:
        return TemplateTag(tag=token.get("raw", ""))

    def _process_inline_token(self, token: dict[str, Any]) -> Node | list[Node] | None:
        """Process a single inline token.

        Parameters
        ----------
        token : dict
            Inline token dictionary

        Returns
        -------
        Node, list of Node, or None
            Inline AST node(s)

        """
        token_type = token.get("type", "")

        handler_map: dict[str, Any] = {
            "text": self._handle_text_token,
            "codespan": self._handle_codespan_token,
            "link": self._handle_link_token,
            "image": self._handle_image_token,
            "linebreak": self._handle_linebreak_token,
            "softbreak": self._handle_linebreak_token,
            "inline_html": self._handle_inline_html_token,
            "template_tag": self._handle_template_tag_token,
        }
        if token_type in _EMPHASIS_DELIMITERS:
            return self._handle_emphasis_token(token)

        handler = handler_map.get(token_type)
        if handler:
            return handler(token)

        logger.debug(f"Skipping unsupported inline token: {token_type}")
        return None


def markdown_to_ast(markdown_content: str, options: MarkdownParserOptions | None = None) -> Document:
    r"""Convert a markdown string to an AST Document.

    This is a convenience function that creates a parser and parses the
    markdown in one step.

    Parameters
    ----------
    markdown_content : str
        Markdown text to parse
    options : MarkdownParserOptions or None, default = None
        Parser configuration

    Returns
    -------
    Document
        AST document node

    Examples
    --------
    >>> from mdcompose.parsers.markdown import markdown_to_ast
    >>> doc = markdown_to_ast("# Hello\\n\\nWorld")
    >>> len(doc.children)
    2

    """
    return MarkdownParser(options).parse(markdown_content)
