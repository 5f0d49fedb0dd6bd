#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdcompose/ast/nodes.py
"""AST node classes for parsed markdown documents.

This module defines the node hierarchy consumed by the renderer. Each node
represents either a structural block or an inline text-level element, and
every node supports the visitor pattern through ``accept``.

Node Hierarchy
--------------
Block-level nodes represent structural document elements:
    - Document, BlockQuote, List, ListItem, Table, TableRow, TableCell (containers)
    - Heading, Paragraph, CodeBlock, ThematicBreak (leaves)

Inline nodes represent text-level content:
    - Text, LineBreak, AutoLink, Code, TaskListMarker, TemplateTag, HtmlEntity (leaves)
    - Emphasis, Link (containers holding inline children)

Trees are produced once by the parser and treated as immutable afterwards;
child order is significant and preserved.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Literal, Optional

Alignment = Literal["left", "center", "right"]


class Node(ABC):
    """Base class for all AST nodes.

    All document nodes inherit from this base class and support the visitor
    pattern for traversal and rendering.

    """

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class Document(Node):
    """Root document node containing block-level children.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the document
    metadata : dict, default = empty dict
        Document-level metadata (for example the source path)

    """

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_document``."""
        return visitor.visit_document(self)


@dataclass
class Heading(Node):
    """Heading node (ATX or setext).

    Parameters
    ----------
    level : int
        Heading level, 1-based
    content : list of Node, default = empty list
        Inline content of the heading
    lines : list of str, default = empty list
        Raw literal lines, used only when there is no inline content

    """

    level: int
    content: list[Node] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_heading``."""
        return visitor.visit_heading(self)


@dataclass
class Paragraph(Node):
    """Paragraph node.

    A paragraph normally owns inline content. Blocks that the parser keeps as
    literal text (raw HTML with passthrough disabled) carry their text in
    ``lines`` instead.

    Parameters
    ----------
    content : list of Node, default = empty list
        Inline content
    lines : list of str, default = empty list
        Raw literal lines

    """

    content: list[Node] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_paragraph``."""
        return visitor.visit_paragraph(self)


@dataclass
class CodeBlock(Node):
    """Fenced or indented code block, rendered verbatim.

    Parameters
    ----------
    lines : list of str, default = empty list
        Literal source lines
    info : str or None, default = None
        Fence info string (usually the language)

    """

    lines: list[str] = field(default_factory=list)
    info: Optional[str] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_code_block``."""
        return visitor.visit_code_block(self)


@dataclass
class BlockQuote(Node):
    """Block quote containing other blocks."""

    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_block_quote``."""
        return visitor.visit_block_quote(self)


@dataclass
class List(Node):
    """Ordered or unordered list.

    Parameters
    ----------
    items : list of ListItem, default = empty list
        Items in document order
    ordered : bool, default = False
        Whether the list is numbered
    start : int, default = 1
        First ordinal of an ordered list
    delimiter : str, default = "-"
        ``.`` or ``)`` for ordered lists, the bullet character otherwise

    """

    items: list[ListItem] = field(default_factory=list)
    ordered: bool = False
    start: int = 1
    delimiter: str = "-"

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_list``."""
        return visitor.visit_list(self)


@dataclass
class ListItem(Node):
    """List item containing blocks.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block content of the item
    order : int, default = 1
        Ordinal used as the label of ordered lists

    """

    children: list[Node] = field(default_factory=list)
    order: int = 1

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_list_item``."""
        return visitor.visit_list_item(self)


@dataclass
class TableColumn:
    """Column definition of a table.

    Parameters
    ----------
    width : float, default = 0
        Relative weight of the column; zero or less means uniform weight
    alignment : {'left', 'center', 'right'} or None, default = None
        Horizontal alignment of the cells in this column

    """

    width: float = 0
    alignment: Optional[Alignment] = None


@dataclass
class Table(Node):
    """Table with column definitions and rows.

    Header rows are ordinary rows flagged with ``is_header``.

    Parameters
    ----------
    columns : list of TableColumn, default = empty list
        Column definitions in column order
    rows : list of TableRow, default = empty list
        All rows, header rows included, in document order

    """

    columns: list[TableColumn] = field(default_factory=list)
    rows: list[TableRow] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table``."""
        return visitor.visit_table(self)


@dataclass
class TableRow(Node):
    """Row of table cells."""

    cells: list[TableCell] = field(default_factory=list)
    is_header: bool = False

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table_row``."""
        return visitor.visit_table_row(self)


@dataclass
class TableCell(Node):
    """Table cell holding block content.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block content of the cell
    column_index : int, default = -1
        Explicit 0-based column, or -1 to use the cell's position in the row
    row_span : int, default = 1
        Number of rows this cell spans
    column_span : int, default = 1
        Number of columns this cell spans

    """

    children: list[Node] = field(default_factory=list)
    column_index: int = -1
    row_span: int = 1
    column_span: int = 1

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table_cell``."""
        return visitor.visit_table_cell(self)


@dataclass
class ThematicBreak(Node):
    """Horizontal rule."""

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_thematic_break``."""
        return visitor.visit_thematic_break(self)


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Literal text run."""

    content: str

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_text``."""
        return visitor.visit_text(self)


@dataclass
class Emphasis(Node):
    """Emphasis run identified by its delimiter.

    ``*x*`` is ``("*", 1)``, ``**x**`` is ``("*", 2)``, ``~~x~~`` is
    ``("~", 2)``, ``~x~`` is ``("~", 1)``, ``^x^`` is ``("^", 1)``,
    ``++x++`` is ``("+", 2)`` and ``==x==`` is ``("=", 2)``.

    Parameters
    ----------
    content : list of Node, default = empty list
        Inline children
    delimiter_char : str, default = "*"
        Delimiter character
    delimiter_count : int, default = 1
        Number of delimiter characters on each side

    """

    content: list[Node] = field(default_factory=list)
    delimiter_char: str = "*"
    delimiter_count: int = 1

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_emphasis``."""
        return visitor.visit_emphasis(self)


@dataclass
class Link(Node):
    """Hyperlink or image reference.

    Parameters
    ----------
    url : str
        Link target or image reference
    content : list of Node, default = empty list
        Link label, or the alt text of an image
    title : str or None, default = None
        Optional title
    is_image : bool, default = False
        True for ``![alt](src)`` references

    """

    url: str
    content: list[Node] = field(default_factory=list)
    title: Optional[str] = None
    is_image: bool = False

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_link``."""
        return visitor.visit_link(self)


@dataclass
class AutoLink(Node):
    """Autolink whose label and target are the same URL."""

    url: str
    is_email: bool = False

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_auto_link``."""
        return visitor.visit_auto_link(self)


@dataclass
class LineBreak(Node):
    """Line break.

    Parameters
    ----------
    soft : bool, default = False
        True for a plain newline inside a paragraph, False for a hard break
        (two trailing spaces or a backslash)

    """

    soft: bool = False

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_line_break``."""
        return visitor.visit_line_break(self)


@dataclass
class Code(Node):
    """Inline code span."""

    content: str

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_code``."""
        return visitor.visit_code(self)


@dataclass
class TaskListMarker(Node):
    """Checkbox at the start of a task list item."""

    checked: bool = False

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_task_list_marker``."""
        return visitor.visit_task_list_marker(self)


@dataclass
class TemplateTag(Node):
    """Template placeholder written as ``{tag}``.

    The tag is resolved at render time against the template table of the
    render options.

    """

    tag: str

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_template_tag``."""
        return visitor.visit_template_tag(self)


@dataclass
class HtmlEntity(Node):
    """Character or entity reference such as ``&amp;``.

    Parameters
    ----------
    original : str
        Reference as written in the source
    transcoded : str
        Decoded text

    """

    original: str
    transcoded: str

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_html_entity``."""
        return visitor.visit_html_entity(self)


BLOCK_NODE_TYPES: tuple[type[Node], ...] = (
    Document,
    Heading,
    Paragraph,
    CodeBlock,
    BlockQuote,
    List,
    ListItem,
    Table,
    TableRow,
    TableCell,
    ThematicBreak,
)

INLINE_NODE_TYPES: tuple[type[Node], ...] = (
    Text,
    Emphasis,
    Link,
    AutoLink,
    LineBreak,
    Code,
    TaskListMarker,
    TemplateTag,
    HtmlEntity,
)
