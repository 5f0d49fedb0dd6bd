#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdcompose/ast/visitors.py
"""Visitor pattern base class for AST traversal.

Every node kind has exactly one abstract ``visit_*`` method here, so a
concrete visitor that forgets a kind fails at instantiation time instead of
silently skipping content.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from mdcompose.ast.nodes import (
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
    Paragraph,
    Table,
    TableCell,
    TableRow,
    TaskListMarker,
    TemplateTag,
    Text,
    ThematicBreak,
)


class NodeVisitor(ABC):
    """Abstract base class for AST node visitors.

    Subclasses implement a ``visit_*`` method for each node kind. Nodes call
    back into the visitor through ``Node.accept``.

    Examples
    --------
    Collect the literal text of a tree:

        >>> class TextCollector(NodeVisitor):
        ...     def __init__(self):
        ...         self.parts = []
        ...     def visit_text(self, node):
        ...         self.parts.append(node.content)
        ...     # ... remaining visit_* methods

    """

    @abstractmethod
    def visit_document(self, node: Document) -> Any:
        """Visit a Document node."""

    @abstractmethod
    def visit_heading(self, node: Heading) -> Any:
        """Visit a Heading node."""

    @abstractmethod
    def visit_paragraph(self, node: Paragraph) -> Any:
        """Visit a Paragraph node."""

    @abstractmethod
    def visit_code_block(self, node: CodeBlock) -> Any:
        """Visit a CodeBlock node."""

    @abstractmethod
    def visit_block_quote(self, node: BlockQuote) -> Any:
        """Visit a BlockQuote node."""

    @abstractmethod
    def visit_list(self, node: List) -> Any:
        """Visit a List node."""

    @abstractmethod
    def visit_list_item(self, node: ListItem) -> Any:
        """Visit a ListItem node."""

    @abstractmethod
    def visit_table(self, node: Table) -> Any:
        """Visit a Table node."""

    @abstractmethod
    def visit_table_row(self, node: TableRow) -> Any:
        """Visit a TableRow node."""

    @abstractmethod
    def visit_table_cell(self, node: TableCell) -> Any:
        """Visit a TableCell node."""

    @abstractmethod
    def visit_thematic_break(self, node: ThematicBreak) -> Any:
        """Visit a ThematicBreak node."""

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        """Visit a Text node."""

    @abstractmethod
    def visit_emphasis(self, node: Emphasis) -> Any:
        """Visit an Emphasis node."""

    @abstractmethod
    def visit_link(self, node: Link) -> Any:
        """Visit a Link node (hyperlink or image)."""

    @abstractmethod
    def visit_auto_link(self, node: AutoLink) -> Any:
        """Visit an AutoLink node."""

    @abstractmethod
    def visit_line_break(self, node: LineBreak) -> Any:
        """Visit a LineBreak node."""

    @abstractmethod
    def visit_code(self, node: Code) -> Any:
        """Visit an inline Code node."""

    @abstractmethod
    def visit_task_list_marker(self, node: TaskListMarker) -> Any:
        """Visit a TaskListMarker node."""

    @abstractmethod
    def visit_template_tag(self, node: TemplateTag) -> Any:
        """Visit a TemplateTag node."""

    @abstractmethod
    def visit_html_entity(self, node: HtmlEntity) -> Any:
        """Visit an HtmlEntity node."""
