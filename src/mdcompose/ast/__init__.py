#  Copyright (c) 2025 Tom Villani, Ph.D.
"""AST (Abstract Syntax Tree) module for mdcompose.

This package holds the node classes produced by the markdown parser and
consumed by the renderer, the visitor base class, and traversal helpers.

"""

from mdcompose.ast.nodes import (
    BLOCK_NODE_TYPES,
    INLINE_NODE_TYPES,
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
from mdcompose.ast.utils import collect_image_urls, get_node_children, walk
from mdcompose.ast.visitors import NodeVisitor

__all__ = [
    "BLOCK_NODE_TYPES",
    "INLINE_NODE_TYPES",
    "AutoLink",
    "BlockQuote",
    "Code",
    "CodeBlock",
    "Document",
    "Emphasis",
    "Heading",
    "HtmlEntity",
    "LineBreak",
    "Link",
    "List",
    "ListItem",
    "Node",
    "NodeVisitor",
    "Paragraph",
    "Table",
    "TableCell",
    "TableColumn",
    "TableRow",
    "TaskListMarker",
    "TemplateTag",
    "Text",
    "ThematicBreak",
    "collect_image_urls",
    "get_node_children",
    "walk",
]
