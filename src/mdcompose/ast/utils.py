#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdcompose/ast/utils.py
"""Traversal helpers for AST trees."""

from __future__ import annotations

from typing import Iterator

from mdcompose.ast.nodes import (
    BlockQuote,
    Document,
    Emphasis,
    Heading,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    Table,
    TableCell,
    TableRow,
)


def get_node_children(node: Node) -> list[Node]:
    """Return the direct children of a node, blocks and inlines alike.

    Parameters
    ----------
    node : Node
        Node to inspect

    Returns
    -------
    list of Node
        Children in document order (empty for leaf nodes)

    """
    if isinstance(node, (Document, BlockQuote, ListItem, TableCell)):
        return list(node.children)
    if isinstance(node, List):
        return list(node.items)
    if isinstance(node, Table):
        return list(node.rows)
    if isinstance(node, TableRow):
        return list(node.cells)
    if isinstance(node, (Heading, Paragraph, Emphasis, Link)):
        return list(node.content)
    return []


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all of its descendants in depth-first pre-order.

    Parameters
    ----------
    node : Node
        Root of the traversal

    Yields
    ------
    Node
        Each node of the subtree, parents before children

    """
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(get_node_children(current)))


def collect_image_urls(document: Node) -> list[str]:
    """Collect the distinct image references of a tree.

    Parameters
    ----------
    document : Node
        Root of the tree, usually a Document

    Returns
    -------
    list of str
        Image references, deduplicated, in first-seen document order

    """
    seen: dict[str, None] = {}
    for node in walk(document):
        if isinstance(node, Link) and node.is_image and node.url:
            seen.setdefault(node.url, None)
    return list(seen)
