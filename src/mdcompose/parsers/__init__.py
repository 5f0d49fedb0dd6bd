#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdcompose/parsers/__init__.py
"""Markdown parsing package.

``MarkdownParser`` turns markdown text into the ``mdcompose.ast`` tree using
mistune; ``mdcompose.parsers.plugins`` holds the mistune plugins for the
syntax mistune does not ship (template tags, ``++underline++``, grid tables).
"""

from mdcompose.parsers.markdown import MarkdownParser, markdown_to_ast

__all__ = ["MarkdownParser", "markdown_to_ast"]
