#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for markdown parsing.

This module defines the switches of the markdown parser. Raw HTML
passthrough is never configurable: HTML in the source is always kept as
literal text.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from mdcompose.options.base import BaseParserOptions


@dataclass(frozen=True)
class MarkdownParserOptions(BaseParserOptions):
    """Configuration options for markdown-to-tree parsing.

    Parameters
    ----------
    parse_tables : bool, default True
        Recognize pipe tables.
    parse_grid_tables : bool, default True
        Recognize grid tables (``+---+---+`` borders), including spanning cells.
    parse_task_lists : bool, default True
        Turn ``[ ]``/``[x]`` at the start of list items into task markers.
    parse_bare_urls : bool, default True
        Turn bare ``http(s)://`` URLs into autolinks.
    parse_extended_emphasis : bool, default True
        Recognize ``~~``, ``~``, ``^``, ``==`` and ``++`` emphasis runs.
    parse_template_tags : bool, default True
        Recognize ``{name}`` template tags.

    """

    parse_tables: bool = field(
        default=True, metadata={"help": "Parse pipe tables", "importance": "core"}
    )
    parse_grid_tables: bool = field(
        default=True, metadata={"help": "Parse grid tables with spanning cells", "importance": "core"}
    )
    parse_task_lists: bool = field(
        default=True, metadata={"help": "Parse task list markers", "importance": "core"}
    )
    parse_bare_urls: bool = field(
        default=True, metadata={"help": "Turn bare URLs into autolinks", "importance": "advanced"}
    )
    parse_extended_emphasis: bool = field(
        default=True,
        metadata={
            "help": "Parse strikethrough, sub/superscript, highlight and underline runs",
            "importance": "advanced",
        },
    )
    parse_template_tags: bool = field(
        default=True, metadata={"help": "Parse {name} template tags", "importance": "core"}
    )
