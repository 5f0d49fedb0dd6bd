#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdcompose/parsers/plugins.py
"""Mistune plugins used by the mdcompose markdown parser.

Each plugin is a plain callable taking the ``mistune.Markdown`` instance,
so it can be passed in the ``plugins`` list of ``mistune.create_markdown``
next to mistune's own plugin names.

``template_tags``
    ``{name}`` placeholders (ASCII letters and digits) become
    ``template_tag`` inline tokens.
``underline``
    ``++text++`` runs become ``underline`` inline tokens.
``grid_tables``
    ``+---+---+`` tables, including cells spanning several rows or
    columns, become ``grid_table`` block tokens whose cells hold block
    tokens.
``disable_html``
    Removes the raw HTML rules so that markup stays literal text.
"""

from __future__ import annotations

import logging
import re
import textwrap
from typing import TYPE_CHECKING, Any, Match, Optional

if TYPE_CHECKING:
    from mistune import Markdown
    from mistune.block_parser import BlockParser
    from mistune.core import BlockState, InlineState
    from mistune.inline_parser import InlineParser

logger = logging.getLogger(__name__)

TEMPLATE_TAG_PATTERN = r"\{[A-Za-z0-9]+\}"
UNDERLINE_PATTERN = r"\+\+(?=[^\s+])"
GRID_TABLE_PATTERN = r"^ {0,3}\+(?:[-=:]+\+)+[ \t]*$"

_BORDER_LINE_CHARS = frozenset("+-=:")
_HTML_BLOCK_RULES = ("raw_html", "block_html")


# ---------------------------------------------------------------------------
# Template tags
# ---------------------------------------------------------------------------


def parse_template_tag(inline: "InlineParser", m: Match[str], state: "InlineState") -> Optional[int]:
    """Emit a template tag token unless the brace is itself escaped by ``{``."""
    start = m.start()
    if start > 0 and state.src[start - 1] == "{":
        return None
    state.append_token({"type": "template_tag", "raw": m.group(0)[1:-1]})
    return m.end()


def template_tags(md: "Markdown") -> None:
    """Recognize ``{name}`` template tags.

    A tag name is one or more ASCII letters or digits. ``{{name}}`` is left
    as literal text.
    """
    md.inline.register("template_tag", TEMPLATE_TAG_PATTERN, parse_template_tag, before="link")


# ---------------------------------------------------------------------------
# Underline (++text++)
# ---------------------------------------------------------------------------


def _find_closing_marker(src: str, pos: int, marker: str) -> Optional[int]:
    char = marker[0]
    end = src.find(marker, pos)
    while end != -1:
        after = end + len(marker)
        # a longer run of marker characters cannot close
        if after < len(src) and src[after] == char:
            end = src.find(marker, end + 1)
            continue
        if end > pos:
            previous = src[end - 1]
            if not previous.isspace() and previous != char:
                return after
        end = src.find(marker, end + 1)
    return None


def parse_underline(inline: "InlineParser", m: Match[str], state: "InlineState") -> Optional[int]:
    pos = m.end()
    end_pos = _find_closing_marker(state.src, pos, "++")
    if end_pos is None:
        return None

    new_state = state.copy()
    new_state.src = state.src[pos : end_pos - 2]
    children = inline.render(new_state)
    state.append_token({"type": "underline", "children": children})
    return end_pos


def underline(md: "Markdown") -> None:
    """Recognize ``++inserted++`` runs, rendered as underlined text."""
    md.inline.register("underline", UNDERLINE_PATTERN, parse_underline, before="link")


# ---------------------------------------------------------------------------
# Grid tables
# ---------------------------------------------------------------------------


def _collect_grid_lines(state: "BlockState", start: int, indent: int) -> tuple[list[str], int]:
    """Collect the table lines starting at ``start``, up to the last border line.

    Returns the lines without indentation or trailing whitespace, and the
    source position after the last kept line.
    """
    lines: list[str] = []
    ends: list[int] = []
    pos = start
    while pos < state.cursor_max:
        line = state.get_line(pos)
        body = line[indent:] if line[:indent].strip() == "" else ""
        if not body.startswith(("+", "|")):
            break
        lines.append(body.rstrip())
        pos += len(line)
        ends.append(pos)

    # the table ends at its last border line
    last_border = max((i for i, line in enumerate(lines) if line.startswith("+")), default=0)
    return lines[: last_border + 1], ends[last_border] if ends else start


def _closes_cell(grid: list[str], top: int, left: int, bottom: int, right: int) -> bool:
    line = grid[bottom]
    if line[left] != "+":
        return False
    if any(char not in "-+" for char in line[left + 1 : right]):
        return False
    return all(grid[row][left] in "|+" for row in range(top + 1, bottom))


def _enters_interior(grid: list[str], top: int, left: int, bottom: int, right: int) -> bool:
    """Whether a border segment runs from an edge of the cell into its interior."""
    for row in range(top + 1, bottom):
        if grid[row][left] == "+" and grid[row][left + 1] == "-":
            return True
        if grid[row][right] == "+" and grid[row][right - 1] == "-":
            return True
    for column in range(left + 1, right):
        if grid[top][column] == "+" and grid[top + 1][column] == "|":
            return True
        if grid[bottom][column] == "+" and grid[bottom - 1][column] == "|":
            return True
    return False


def _scan_down(grid: list[str], top: int, left: int, right: int) -> Optional[int]:
    for bottom in range(top + 1, len(grid)):
        char = grid[bottom][right]
        if char == "+":
            if _closes_cell(grid, top, left, bottom, right):
                return None if _enters_interior(grid, top, left, bottom, right) else bottom
        elif char != "|":
            return None
    return None


def _scan_cell(grid: list[str], top: int, left: int) -> Optional[tuple[int, int]]:
    line = grid[top]
    for right in range(left + 1, len(line)):
        char = line[right]
        if char == "+":
            bottom = _scan_down(grid, top, left, right)
            if bottom is not None:
                return bottom, right
        elif char != "-":
            return None
    return None


def scan_grid_cells(grid: list[str]) -> Optional[list[tuple[int, int, int, int]]]:
    """Locate the cells of a normalized grid.

    Parameters
    ----------
    grid : list of str
        Table lines padded to equal width, with every border drawn using
        only ``+``, ``-`` and ``|``

    Returns
    -------
    list of tuple or None
        ``(top, left, bottom, right)`` character coordinates of each cell
        border, ordered top to bottom and left to right, or None when the
        grid does not form a complete table

    """
    last_row = len(grid) - 1
    right_edge = len(grid[0]) - 1
    if last_row < 1 or right_edge < 1:
        return None

    done = [-1] * len(grid[0])
    corners = [(0, 0)]
    cells: list[tuple[int, int, int, int]] = []
    while corners:
        top, left = corners.pop(0)
        if top == last_row or left == right_edge or top <= done[left]:
            continue
        found = _scan_cell(grid, top, left)
        if found is None:
            continue
        bottom, right = found
        for column in range(left, right):
            if done[column] != top - 1:
                return None
            done[column] = bottom - 1
        cells.append((top, left, bottom, right))
        corners.extend([(top, right), (bottom, left)])
        corners.sort()

    if any(done[column] != last_row - 1 for column in range(right_edge)):
        return None
    return sorted(cells)


def _column_alignment(border: str, left: int, right: int) -> Optional[str]:
    starts = border[left + 1] == ":"
    ends = border[right - 1] == ":"
    if starts and ends:
        return "center"
    if ends:
        return "right"
    if starts:
        return "left"
    return None


def _cell_text(grid: list[str], top: int, left: int, bottom: int, right: int) -> str:
    lines = [grid[row][left + 1 : right].rstrip() for row in range(top + 1, bottom)]
    text = textwrap.dedent("\n".join(lines)).strip("\n")
    return text + "\n" if text else ""


def parse_grid_table(block: "BlockParser", m: Match[str], state: "BlockState") -> Optional[int]:
    start = m.start()
    first_line = state.get_line(start)
    indent = len(first_line) - len(first_line.lstrip(" "))

    lines, end_pos = _collect_grid_lines(state, start, indent)
    if len(lines) < 2:
        return None

    width = max(len(line) for line in lines)
    top_border = lines[0].ljust(width)
    header_separator: Optional[int] = None
    grid: list[str] = []
    for index, line in enumerate(lines):
        if line and set(line) <= _BORDER_LINE_CHARS:
            if index > 0 and header_separator is None and "=" in line:
                header_separator = index
            line = line.replace("=", "-").replace(":", "-")
        grid.append(line.ljust(width))

    cells = scan_grid_cells(grid)
    if not cells:
        logger.debug("Grid table candidate is not a complete grid, treating it as text")
        return None

    row_bounds = sorted({top for top, _, _, _ in cells} | {bottom for _, _, bottom, _ in cells})
    column_bounds = sorted({left for _, left, _, _ in cells} | {right for _, _, _, right in cells})

    columns = []
    for left, right in zip(column_bounds, column_bounds[1:]):
        columns.append({"width": right - left - 1, "align": _column_alignment(top_border, left, right)})

    rows: list[dict[str, Any]] = []
    for top in row_bounds[:-1]:
        is_head = header_separator is not None and top < header_separator
        rows.append({"type": "grid_table_row", "attrs": {"head": is_head}, "children": []})

    for top, left, bottom, right in cells:
        row_index = row_bounds.index(top)
        column_index = column_bounds.index(left)
        child = state.child_state(_cell_text(grid, top, left, bottom, right))
        block.parse(child)
        rows[row_index]["children"].append(
            {
                "type": "grid_table_cell",
                "attrs": {
                    "column_index": column_index,
                    "row_span": row_bounds.index(bottom) - row_index,
                    "column_span": column_bounds.index(right) - column_index,
                },
                "children": child.tokens,
            }
        )

    state.append_token({"type": "grid_table", "attrs": {"columns": columns}, "children": rows})
    return end_pos


def grid_tables(md: "Markdown") -> None:
    """Recognize grid tables, also inside block quotes and list items.

    The top border may carry ``:`` alignment markers and an ``=`` border
    line separates header rows from body rows.
    """
    md.block.register("grid_table", GRID_TABLE_PATTERN, parse_grid_table, before="paragraph")
    md.block.insert_rule(md.block.block_quote_rules, "grid_table", before="paragraph")
    md.block.insert_rule(md.block.list_rules, "grid_table", before="paragraph")


# ---------------------------------------------------------------------------
# Raw HTML
# ---------------------------------------------------------------------------


def disable_html(md: "Markdown") -> None:
    """Remove the raw HTML block and inline rules."""
    for rules in (md.block.rules, md.block.block_quote_rules, md.block.list_rules):
        for name in _HTML_BLOCK_RULES:
            if name in rules:
                rules.remove(name)
    if "inline_html" in md.inline.rules:
        md.inline.rules.remove("inline_html")
