#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_table_layout.py
"""Unit tests for mapping tables onto positioned layout cells.

Tests cover:
- Relative column weights
- Cell coordinates, explicit column indices and spans
- Border policies
- Zebra striping
- Header rows and column alignment

"""

import pytest

from mdcompose.ast import Document, Paragraph, Table, TableCell, TableColumn, TableRow, Text
from mdcompose.composition import LayoutDocument
from mdcompose.options import MarkdownRendererOptions
from mdcompose.renderer import MarkdownRenderer


def _cell(text: str, **kwargs) -> TableCell:
    return TableCell(children=[Paragraph(content=[Text(text)])], **kwargs)


def _render_table(table: Table, options=None) -> LayoutDocument:
    layout = LayoutDocument()
    MarkdownRenderer(Document(children=[table]), options).compose(layout.container())
    return layout


def _three_rows() -> Table:
    return Table(
        columns=[TableColumn(), TableColumn()],
        rows=[
            TableRow(cells=[_cell("h1"), _cell("h2")], is_header=True),
            TableRow(cells=[_cell("a"), _cell("b")]),
            TableRow(cells=[_cell("c"), _cell("d")]),
        ],
    )


def _cells_by_row(layout: LayoutDocument) -> dict[int, list]:
    rows: dict[int, list] = {}
    for cell in layout.find_all("cell"):
        rows.setdefault(cell.props["row"], []).append(cell)
    return rows


@pytest.mark.unit
class TestColumnWeights:
    """Tests for column definitions."""

    def test_widths_become_weights(self):
        """Test that positive widths are weights and zero widths weigh 1."""
        table = Table(
            columns=[TableColumn(width=0), TableColumn(width=2), TableColumn(width=0)],
            rows=[TableRow(cells=[_cell("a"), _cell("b"), _cell("c")])],
        )
        layout = _render_table(table)
        assert layout.find_all("table")[0].props["columns"] == [1, 2, 1]

    def test_missing_columns_padded(self):
        """Test that cells beyond the defined columns get weight-1 columns."""
        table = Table(columns=[TableColumn(width=4)], rows=[TableRow(cells=[_cell("a"), _cell("b")])])
        layout = _render_table(table)
        assert layout.find_all("table")[0].props["columns"] == [4, 1]

    def test_empty_table_renders_nothing(self):
        """Test that a table without rows emits no table region."""
        layout = _render_table(Table(columns=[TableColumn()]))
        assert layout.find_all("table") == []


@pytest.mark.unit
class TestCellPlacement:
    """Tests for cell coordinates and spans."""

    def test_positional_coordinates(self):
        """Test 1-based coordinates from row and cell position."""
        layout = _render_table(_three_rows())
        coordinates = [(cell.props["row"], cell.props["column"]) for cell in layout.find_all("cell")]
        assert coordinates == [(1, 1), (1, 2), (2, 1), (2, 2), (3, 1), (3, 2)]

    def test_explicit_column_index_and_span(self):
        """Test that an explicit column index and span are honored."""
        table = Table(
            columns=[TableColumn(), TableColumn(), TableColumn()],
            rows=[TableRow(cells=[_cell("spans", column_index=1, column_span=2)])],
        )
        cell = _render_table(table).find_all("cell")[0]
        assert cell.props == {"row": 1, "column": 2, "row_span": 1, "column_span": 2}

    def test_row_span(self):
        """Test that row spans are passed through."""
        table = Table(
            columns=[TableColumn(), TableColumn()],
            rows=[
                TableRow(cells=[_cell("tall", column_index=0, row_span=2), _cell("x", column_index=1)]),
                TableRow(cells=[_cell("y", column_index=1)]),
            ],
        )
        cells = _render_table(table).find_all("cell")
        assert [(c.props["row"], c.props["column"], c.props["row_span"]) for c in cells] == [
            (1, 1, 2),
            (1, 2, 1),
            (2, 2, 1),
        ]

    def test_non_positive_spans_clamped(self):
        """Test that spans below 1 become 1."""
        table = Table(rows=[TableRow(cells=[_cell("a", row_span=0, column_span=-3)])])
        cell = _render_table(table).find_all("cell")[0]
        assert (cell.props["row_span"], cell.props["column_span"]) == (1, 1)


@pytest.mark.unit
class TestBorders:
    """Tests for the table border policies."""

    def test_horizontal_borders(self):
        """Test bottom borders by row kind, with none under the last row."""
        rows = _cells_by_row(_render_table(_three_rows()))
        header, body, last = rows[1][0], rows[2][0], rows[3][0]

        assert header.content.kind == "border"
        assert header.content.props["bottom"] == 3.0
        assert header.content.props["top"] == header.content.props["left"] == 0

        assert body.content.kind == "border"
        assert body.content.props["bottom"] == 1.0

        assert last.content.kind == "background"

    def test_full_borders(self):
        """Test four-sided borders with a thicker header bottom."""
        options = MarkdownRendererOptions(table_border_style="full")
        rows = _cells_by_row(_render_table(_three_rows(), options))
        header, last = rows[1][0].content, rows[3][0].content
        assert header.props == {"color": "#E0E0E0", "top": 1.0, "right": 1.0, "bottom": 3.0, "left": 1.0}
        assert last.props["bottom"] == 1.0

    def test_no_borders(self):
        """Test that the none policy draws no borders."""
        options = MarkdownRendererOptions(table_border_style="none")
        layout = _render_table(_three_rows(), options)
        assert layout.find_all("border") == []

    def test_zero_thickness_draws_nothing(self):
        """Test that zero body thickness skips the border decoration."""
        options = MarkdownRendererOptions(table_border_thickness=0)
        rows = _cells_by_row(_render_table(_three_rows(), options))
        assert rows[2][0].content.kind == "background"


@pytest.mark.unit
class TestCellDecoration:
    """Tests for backgrounds, padding, alignment and header styling."""

    def test_zebra_striping(self):
        """Test that row backgrounds alternate starting with the odd color."""
        options = MarkdownRendererOptions(
            table_border_style="none",
            table_odd_row_background_color="#111111",
            table_even_row_background_color="#222222",
        )
        rows = _cells_by_row(_render_table(_three_rows(), options))
        colors = [rows[row][0].content.props["color"] for row in (1, 2, 3)]
        assert colors == ["#111111", "#222222", "#111111"]

    def test_cell_padding(self):
        """Test that cell content is padded."""
        options = MarkdownRendererOptions(table_border_style="none", table_cell_padding=8)
        cell = _render_table(_three_rows(), options).find_all("cell")[0]
        padding = cell.content.content
        assert padding.kind == "padding"
        assert padding.props["top"] == 8

    def test_header_row_is_bold(self):
        """Test that header cells are bold and body cells are not."""
        spans = _render_table(_three_rows()).find_all("span")
        bold = {span.props["text"]: span.props["style"].bold for span in spans}
        assert bold == {"h1": True, "h2": True, "a": False, "b": False, "c": False, "d": False}

    def test_column_alignment(self):
        """Test that column alignment wraps the cell content."""
        table = Table(
            columns=[TableColumn(alignment="right"), TableColumn()],
            rows=[TableRow(cells=[_cell("1"), _cell("2")])],
        )
        layout = _render_table(table, MarkdownRendererOptions(table_border_style="none"))
        aligns = layout.find_all("align")
        assert len(aligns) == 1
        assert aligns[0].props["alignment"] == "right"
        assert aligns[0].plain_text() == "1"

    def test_parsed_pipe_table(self, render):
        """Test a parsed pipe table end to end."""
        layout = render("| Name | Qty |\n|------|----:|\n| Apple | 3 |")
        assert layout.find_all("table")[0].props["columns"] == [1, 1]
        assert [cell.plain_text() for cell in layout.find_all("cell")] == ["Name", "Qty", "Apple", "3"]

    def test_parsed_grid_table_span(self, render):
        """Test a parsed grid table with a spanning cell."""
        grid = "+-----+-----+\n| a   | b   |\n+-----+-----+\n| wide      |\n+-----------+\n"
        layout = render(grid)
        assert layout.find_all("table")[0].props["columns"] == [5, 5]
        wide = layout.find_all("cell")[-1]
        assert (wide.props["row"], wide.props["column"], wide.props["column_span"]) == (2, 1, 2)
