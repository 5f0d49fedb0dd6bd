#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdcompose/composition/base.py
"""Abstract document-composition targets.

The renderer never lays out pages itself; it issues calls against these
interfaces. A ``Container`` is a slot that receives exactly one piece of
content. Decorator methods (padding, border, background, ...) wrap the slot
and return the inner slot, so calls chain the same way the decorations
nest::

    cell = table.cell(row=1, column=2)
    cell.border("#E0E0E0", bottom=1).padding(5).text().span("value")

Regions (column, row, text, table) hand out further slots or spans.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from mdcompose.constants import CellAlignment, ParagraphAlignment
from mdcompose.style import StyleFrame, TextStyle


class TextSpan(ABC):
    """Handle to a run of text emitted into a text region."""

    @property
    @abstractmethod
    def style(self) -> TextStyle:
        """Current style of the span."""

    @abstractmethod
    def update_style(self, frame: StyleFrame) -> TextSpan:
        """Replace the span style with ``frame(style)`` and return the span."""


class TextRegion(ABC):
    """Paragraph-like region holding spans, hyperlinks and inline elements."""

    @abstractmethod
    def align(self, alignment: ParagraphAlignment) -> None:
        """Set the horizontal alignment of the region."""

    @abstractmethod
    def span(self, text: str) -> TextSpan:
        """Emit a text run with the default style."""

    @abstractmethod
    def hyperlink(self, text: str, url: str) -> TextSpan:
        """Emit a text run that links to ``url``."""

    @abstractmethod
    def element(self) -> Container:
        """Open an inline slot (used for images placed within text)."""

    def line_break(self) -> TextSpan:
        """Emit a forced line break."""
        return self.span("\n")


class ColumnRegion(ABC):
    """Vertical stack of items."""

    @abstractmethod
    def spacing(self, value: float) -> None:
        """Set the gap placed before each subsequently added item."""

    @abstractmethod
    def item(self) -> Container:
        """Append an item slot."""


class RowRegion(ABC):
    """Horizontal sequence of auto-sized and flexible items."""

    @abstractmethod
    def spacing(self, value: float) -> None:
        """Set the gap between items."""

    @abstractmethod
    def auto_item(self) -> Container:
        """Append an item sized to its content."""

    @abstractmethod
    def relative_item(self, weight: float = 1) -> Container:
        """Append an item sharing the remaining width by ``weight``."""


class TableRegion(ABC):
    """Grid with explicitly placed cells."""

    @abstractmethod
    def relative_column(self, weight: float = 1) -> None:
        """Define the next column with a relative width."""

    def columns(self, weights: Iterable[float]) -> None:
        """Define several relative columns at once."""
        for weight in weights:
            self.relative_column(weight)

    @abstractmethod
    def cell(self, row: int, column: int, row_span: int = 1, column_span: int = 1) -> Container:
        """Place a cell at 1-based ``row``/``column`` coordinates."""


class Container(ABC):
    """Slot receiving one piece of content, optionally decorated."""

    # -- decorations --------------------------------------------------------

    @abstractmethod
    def padding(self, value: float) -> Container:
        """Pad all four sides."""

    @abstractmethod
    def padding_left(self, value: float) -> Container:
        """Pad the left side only."""

    @abstractmethod
    def padding_top(self, value: float) -> Container:
        """Pad the top side only."""

    @abstractmethod
    def background(self, color: str) -> Container:
        """Fill the slot with a background color."""

    @abstractmethod
    def border(
        self,
        color: str,
        top: float = 0,
        right: float = 0,
        bottom: float = 0,
        left: float = 0,
    ) -> Container:
        """Draw borders with the given per-side thickness (0 means none)."""

    def border_left(self, thickness: float, color: str) -> Container:
        """Draw a left border only."""
        return self.border(color, left=thickness)

    @abstractmethod
    def align(self, alignment: CellAlignment) -> Container:
        """Align the content horizontally within the slot."""

    @abstractmethod
    def hyperlink(self, url: str) -> Container:
        """Make the whole content a link to ``url``."""

    @abstractmethod
    def debug_area(self, label: str, color: str) -> Container:
        """Outline the content and label it, for layout debugging."""

    # -- content ------------------------------------------------------------

    @abstractmethod
    def column(self) -> ColumnRegion:
        """Fill the slot with a vertical stack."""

    @abstractmethod
    def row(self) -> RowRegion:
        """Fill the slot with a horizontal row."""

    @abstractmethod
    def text(self) -> TextRegion:
        """Fill the slot with a text region."""

    @abstractmethod
    def table(self) -> TableRegion:
        """Fill the slot with a table."""

    @abstractmethod
    def image(self, data: bytes, width: float, height: float, image_format: Optional[str] = None) -> None:
        """Fill the slot with an image drawn at ``width`` x ``height`` points."""

    @abstractmethod
    def line_horizontal(self, thickness: float, color: str) -> None:
        """Fill the slot with a horizontal rule."""
