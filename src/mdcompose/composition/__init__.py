#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Document composition targets.

The renderer emits calls against the abstract interfaces in
``mdcompose.composition.base``. ``LayoutDocument`` records those calls into
an inspectable tree, and ``PdfLayoutWriter`` turns a recorded tree into a
PDF (requires ReportLab).
"""

from mdcompose.composition.base import ColumnRegion, Container, RowRegion, TableRegion, TextRegion, TextSpan
from mdcompose.composition.layout import (
    LayoutColumnRegion,
    LayoutContainer,
    LayoutDocument,
    LayoutElement,
    LayoutRowRegion,
    LayoutTableRegion,
    LayoutTextRegion,
    LayoutTextSpan,
)
from mdcompose.composition.pdf import PdfLayoutWriter

__all__ = [
    "ColumnRegion",
    "Container",
    "LayoutColumnRegion",
    "LayoutContainer",
    "LayoutDocument",
    "LayoutElement",
    "LayoutRowRegion",
    "LayoutTableRegion",
    "LayoutTextRegion",
    "LayoutTextSpan",
    "PdfLayoutWriter",
    "RowRegion",
    "TableRegion",
    "TextRegion",
    "TextSpan",
]
