#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdcompose/options/pdf.py
"""Configuration options for the ReportLab PDF writer."""

from __future__ import annotations

from dataclasses import dataclass, field

from mdcompose.constants import (
    DEFAULT_CREATOR,
    DEFAULT_PDF_FONT_FAMILY,
    DEFAULT_PDF_FONT_SIZE,
    DEFAULT_PDF_LINE_SPACING,
    DEFAULT_PDF_MARGIN,
    DEFAULT_PDF_PAGE_SIZE,
    PageSize,
)
from mdcompose.options.base import BaseRendererOptions


@dataclass(frozen=True)
class PdfOptions(BaseRendererOptions):
    """Configuration options for writing a layout to PDF.

    Parameters
    ----------
    page_size : {"letter", "a4", "legal"}, default "a4"
        Page size for the PDF document.
    margin_top, margin_bottom, margin_left, margin_right : float, default 50.0
        Page margins in points (72 points = 1 inch).
    font_name : str, default "Helvetica"
        Font used when a span does not name a font, and the fallback for
        fonts that are not registered with ReportLab.
    font_size : float, default 12.0
        Font size used when a span does not set one.
    line_spacing : float, default 1.2
        Line spacing multiplier (1.0 = single spacing).
    font_files : dict[str, str] | None, default None
        TrueType fonts to register before writing, as ``{font_name: path}``.
        Register a unicode-capable font under the task glyph font name to get
        proper checkboxes.
    title : str | None, default None
        Document title metadata.
    creator : str | None, default "mdcompose"
        Creator metadata. Set to None to omit it.

    """

    page_size: PageSize = field(
        default=DEFAULT_PDF_PAGE_SIZE,
        metadata={
            "help": "Page size: letter, a4, or legal",
            "choices": ["letter", "a4", "legal"],
            "importance": "core",
        },
    )
    margin_top: float = field(
        default=DEFAULT_PDF_MARGIN,
        metadata={"help": "Top margin in points (72pt = 1 inch)", "type": float, "importance": "advanced"},
    )
    margin_bottom: float = field(
        default=DEFAULT_PDF_MARGIN,
        metadata={"help": "Bottom margin in points", "type": float, "importance": "advanced"},
    )
    margin_left: float = field(
        default=DEFAULT_PDF_MARGIN, metadata={"help": "Left margin in points", "type": float, "importance": "advanced"}
    )
    margin_right: float = field(
        default=DEFAULT_PDF_MARGIN, metadata={"help": "Right margin in points", "type": float, "importance": "advanced"}
    )
    font_name: str = field(
        default=DEFAULT_PDF_FONT_FAMILY,
        metadata={"help": "Default font (Helvetica, Times-Roman, Courier)", "importance": "core"},
    )
    font_size: float = field(
        default=DEFAULT_PDF_FONT_SIZE,
        metadata={"help": "Default font size in points", "type": float, "importance": "core"},
    )
    line_spacing: float = field(
        default=DEFAULT_PDF_LINE_SPACING,
        metadata={"help": "Line spacing multiplier (1.0 = single)", "type": float, "importance": "advanced"},
    )
    font_files: dict[str, str] | None = field(
        default=None,
        metadata={"help": "TrueType fonts to register as {name: path}", "importance": "advanced"},
    )
    title: str | None = field(default=None, metadata={"help": "Document title metadata", "importance": "core"})
    creator: str | None = field(
        default=DEFAULT_CREATOR,
        metadata={
            "help": "Creator application name for document metadata. Set to None to disable creator metadata.",
            "importance": "core",
        },
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges for PDF options.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        super().__post_init__()

        if self.page_size not in ("letter", "a4", "legal"):
            raise ValueError(f"page_size must be 'letter', 'a4' or 'legal', got {self.page_size!r}")

        if self.line_spacing <= 0:
            raise ValueError(f"line_spacing must be positive, got {self.line_spacing}")

        for name in ("margin_top", "margin_bottom", "margin_left", "margin_right"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")

        if self.font_size <= 0:
            raise ValueError(f"font_size must be positive, got {self.font_size}")

        if self.font_files is not None:
            object.__setattr__(self, "font_files", dict(self.font_files))
