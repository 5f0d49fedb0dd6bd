#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdcompose/composition/pdf.py
"""PDF output for recorded layouts.

This module provides the PdfLayoutWriter class which converts a
``LayoutDocument`` into a paginated PDF using ReportLab's Platypus
framework:

- text regions become ``Paragraph`` flowables with inline XML markup
- decorated slots (padding, border, background, debug) become single-cell tables
- rows and tables become ``Table`` flowables with explicit column widths
- images become ``Image`` flowables, or ``<img>`` tags inside paragraphs that
  point at files in a temporary directory living as long as the build
- horizontal lines become ``HRFlowable``

Widths are propagated top-down from the page frame so nested tables never
have to guess their size.

"""

from __future__ import annotations

import io
import logging
import tempfile
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any, Optional, Union
from xml.sax.saxutils import escape

from mdcompose.composition.layout import DECORATION_KINDS, LayoutDocument, LayoutElement
from mdcompose.constants import DEPS_PDF_RENDER
from mdcompose.exceptions import InvalidOptionsError, RenderingError
from mdcompose.options.pdf import PdfOptions
from mdcompose.style import TextStyle
from mdcompose.utils.decorators import debug_timer, requires_dependencies

if TYPE_CHECKING:
    from reportlab.platypus import Flowable

logger = logging.getLogger(__name__)

_ATTR_ENTITIES = {'"': "&quot;"}

# (regular, bold, italic, bold-italic) faces of the standard PDF fonts
_STANDARD_FACES = {
    "Helvetica": ("Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"),
    "Courier": ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"),
    "Times-Roman": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
}


@dataclass(frozen=True)
class _FlowContext:
    """Inherited state while converting the layout tree."""

    alignment: Optional[str] = None
    link: Optional[str] = None


@dataclass
class _Box:
    """Decorations collected from a chain of decoration elements."""

    padding: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0, 0.0])
    background: Optional[str] = None
    border_color: Optional[str] = None
    border: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0, 0.0])
    alignment: Optional[str] = None
    link: Optional[str] = None
    debug_label: Optional[str] = None
    debug_color: Optional[str] = None

    def absorb(self, element: LayoutElement) -> None:
        props = element.props
        sides = ("top", "right", "bottom", "left")
        if element.kind == "padding":
            self.padding = [current + props[side] for current, side in zip(self.padding, sides)]
        elif element.kind == "background":
            # Outermost fill covers the padding too
            if self.background is None:
                self.background = props["color"]
        elif element.kind == "border":
            self.border = [max(current, props[side]) for current, side in zip(self.border, sides)]
            self.border_color = props["color"]
        elif element.kind == "align":
            self.alignment = props["alignment"]
        elif element.kind == "hyperlink":
            self.link = props["url"]
        elif element.kind == "debug_area" and self.debug_label is None:
            self.debug_label = props["label"]
            self.debug_color = props["color"]

    @property
    def draws(self) -> bool:
        """Whether the box needs a table cell of its own."""
        return (
            any(self.padding)
            or self.background is not None
            or any(self.border)
            or self.debug_label is not None
        )

    def context(self, parent: _FlowContext) -> _FlowContext:
        return replace(
            parent,
            alignment=self.alignment or parent.alignment,
            link=self.link or parent.link,
        )


def _unwrap(element: Optional[LayoutElement]) -> tuple[_Box, Optional[LayoutElement]]:
    """Collapse leading decorations of ``element`` into a single box."""
    box = _Box()
    while element is not None and element.kind in DECORATION_KINDS:
        box.absorb(element)
        element = element.content
    return box, element


class PdfLayoutWriter:
    """Write recorded layouts to PDF.

    Parameters
    ----------
    options : PdfOptions or None, default = None
        PDF output options

    Examples
    --------
        >>> from mdcompose.composition.layout import LayoutDocument
        >>> layout = LayoutDocument()
        >>> _ = layout.container().text().span("Hello")
        >>> PdfLayoutWriter().write(layout, "hello.pdf")

    """

    def __init__(self, options: PdfOptions | None = None):
        """Initialize the PDF writer with options."""
        if options is not None and not isinstance(options, PdfOptions):
            raise InvalidOptionsError(
                component_name="pdf",
                expected_type=PdfOptions,
                received_type=type(options),
            )
        self.options: PdfOptions = options or PdfOptions()
        self._missing_fonts: set[str] = set()
        self._image_dir: Optional[Path] = None
        self._image_count = 0

    @requires_dependencies("pdf_render", DEPS_PDF_RENDER)
    def write(self, layout: LayoutDocument, output: Union[str, Path, IO[bytes]]) -> None:
        """Write the layout to a PDF file.

        Parameters
        ----------
        layout : LayoutDocument
            Recorded layout to write
        output : str, Path, or IO[bytes]
            Output destination (file path or file-like object)

        Raises
        ------
        RenderingError
            If PDF generation fails

        """
        from reportlab.lib import colors
        from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT, TA_RIGHT
        from reportlab.lib.pagesizes import A4, LEGAL, LETTER
        from reportlab.lib.styles import ParagraphStyle
        from reportlab.pdfbase import pdfmetrics
        from reportlab.platypus import HRFlowable, Image, Paragraph, Spacer, TableStyle
        from reportlab.platypus import Table as ReportLabTable

        self._colors = colors
        self._pdfmetrics = pdfmetrics
        self._ParagraphStyle = ParagraphStyle
        self._Paragraph = Paragraph
        self._Image = Image
        self._HRFlowable = HRFlowable
        self._Spacer = Spacer
        self._ReportLabTable = ReportLabTable
        self._TableStyle = TableStyle
        self._alignments = {
            "left": TA_LEFT,
            "start": TA_LEFT,
            "center": TA_CENTER,
            "right": TA_RIGHT,
            "end": TA_RIGHT,
            "justify": TA_JUSTIFY,
        }
        page_sizes = {"letter": LETTER, "a4": A4, "legal": LEGAL}

        # inline <img> tags only load from files; they must outlive doc.build
        try:
            with tempfile.TemporaryDirectory(prefix="mdcompose-") as image_dir:
                self._image_dir = Path(image_dir)
                self._image_count = 0
                self._build(layout, output, page_sizes)
        except RenderingError:
            raise
        except Exception as e:
            raise RenderingError(f"Failed to write PDF: {e!r}", rendering_stage="pdf_build", original_error=e) from e
        finally:
            self._image_dir = None

    def _build(self, layout: LayoutDocument, output: Union[str, Path, IO[bytes]], page_sizes: dict[str, Any]) -> None:
        from reportlab.pdfbase.ttfonts import TTFont
        from reportlab.platypus import SimpleDocTemplate

        for font_name, font_path in (self.options.font_files or {}).items():
            self._pdfmetrics.registerFont(TTFont(font_name, font_path))
            logger.debug(f"Registered font {font_name} from {font_path}")

        page_width, _page_height = page_sizes[self.options.page_size]
        frame_width = page_width - self.options.margin_left - self.options.margin_right

        with debug_timer(logger, "Converting layout to flowables"):
            flowables = self._flow_slot(layout.root, _FlowContext(), frame_width)
        if not flowables:
            flowables = [self._Spacer(1, 0)]

        doc_kwargs: dict[str, Any] = {
            "pagesize": page_sizes[self.options.page_size],
            "rightMargin": self.options.margin_right,
            "leftMargin": self.options.margin_left,
            "topMargin": self.options.margin_top,
            "bottomMargin": self.options.margin_bottom,
        }
        if self.options.creator:
            doc_kwargs["creator"] = self.options.creator
        if self.options.title:
            doc_kwargs["title"] = self.options.title

        if isinstance(output, (str, Path)):
            pdf_doc = SimpleDocTemplate(str(output), **doc_kwargs)
            pdf_doc.build(flowables)
        else:
            buffer = io.BytesIO()
            pdf_doc = SimpleDocTemplate(buffer, **doc_kwargs)
            pdf_doc.build(flowables)
            output.write(buffer.getvalue())

    def write_to_bytes(self, layout: LayoutDocument) -> bytes:
        """Write the layout and return the PDF bytes."""
        buffer = io.BytesIO()
        self.write(layout, buffer)
        return buffer.getvalue()

    # ------------------------------------------------------------------
    # Layout tree -> flowables
    # ------------------------------------------------------------------

    def _flow_slot(self, slot: LayoutElement, ctx: _FlowContext, width: float) -> list[Flowable]:
        if slot.content is None:
            return []
        return self._flow(slot.content, ctx, width)

    def _flow(self, element: LayoutElement, ctx: _FlowContext, width: float) -> list[Flowable]:
        if element.kind in DECORATION_KINDS:
            box, inner = _unwrap(element)
            return self._flow_box(box, inner, ctx, width)

        if element.kind == "column":
            return self._flow_column(element, ctx, width)
        if element.kind == "row":
            return self._flow_row(element, ctx, width)
        if element.kind == "text":
            return [self._flow_text(element, ctx)]
        if element.kind == "table":
            return self._flow_table(element, ctx, width)
        if element.kind == "image":
            return [self._flow_image(element, ctx, width)]
        if element.kind == "line_horizontal":
            return [
                self._HRFlowable(
                    width="100%",
                    thickness=element.props["thickness"],
                    color=self._colors.toColor(element.props["color"]),
                    spaceBefore=0,
                    spaceAfter=0,
                )
            ]

        raise RenderingError(f"Unsupported layout element '{element.kind}'", rendering_stage="pdf_build")

    def _flow_box(
        self, box: _Box, inner: Optional[LayoutElement], ctx: _FlowContext, width: float
    ) -> list[Flowable]:
        ctx = box.context(ctx)
        if not box.draws:
            return self._flow(inner, ctx, width) if inner is not None else []

        inner_width = max(width - box.padding[1] - box.padding[3], 1.0)
        content: list[Flowable] = self._flow(inner, ctx, inner_width) if inner is not None else []
        if box.debug_label is not None:
            content.insert(0, self._debug_label(box))

        table = self._ReportLabTable([[content or ""]], colWidths=[width])
        table.setStyle(self._TableStyle(self._box_commands(box, (0, 0), (0, 0))))
        return [table]

    def _box_commands(self, box: _Box, start: tuple[int, int], end: tuple[int, int]) -> list[tuple]:
        """Table style commands drawing ``box`` over the cell range ``start``..``end``."""
        (first_col, first_row), (last_col, last_row) = start, end
        top, right, bottom, left = box.padding
        commands: list[tuple] = [
            ("TOPPADDING", start, end, top),
            ("RIGHTPADDING", start, end, right),
            ("BOTTOMPADDING", start, end, bottom),
            ("LEFTPADDING", start, end, left),
            ("VALIGN", start, end, "TOP"),
        ]
        if box.background is not None:
            commands.append(("BACKGROUND", start, end, self._colors.toColor(box.background)))
        if box.border_color is not None:
            color = self._colors.toColor(box.border_color)
            top_w, right_w, bottom_w, left_w = box.border
            if top_w > 0:
                commands.append(("LINEABOVE", start, (last_col, first_row), top_w, color))
            if bottom_w > 0:
                commands.append(("LINEBELOW", (first_col, last_row), end, bottom_w, color))
            if left_w > 0:
                commands.append(("LINEBEFORE", start, (first_col, last_row), left_w, color))
            if right_w > 0:
                commands.append(("LINEAFTER", (last_col, first_row), end, right_w, color))
        if box.debug_color is not None:
            commands.append(("BOX", start, end, 0.5, self._colors.toColor(box.debug_color)))
        return commands

    def _debug_label(self, box: _Box) -> Flowable:
        style = self._ParagraphStyle(
            name="mdcompose-debug",
            fontName=self.options.font_name,
            fontSize=6,
            leading=7,
            textColor=self._colors.toColor(box.debug_color),
        )
        return self._Paragraph(escape(box.debug_label or ""), style)

    def _flow_column(self, element: LayoutElement, ctx: _FlowContext, width: float) -> list[Flowable]:
        flowables: list[Flowable] = []
        for item in element.children:
            spacing = item.props.get("spacing", 0)
            if flowables and spacing > 0:
                flowables.append(self._Spacer(1, spacing))
            flowables.extend(self._flow_slot(item, ctx, width))
        return flowables

    def _flow_row(self, element: LayoutElement, ctx: _FlowContext, width: float) -> list[Flowable]:
        items = element.children
        if not items:
            return []

        spacing = element.props.get("spacing", 0.0)
        natural = [self._natural_width(item) if item.kind == "auto_item" else None for item in items]
        weights = [
            0.0 if size is not None else float(item.props.get("weight", 1)) for item, size in zip(items, natural)
        ]
        fixed = sum(size for size in natural if size is not None) + spacing * (len(items) - 1)
        remaining = max(width - fixed, 0.0)
        total_weight = sum(weights) or 1.0

        cells: list[Any] = []
        col_widths: list[float] = []
        commands: list[tuple] = [
            ("TOPPADDING", (0, 0), (-1, -1), 0),
            ("RIGHTPADDING", (0, 0), (-1, -1), 0),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 0),
            ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ]
        for index, (item, size, weight) in enumerate(zip(items, natural, weights)):
            item_width = size if size is not None else remaining * weight / total_weight
            item_width = max(item_width, 1.0)
            lead = spacing if index > 0 else 0.0
            if lead:
                commands.append(("LEFTPADDING", (index, 0), (index, 0), lead))
            cells.append(self._flow_slot(item, ctx, item_width) or "")
            col_widths.append(item_width + lead)

        table = self._ReportLabTable([cells], colWidths=col_widths)
        table.setStyle(self._TableStyle(commands))
        return [table]

    def _flow_table(self, element: LayoutElement, ctx: _FlowContext, width: float) -> list[Flowable]:
        cells = [child for child in element.children if child.kind == "cell"]
        weights = [float(weight) if weight > 0 else 1.0 for weight in element.props.get("columns", [])]
        if not cells:
            return []

        n_cols = max([len(weights)] + [cell.props["column"] + cell.props["column_span"] - 1 for cell in cells])
        n_rows = max(cell.props["row"] + cell.props["row_span"] - 1 for cell in cells)
        weights.extend([1.0] * (n_cols - len(weights)))
        total_weight = sum(weights)
        col_widths = [width * weight / total_weight for weight in weights]

        data: list[list[Any]] = [["" for _ in range(n_cols)] for _ in range(n_rows)]
        commands: list[tuple] = [
            ("TOPPADDING", (0, 0), (-1, -1), 0),
            ("RIGHTPADDING", (0, 0), (-1, -1), 0),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 0),
            ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ]
        for cell in cells:
            row, col = cell.props["row"] - 1, cell.props["column"] - 1
            last_row = row + cell.props["row_span"] - 1
            last_col = col + cell.props["column_span"] - 1
            if data[row][col] != "":
                logger.debug(f"Table cell at row {row + 1}, column {col + 1} placed twice; keeping the last one")

            box, inner = _unwrap(cell.content)
            cell_width = sum(col_widths[col : last_col + 1]) - box.padding[1] - box.padding[3]
            content: list[Flowable] = (
                self._flow(inner, box.context(ctx), max(cell_width, 1.0)) if inner is not None else []
            )
            if box.debug_label is not None:
                content.insert(0, self._debug_label(box))
            data[row][col] = content or ""

            commands.extend(self._box_commands(box, (col, row), (last_col, last_row)))
            if last_row > row or last_col > col:
                commands.append(("SPAN", (col, row), (last_col, last_row)))

        table = self._ReportLabTable(data, colWidths=col_widths)
        table.setStyle(self._TableStyle(commands))
        return [table]

    def _flow_image(self, element: LayoutElement, ctx: _FlowContext, width: float) -> Flowable:
        img_width, img_height = element.props["width"], element.props["height"]
        if img_width > width > 0:
            img_height = img_height * width / img_width
            img_width = width

        if ctx.link:
            markup = self._image_markup(element, ctx.link, img_width, img_height)
            return self._Paragraph(markup, self._paragraph_style(ctx.alignment, img_height))

        image = self._Image(io.BytesIO(element.props["data"]), width=img_width, height=img_height)
        image.hAlign = {"center": "CENTER", "right": "RIGHT"}.get(ctx.alignment or "left", "LEFT")
        return image

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def _flow_text(self, element: LayoutElement, ctx: _FlowContext) -> Flowable:
        parts: list[str] = []
        max_size = self.options.font_size
        for child in element.children:
            if child.kind == "span":
                style: TextStyle = child.props["style"]
                max_size = max(max_size, style.font_size or 0)
                parts.append(self._span_markup(child, ctx))
            elif child.kind == "element":
                markup, height = self._inline_element_markup(child, ctx)
                max_size = max(max_size, height)
                parts.append(markup)

        markup = "".join(parts)
        if ctx.link:
            markup = f'<link href="{escape(ctx.link, _ATTR_ENTITIES)}">{markup}</link>'
        alignment = element.props.get("alignment") or ctx.alignment
        return self._Paragraph(markup, self._paragraph_style(alignment, max_size))

    def _paragraph_style(self, alignment: Optional[str], max_size: float) -> Any:
        return self._ParagraphStyle(
            name="mdcompose-text",
            fontName=self._resolve_font(self.options.font_name),
            fontSize=self.options.font_size,
            leading=max_size * self.options.line_spacing,
            alignment=self._alignments.get(alignment or "left", self._alignments["left"]),
        )

    def _span_markup(self, span: LayoutElement, ctx: _FlowContext) -> str:
        style: TextStyle = span.props["style"]
        text = escape(span.props["text"]).replace("\n", "<br/>")

        # Bold/italic must sit inside <font name=...>, which resets them
        if style.italic:
            text = f"<i>{text}</i>"
        if style.bold:
            text = f"<b>{text}</b>"
        if style.underline:
            if style.decoration_color:
                text = f'<u color="{style.decoration_color}">{text}</u>'
            else:
                text = f"<u>{text}</u>"
        if style.strikethrough:
            text = f"<strike>{text}</strike>"
        if style.superscript:
            text = f"<super>{text}</super>"
        elif style.subscript:
            text = f"<sub>{text}</sub>"

        attrs = [
            f'name="{self._resolve_font(style.font_family or self.options.font_name)}"',
            f'size="{style.font_size or self.options.font_size:g}"',
        ]
        if style.font_color:
            attrs.append(f'color="{style.font_color}"')
        if style.background_color:
            attrs.append(f'backColor="{style.background_color}"')
        text = f"<font {' '.join(attrs)}>{text}</font>"

        url = span.props.get("url")
        if url and not ctx.link:
            text = f'<link href="{escape(url, _ATTR_ENTITIES)}">{text}</link>'
        return text

    def _inline_element_markup(self, slot: LayoutElement, ctx: _FlowContext) -> tuple[str, float]:
        box, inner = _unwrap(slot.content)
        if inner is None:
            return "", 0.0
        if inner.kind == "image":
            link = box.link if not ctx.link else None
            return (
                self._image_markup(inner, link, inner.props["width"], inner.props["height"]),
                inner.props["height"],
            )

        logger.debug(f"Inline '{inner.kind}' element flattened to plain text")
        return escape(inner.plain_text()), 0.0

    def _image_markup(self, image: LayoutElement, link: Optional[str], width: float, height: float) -> str:
        if self._image_dir is None:
            raise RenderingError("Inline images can only be placed while writing", rendering_stage="pdf_build")
        image_format = (image.props.get("format") or "png").lower()
        self._image_count += 1
        image_path = self._image_dir / f"image-{self._image_count}.{image_format}"
        image_path.write_bytes(image.props["data"])
        src = escape(image_path.as_posix(), _ATTR_ENTITIES)
        markup = f'<img src="{src}" width="{width:g}" height="{height:g}"/>'
        if link:
            markup = f'<link href="{escape(link, _ATTR_ENTITIES)}">{markup}</link>'
        return markup

    # ------------------------------------------------------------------
    # Fonts and measuring
    # ------------------------------------------------------------------

    def _resolve_font(self, name: str) -> str:
        """Return ``name`` if ReportLab knows it, else the base font."""
        if name in self._pdfmetrics.standardFonts or name in self._pdfmetrics.getRegisteredFontNames():
            return name
        if name not in self._missing_fonts:
            self._missing_fonts.add(name)
            logger.debug(f"Font '{name}' is not registered, falling back to {self.options.font_name}")
        return self.options.font_name

    def _face(self, style: TextStyle) -> str:
        family = self._resolve_font(style.font_family or self.options.font_name)
        faces = _STANDARD_FACES.get(family)
        if faces is None:
            return family
        return faces[(1 if style.bold else 0) + (2 if style.italic else 0)]

    def _natural_width(self, element: Optional[LayoutElement]) -> Optional[float]:
        """Width of content that should not wrap, or None when it cannot be measured."""
        if element is None:
            return 0.0
        if element.kind == "padding":
            inner = self._natural_width(element.content)
            return None if inner is None else inner + element.props["left"] + element.props["right"]
        if element.kind == "border":
            inner = self._natural_width(element.content)
            return None if inner is None else inner + element.props["left"] + element.props["right"]
        if element.is_slot:
            return self._natural_width(element.content)
        if element.kind == "image":
            return float(element.props["width"])
        if element.kind == "text":
            total = 0.0
            for child in element.children:
                if child.kind == "span":
                    style: TextStyle = child.props["style"]
                    size = style.font_size or self.options.font_size
                    total += self._pdfmetrics.stringWidth(child.props["text"], self._face(style), size)
                else:
                    inner = self._natural_width(child)
                    if inner is None:
                        return None
                    total += inner
            # Rounding slack keeps ReportLab from wrapping the last glyph
            return total + 1.0
        return None
