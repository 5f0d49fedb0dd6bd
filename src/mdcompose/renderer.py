#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdcompose/renderer.py
"""Markdown AST to document composition renderer.

``MarkdownRenderer`` walks a parsed document depth-first and issues calls
against a composition ``Container``: columns for block containers, rows for
list items, text regions for leaf blocks, table regions for tables, and
styled spans for inline content.

Each ``compose`` call creates its own walker, so the style stack and the
link/image state are never shared between render calls. Rendering performs
no I/O: images must have been resolved beforehand with
``ParsedMarkdownDocument.resolve_images``.

Examples
--------
    >>> from mdcompose.composition import LayoutDocument
    >>> from mdcompose.resources import ParsedMarkdownDocument
    >>> doc = ParsedMarkdownDocument.from_text("# Title\\n\\nSome *text*.")
    >>> layout = LayoutDocument()
    >>> MarkdownRenderer(doc).compose(layout.container())
    >>> layout.plain_text()
    'TitleSome text.'

"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence, Union

from mdcompose.ast import (
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
    NodeVisitor,
    Paragraph,
    Table,
    TableCell,
    TableRow,
    TaskListMarker,
    TemplateTag,
    Text,
    ThematicBreak,
)
from mdcompose.composition.base import Container, TextRegion
from mdcompose.constants import (
    DEBUG_AREA_TOP_PADDING,
    DEBUG_CONTAINER_BLOCK_COLOR,
    DEBUG_LEAF_BLOCK_COLOR,
    UNKNOWN_INLINE_BACKGROUND,
)
from mdcompose.exceptions import InvalidOptionsError, RenderingError
from mdcompose.options.renderer import MarkdownRendererOptions
from mdcompose.resources import ImageWithDimensions, ParsedMarkdownDocument
from mdcompose.style import (
    StyleContext,
    StyleFrame,
    background_color,
    bold,
    chain,
    font_color,
    font_family,
    font_size,
    italic,
    strikethrough,
    subscript,
    superscript,
    underline,
)

logger = logging.getLogger(__name__)

_LEAF_BLOCK_TYPES = (Heading, Paragraph, CodeBlock, ThematicBreak)


def scale_image_dimensions(
    width: float, height: float, scaling_factor: float, max_width: float = 0, max_height: float = 0
) -> tuple[float, float]:
    """Scale pixel dimensions and fit them inside optional maximum bounds.

    The scaled size is reduced uniformly until it fits ``max_width`` and
    ``max_height``; it is never enlarged. A bound of 0 means no limit.

    Parameters
    ----------
    width, height : float
        Pixel dimensions of the image
    scaling_factor : float
        Multiplier applied to both dimensions
    max_width, max_height : float, default 0
        Maximum rendered dimensions

    Returns
    -------
    tuple[float, float]
        Rendered ``(width, height)``

    Examples
    --------
    >>> scale_image_dimensions(200, 100, 0.5, max_width=80)
    (80.0, 40.0)
    >>> scale_image_dimensions(200, 100, 0.5, max_width=500)
    (100.0, 50.0)

    """
    scaled_width = width * scaling_factor
    scaled_height = height * scaling_factor

    ratios = []
    if max_width > 0 and scaled_width > 0:
        ratios.append(max_width / scaled_width)
    if max_height > 0 and scaled_height > 0:
        ratios.append(max_height / scaled_height)

    ratio = min(ratios, default=1.0)
    if ratio < 1:
        scaled_width *= ratio
        scaled_height *= ratio
    return float(scaled_width), float(scaled_height)


def emphasis_frame(node: Emphasis, marked_background: str) -> StyleFrame:
    """Select the style frame for an emphasis run from its delimiter.

    ``^`` is superscript, ``~`` subscript, ``~~`` strikethrough, ``++``
    underline and ``==`` a highlight background. Any other double delimiter
    is bold, any other single delimiter italic.
    """
    key = (node.delimiter_char, node.delimiter_count)
    if key == ("^", 1):
        return superscript()
    if key == ("~", 1):
        return subscript()
    if key == ("~", 2):
        return strikethrough()
    if key == ("+", 2):
        return underline()
    if key == ("=", 2):
        return background_color(marked_background)
    return bold() if node.delimiter_count == 2 else italic()


class MarkdownRenderer:
    """Compose a parsed markdown document into a composition container.

    Parameters
    ----------
    document : ParsedMarkdownDocument or Document
        Document to render. A bare ``Document`` is wrapped without any
        resolved images, so images render as hyperlinks.
    options : MarkdownRendererOptions or None, default = None
        Rendering options

    Raises
    ------
    InvalidOptionsError
        If ``options`` is not a MarkdownRendererOptions instance

    """

    def __init__(
        self,
        document: Union[ParsedMarkdownDocument, Document],
        options: MarkdownRendererOptions | None = None,
    ):
        if options is not None and not isinstance(options, MarkdownRendererOptions):
            raise InvalidOptionsError(
                component_name="renderer",
                expected_type=MarkdownRendererOptions,
                received_type=type(options),
            )
        if isinstance(document, Document):
            document = ParsedMarkdownDocument(document)
        self.document = document
        self.options: MarkdownRendererOptions = options or MarkdownRendererOptions()

    @classmethod
    def from_text(cls, text: str, options: MarkdownRendererOptions | None = None) -> MarkdownRenderer:
        """Parse ``text`` and return a renderer for it."""
        return cls(ParsedMarkdownDocument.from_text(text), options)

    def compose(self, container: Container) -> None:
        """Render the document into ``container``.

        Parameters
        ----------
        container : Container
            Empty composition slot receiving the document

        Raises
        ------
        RenderingError
            If the tree contains a block kind the renderer does not support

        """
        _ComposeWalker(self.document, self.options).render(self.document.document, container)


class _ComposeWalker(NodeVisitor):
    """Depth-first walk of one render call.

    Holds the per-call mutable state: the style stack, the current link and
    image targets, and the container or text region being filled.
    """

    def __init__(self, document: ParsedMarkdownDocument, options: MarkdownRendererOptions):
        self.document = document
        self.options = options
        self.styles = StyleContext()
        self._container: Optional[Container] = None
        self._text: Optional[TextRegion] = None
        self._parents: list[Optional[Node]] = []
        self._link_url: Optional[str] = None
        self._image_url: Optional[str] = None
        self._image_emitted = False

    def render(self, root: Node, container: Container) -> None:
        self._render_block(root, container, parent=None)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    @property
    def container(self) -> Container:
        if self._container is None:
            raise RenderingError("No target container for block content", rendering_stage="compose")
        return self._container

    @property
    def text(self) -> TextRegion:
        if self._text is None:
            raise RenderingError("Inline content outside of a text region", rendering_stage="compose")
        return self._text

    @property
    def parent(self) -> Optional[Node]:
        return self._parents[-1] if self._parents else None

    def _render_block(self, node: Node, container: Container, parent: Optional[Node]) -> None:
        if not isinstance(node, BLOCK_NODE_TYPES):
            raise RenderingError(f"Unsupported block type {type(node).__name__}", rendering_stage="compose")

        if self.options.debug:
            color = DEBUG_LEAF_BLOCK_COLOR if isinstance(node, _LEAF_BLOCK_TYPES) else DEBUG_CONTAINER_BLOCK_COLOR
            # room for the label above the block
            container = container.debug_area(type(node).__name__, color).padding_top(DEBUG_AREA_TOP_PADDING)

        saved_container = self._container
        self._container = container
        self._parents.append(parent)
        try:
            node.accept(self)
        finally:
            self._parents.pop()
            self._container = saved_container

    def _render_children(self, node: Node, children: Sequence[Node], container: Container) -> None:
        """Render child blocks as the items of a column."""
        if not children:
            return

        column = container.column()
        # blocks inside a list get the same spacing as the list items themselves
        if isinstance(node, (List, ListItem)):
            column.spacing(self.options.list_item_spacing)
        else:
            column.spacing(self.options.paragraph_spacing)

        for child in children:
            self._render_block(child, column.item(), parent=node)

    def _render_leaf(self, content: Sequence[Node], lines: Sequence[str], container: Container) -> None:
        if content:
            text = container.text()
            text.align(self.options.paragraph_alignment)
            saved_text = self._text
            self._text = text
            try:
                for child in content:
                    self._render_inline(child)
            finally:
                self._text = saved_text
        elif lines:
            self.styles.apply_all(container.text().span("\n".join(lines)))

    def _render_inline(self, node: Node) -> None:
        if not isinstance(node, INLINE_NODE_TYPES):
            logger.debug(f"Rendering placeholder for unsupported inline type {type(node).__name__}")
            self.text.span(f"Unknown inline: {type(node).__name__}").update_style(
                background_color(UNKNOWN_INLINE_BACKGROUND)
            )
            return
        node.accept(self)

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def visit_document(self, node: Document) -> None:
        self._render_children(node, node.children, self.container)

    def visit_block_quote(self, node: BlockQuote) -> None:
        container = self.container.border_left(
            self.options.block_quote_border_thickness, self.options.block_quote_border_color
        ).padding_left(self.options.block_quote_padding)

        with self.styles.scoped(font_color(self.options.block_quote_text_color)):
            self._render_children(node, node.children, container)

    def visit_heading(self, node: Heading) -> None:
        frame = chain(
            font_size(self.options.heading_font_size(node.level)),
            font_color(self.options.heading_text_color),
            bold(),
        )
        with self.styles.scoped(frame):
            self._render_leaf(node.content, node.lines, self.container)

    def visit_paragraph(self, node: Paragraph) -> None:
        self._render_leaf(node.content, node.lines, self.container)

    def visit_code_block(self, node: CodeBlock) -> None:
        # code is rendered verbatim, inline markup is not interpreted
        container = self.container.background(self.options.code_block_background_color).padding(
            self.options.code_block_padding
        )
        with self.styles.scoped(font_family(self.options.code_font)):
            self._render_leaf((), node.lines, container)

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        self.container.line_horizontal(self.options.horizontal_rule_thickness, self.options.horizontal_rule_color)

    def visit_list(self, node: List) -> None:
        self._render_children(node, node.items, self.container)

    def visit_list_item(self, node: ListItem) -> None:
        parent = self.parent
        if not isinstance(parent, List):
            logger.debug("Skipping list item without a list parent")
            return

        label = f"{node.order}{parent.delimiter}" if parent.ordered else self.options.unordered_list_glyph

        row = self.container.row()
        row.spacing(self.options.list_item_spacing)
        label_text = row.auto_item().padding_left(self.options.list_item_label_padding).text()
        self.styles.apply_all(label_text.span(label))

        self._render_children(node, node.children, row.relative_item())

    def visit_table(self, node: Table) -> None:
        """Lay out a table as positioned cells.

        Columns with a positive width become weighted columns, the others get
        weight 1. Rows are numbered from 1; a cell is placed at its explicit
        column index when it has one, else at its position in the row.
        """
        if not node.rows:
            logger.debug("Skipping table without rows")
            return

        weights = [column.width if column.width > 0 else 1 for column in node.columns]
        needed = max(
            (self._cell_column(cell, position) + max(1, cell.column_span) for row in node.rows
             for position, cell in enumerate(row.cells)),
            default=0,
        )
        weights.extend([1] * (needed - len(weights)))

        table = self.container.table()
        table.columns(weights)

        for row_index, row in enumerate(node.rows):
            is_last = row_index + 1 == len(node.rows)
            if row.is_header:
                with self.styles.scoped(bold()):
                    self._render_table_row(node, row, row_index, is_last, table)
            else:
                self._render_table_row(node, row, row_index, is_last, table)

    @staticmethod
    def _cell_column(cell: TableCell, position: int) -> int:
        return cell.column_index if cell.column_index >= 0 else position

    def _render_table_row(self, table_node: Table, row: TableRow, row_index: int, is_last: bool, table) -> None:
        options = self.options
        for position, cell in enumerate(row.cells):
            column = self._cell_column(cell, position)
            container = table.cell(
                row=row_index + 1,
                column=column + 1,
                row_span=max(1, cell.row_span),
                column_span=max(1, cell.column_span),
            )
            container = self._cell_border(container, row.is_header, is_last)
            # same parity rule for header and body rows
            container = container.background(
                options.table_even_row_background_color
                if row_index % 2 == 1
                else options.table_odd_row_background_color
            ).padding(options.table_cell_padding)

            if column < len(table_node.columns) and table_node.columns[column].alignment:
                container = container.align(table_node.columns[column].alignment)

            self._render_block(cell, container, parent=row)

    def _cell_border(self, container: Container, is_header: bool, is_last: bool) -> Container:
        options = self.options
        body = options.table_border_thickness
        header = options.table_header_border_thickness

        if options.table_border_style == "horizontal":
            bottom = 0 if is_last else (header if is_header else body)
            if bottom <= 0:
                return container
            return container.border(options.table_border_color, bottom=bottom)

        if options.table_border_style == "full":
            return container.border(
                options.table_border_color,
                top=body,
                right=body,
                bottom=header if is_header else body,
                left=body,
            )

        return container

    def visit_table_row(self, node: TableRow) -> None:
        logger.debug("Skipping table row outside of a table")

    def visit_table_cell(self, node: TableCell) -> None:
        self._render_children(node, node.children, self.container)

    # ------------------------------------------------------------------
    # Inlines
    # ------------------------------------------------------------------

    def _cached_image(self, url: str) -> Optional[ImageWithDimensions]:
        return self.document.get_cached_image(url)

    def _emit_image(self, image: ImageWithDimensions) -> None:
        width, height = scale_image_dimensions(
            image.width,
            image.height,
            self.options.image_scaling_factor,
            self.options.max_image_width,
            self.options.max_image_height,
        )
        element = self.text.element()
        if self._link_url:
            element = element.hyperlink(self._link_url)
        element.image(image.data, width, height, image.format)
        self._image_emitted = True

    def visit_text(self, node: Text) -> None:
        if self._image_url:
            image = self._cached_image(self._image_url)
            if image is None:
                # image could not be resolved, link to its source instead
                self.styles.apply_all(self.text.hyperlink(node.content, self._image_url))
            elif not self._image_emitted:
                self._emit_image(image)
            return

        if self._link_url:
            self.styles.apply_all(self.text.hyperlink(node.content, self._link_url))
            return

        self.styles.apply_all(self.text.span(node.content))

    def visit_emphasis(self, node: Emphasis) -> None:
        with self.styles.scoped(emphasis_frame(node, self.options.marked_text_background_color)):
            for child in node.content:
                self._render_inline(child)

    @contextmanager
    def _link_scope(self, node: Link) -> Iterator[None]:
        saved = (self._link_url, self._image_url, self._image_emitted)
        if node.is_image:
            self._image_url = node.url
            self._image_emitted = False
        else:
            self._link_url = node.url
        try:
            yield
        finally:
            self._link_url, self._image_url, self._image_emitted = saved

    def visit_link(self, node: Link) -> None:
        link_color = self.options.link_text_color
        with self.styles.scoped(chain(font_color(link_color), underline(link_color))), self._link_scope(node):
            for child in node.content:
                self._render_inline(child)

            if node.is_image and not node.content:
                # an empty alt text still shows the image, or its URL
                image = self._cached_image(node.url)
                if image is not None:
                    self._emit_image(image)
                else:
                    self.styles.apply_all(self.text.hyperlink(node.url, node.url))

    def visit_auto_link(self, node: AutoLink) -> None:
        url = f"mailto:{node.url}" if node.is_email else node.url
        self.styles.apply_all(self.text.hyperlink(node.url, url))

    def visit_line_break(self, node: LineBreak) -> None:
        # soft breaks do not force a new line
        if node.soft:
            self.text.span(" ")
        else:
            self.text.line_break()

    def visit_code(self, node: Code) -> None:
        frame = chain(
            background_color(self.options.code_inline_background_color),
            font_family(self.options.code_font),
        )
        with self.styles.scoped(frame):
            self.styles.apply_all(self.text.span(node.content))

    def visit_task_list_marker(self, node: TaskListMarker) -> None:
        glyph = self.options.task_list_checked_glyph if node.checked else self.options.task_list_unchecked_glyph
        with self.styles.scoped(font_family(self.options.unicode_glyph_font)):
            self.styles.apply_all(self.text.span(glyph))

    def visit_template_tag(self, node: TemplateTag) -> None:
        render = self.options.render_templates.get(node.tag)
        if render is None:
            return
        span = render(self.text)
        if span is not None:
            self.styles.apply_all(span)

    def visit_html_entity(self, node: HtmlEntity) -> None:
        self.styles.apply_all(self.text.span(node.transcoded))
