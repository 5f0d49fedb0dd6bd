#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for the markdown layout renderer.

``MarkdownRendererOptions`` is an immutable snapshot created once per render
invocation. It is never mutated while a document is being rendered; use
``create_updated`` or ``add_template_tag`` to derive a modified copy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Mapping

from mdcompose.constants import (
    DEFAULT_ALLOW_REMOTE_FETCH,
    DEFAULT_ALLOWED_HOSTS,
    DEFAULT_BLOCK_QUOTE_BORDER_COLOR,
    DEFAULT_BLOCK_QUOTE_BORDER_THICKNESS,
    DEFAULT_BLOCK_QUOTE_PADDING,
    DEFAULT_BLOCK_QUOTE_TEXT_COLOR,
    DEFAULT_CODE_BLOCK_BACKGROUND,
    DEFAULT_CODE_BLOCK_PADDING,
    DEFAULT_CODE_FONT,
    DEFAULT_CODE_INLINE_BACKGROUND,
    DEFAULT_DEBUG,
    DEFAULT_HEADING_BASE_SIZE,
    DEFAULT_HEADING_SIZE_STEP,
    DEFAULT_HEADING_TEXT_COLOR,
    DEFAULT_HORIZONTAL_RULE_COLOR,
    DEFAULT_HORIZONTAL_RULE_THICKNESS,
    DEFAULT_IMAGE_SCALING_FACTOR,
    DEFAULT_LINK_TEXT_COLOR,
    DEFAULT_LIST_ITEM_LABEL_PADDING,
    DEFAULT_LIST_ITEM_SPACING,
    DEFAULT_MARKED_TEXT_BACKGROUND_COLOR,
    DEFAULT_MAX_IMAGE_BYTES,
    DEFAULT_MAX_IMAGE_HEIGHT,
    DEFAULT_MAX_IMAGE_WIDTH,
    DEFAULT_NETWORK_TIMEOUT,
    DEFAULT_PARAGRAPH_ALIGNMENT,
    DEFAULT_PARAGRAPH_SPACING,
    DEFAULT_REQUIRE_HTTPS,
    DEFAULT_TABLE_BORDER_COLOR,
    DEFAULT_TABLE_BORDER_STYLE,
    DEFAULT_TABLE_BORDER_THICKNESS,
    DEFAULT_TABLE_CELL_PADDING,
    DEFAULT_TABLE_EVEN_ROW_BACKGROUND,
    DEFAULT_TABLE_HEADER_BORDER_THICKNESS,
    DEFAULT_TABLE_ODD_ROW_BACKGROUND,
    DEFAULT_TASK_LIST_CHECKED_GLYPH,
    DEFAULT_TASK_LIST_UNCHECKED_GLYPH,
    DEFAULT_UNICODE_GLYPH_FONT,
    DEFAULT_UNORDERED_LIST_GLYPH,
    ParagraphAlignment,
    TableBorderStyle,
)
from mdcompose.options.base import BaseRendererOptions, CloneFrozenMixin

if TYPE_CHECKING:
    from mdcompose.composition.base import TextRegion, TextSpan

logger = logging.getLogger(__name__)

TemplateRenderFunction = Callable[["TextRegion"], "TextSpan"]
"""Render function for a template tag: emits one span into the text region and returns it."""


def default_heading_size(level: int) -> float:
    """Return the font size of a heading level.

    Level 1 is ``28`` points and every further level is two points smaller,
    never going below zero.

    Parameters
    ----------
    level : int
        1-based heading level

    Returns
    -------
    float
        Font size in points

    """
    return max(0.0, DEFAULT_HEADING_BASE_SIZE - DEFAULT_HEADING_SIZE_STEP * (level - 1))


@dataclass(frozen=True)
class MarkdownRendererOptions(BaseRendererOptions):
    """Configuration options for rendering a markdown tree into a layout.

    Parameters
    ----------
    debug : bool, default False
        Outline and label every block with a debug area.
    paragraph_alignment : {"left", "center", "right", "justify", "start", "end"}, default "left"
        Horizontal alignment of text regions.
    link_text_color : str, default "#2196F3"
        Color (and underline color) of hyperlinks.
    marked_text_background_color : str, default "#FFF59D"
        Background of ``==highlighted==`` text.
    block_quote_border_color : str, default "#E0E0E0"
        Color of the left border of block quotes.
    block_quote_border_thickness : float, default 2.0
        Thickness of the block quote border.
    block_quote_padding : float, default 10.0
        Left padding between the quote border and its content.
    block_quote_text_color : str, default "#616161"
        Text color inside block quotes.
    code_font : str, default "Courier"
        Fixed-width font for code blocks and code spans.
    code_block_background_color : str, default "#F5F5F5"
        Background of code blocks.
    code_block_padding : float, default 5.0
        Padding around code blocks.
    code_inline_background_color : str, default "#EEEEEE"
        Background of inline code spans.
    task_list_checked_glyph, task_list_unchecked_glyph : str
        Glyphs of task list markers.
    unicode_glyph_font : str, default "DejaVuSans"
        Font used for task list glyphs.
    table_border_color : str, default "#E0E0E0"
        Color of table borders.
    table_even_row_background_color, table_odd_row_background_color : str
        Zebra striping backgrounds.
    table_header_border_thickness : float, default 3.0
        Bottom border thickness of header rows.
    table_border_thickness : float, default 1.0
        Border thickness of body rows.
    table_border_style : {"none", "horizontal", "full"}, default "horizontal"
        Table border policy.
    table_cell_padding : float, default 5.0
        Padding applied to every table cell.
    horizontal_rule_color : str, default "#E0E0E0"
        Color of thematic breaks.
    horizontal_rule_thickness : float, default 2.0
        Thickness of thematic breaks.
    image_scaling_factor : float, default 0.5
        Factor from image pixels to layout points.
    max_image_width, max_image_height : float, default 0.0
        Maximum image size after scaling; 0 disables the limit.
    paragraph_spacing : float, default 10.0
        Gap between blocks.
    list_item_spacing : float, default 5.0
        Gap between list items, and between a list item label and its content.
    list_item_label_padding : float, default 10.0
        Left padding of list item labels.
    unordered_list_glyph : str, default "•"
        Label of unordered list items.
    heading_text_color : str, default "#000000"
        Text color of headings.
    heading_size : callable, default default_heading_size
        Maps a 1-based heading level to a font size; negative results are clamped to 0.
    render_templates : mapping of str to callable, default empty
        Template tag name to render function.

    Examples
    --------
        >>> options = MarkdownRendererOptions().add_template_tag(
        ...     "date", lambda text: text.span("2025-01-01")
        ... )
        >>> sorted(options.render_templates)
        ['date']

    """

    debug: bool = field(
        default=DEFAULT_DEBUG,
        metadata={"help": "Outline and label every block for layout debugging", "importance": "advanced"},
    )
    paragraph_alignment: ParagraphAlignment = field(
        default=DEFAULT_PARAGRAPH_ALIGNMENT,
        metadata={
            "help": "Horizontal alignment of text regions",
            "choices": ["left", "center", "right", "justify", "start", "end"],
            "importance": "core",
        },
    )
    link_text_color: str = field(
        default=DEFAULT_LINK_TEXT_COLOR, metadata={"help": "Hyperlink color", "importance": "core"}
    )
    marked_text_background_color: str = field(
        default=DEFAULT_MARKED_TEXT_BACKGROUND_COLOR,
        metadata={"help": "Background of highlighted (==marked==) text", "importance": "advanced"},
    )
    block_quote_border_color: str = field(
        default=DEFAULT_BLOCK_QUOTE_BORDER_COLOR,
        metadata={"help": "Block quote border color", "importance": "advanced"},
    )
    block_quote_border_thickness: float = field(
        default=DEFAULT_BLOCK_QUOTE_BORDER_THICKNESS,
        metadata={"help": "Block quote border thickness", "type": float, "importance": "advanced"},
    )
    block_quote_padding: float = field(
        default=DEFAULT_BLOCK_QUOTE_PADDING,
        metadata={"help": "Block quote left padding", "type": float, "importance": "advanced"},
    )
    block_quote_text_color: str = field(
        default=DEFAULT_BLOCK_QUOTE_TEXT_COLOR,
        metadata={"help": "Block quote text color", "importance": "advanced"},
    )
    code_font: str = field(
        default=DEFAULT_CODE_FONT, metadata={"help": "Monospace font for code", "importance": "core"}
    )
    code_block_background_color: str = field(
        default=DEFAULT_CODE_BLOCK_BACKGROUND, metadata={"help": "Code block background", "importance": "advanced"}
    )
    code_block_padding: float = field(
        default=DEFAULT_CODE_BLOCK_PADDING,
        metadata={"help": "Code block padding", "type": float, "importance": "advanced"},
    )
    code_inline_background_color: str = field(
        default=DEFAULT_CODE_INLINE_BACKGROUND,
        metadata={"help": "Inline code background", "importance": "advanced"},
    )
    task_list_checked_glyph: str = field(
        default=DEFAULT_TASK_LIST_CHECKED_GLYPH, metadata={"help": "Checked task glyph", "importance": "advanced"}
    )
    task_list_unchecked_glyph: str = field(
        default=DEFAULT_TASK_LIST_UNCHECKED_GLYPH,
        metadata={"help": "Unchecked task glyph", "importance": "advanced"},
    )
    unicode_glyph_font: str = field(
        default=DEFAULT_UNICODE_GLYPH_FONT,
        metadata={"help": "Unicode-capable font for task glyphs", "importance": "advanced"},
    )
    table_border_color: str = field(
        default=DEFAULT_TABLE_BORDER_COLOR, metadata={"help": "Table border color", "importance": "advanced"}
    )
    table_even_row_background_color: str = field(
        default=DEFAULT_TABLE_EVEN_ROW_BACKGROUND,
        metadata={"help": "Background of even (1-based) table rows", "importance": "advanced"},
    )
    table_odd_row_background_color: str = field(
        default=DEFAULT_TABLE_ODD_ROW_BACKGROUND,
        metadata={"help": "Background of odd (1-based) table rows", "importance": "advanced"},
    )
    table_header_border_thickness: float = field(
        default=DEFAULT_TABLE_HEADER_BORDER_THICKNESS,
        metadata={"help": "Header row border thickness", "type": float, "importance": "advanced"},
    )
    table_border_thickness: float = field(
        default=DEFAULT_TABLE_BORDER_THICKNESS,
        metadata={"help": "Body row border thickness", "type": float, "importance": "advanced"},
    )
    table_border_style: TableBorderStyle = field(
        default=DEFAULT_TABLE_BORDER_STYLE,
        metadata={"help": "Table border policy", "choices": ["none", "horizontal", "full"], "importance": "core"},
    )
    table_cell_padding: float = field(
        default=DEFAULT_TABLE_CELL_PADDING,
        metadata={"help": "Padding of table cells", "type": float, "importance": "advanced"},
    )
    horizontal_rule_color: str = field(
        default=DEFAULT_HORIZONTAL_RULE_COLOR, metadata={"help": "Thematic break color", "importance": "advanced"}
    )
    horizontal_rule_thickness: float = field(
        default=DEFAULT_HORIZONTAL_RULE_THICKNESS,
        metadata={"help": "Thematic break thickness", "type": float, "importance": "advanced"},
    )
    image_scaling_factor: float = field(
        default=DEFAULT_IMAGE_SCALING_FACTOR,
        metadata={"help": "Scale from image pixels to points", "type": float, "importance": "core"},
    )
    max_image_width: float = field(
        default=DEFAULT_MAX_IMAGE_WIDTH,
        metadata={"help": "Maximum image width in points (0 = unlimited)", "type": float, "importance": "core"},
    )
    max_image_height: float = field(
        default=DEFAULT_MAX_IMAGE_HEIGHT,
        metadata={"help": "Maximum image height in points (0 = unlimited)", "type": float, "importance": "core"},
    )
    paragraph_spacing: float = field(
        default=DEFAULT_PARAGRAPH_SPACING,
        metadata={"help": "Gap between blocks", "type": float, "importance": "core"},
    )
    list_item_spacing: float = field(
        default=DEFAULT_LIST_ITEM_SPACING,
        metadata={"help": "Gap between list items", "type": float, "importance": "core"},
    )
    list_item_label_padding: float = field(
        default=DEFAULT_LIST_ITEM_LABEL_PADDING,
        metadata={"help": "Left padding of list item labels", "type": float, "importance": "advanced"},
    )
    unordered_list_glyph: str = field(
        default=DEFAULT_UNORDERED_LIST_GLYPH, metadata={"help": "Bullet glyph", "importance": "advanced"}
    )
    heading_text_color: str = field(
        default=DEFAULT_HEADING_TEXT_COLOR, metadata={"help": "Heading text color", "importance": "advanced"}
    )
    heading_size: Callable[[int], float] = field(
        default=default_heading_size,
        metadata={"help": "Function mapping heading level to font size", "exclude_from_cli": True},
    )
    render_templates: Mapping[str, TemplateRenderFunction] = field(
        default_factory=dict,
        metadata={"help": "Template tag render functions keyed by tag name", "exclude_from_cli": True},
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges for renderer options.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        super().__post_init__()

        # copy, the caller may keep mutating its mapping
        object.__setattr__(self, "render_templates", dict(self.render_templates))

        if self.image_scaling_factor <= 0:
            raise ValueError(f"image_scaling_factor must be positive, got {self.image_scaling_factor}")

        for name in (
            "block_quote_border_thickness",
            "block_quote_padding",
            "code_block_padding",
            "table_header_border_thickness",
            "table_border_thickness",
            "table_cell_padding",
            "horizontal_rule_thickness",
            "max_image_width",
            "max_image_height",
            "paragraph_spacing",
            "list_item_spacing",
            "list_item_label_padding",
        ):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

        if self.table_border_style not in ("none", "horizontal", "full"):
            raise ValueError(
                f"table_border_style must be 'none', 'horizontal' or 'full', got {self.table_border_style!r}"
            )

        if not callable(self.heading_size):
            raise ValueError("heading_size must be callable")

    def add_template_tag(self, tag: str, render: TemplateRenderFunction) -> MarkdownRendererOptions:
        """Return a copy with ``render`` registered for ``{tag}``.

        Parameters
        ----------
        tag : str
            Tag name without braces
        render : callable
            Function receiving the current text region and returning the span it emitted

        Returns
        -------
        MarkdownRendererOptions
            Updated copy; this instance is unchanged

        """
        if not tag:
            raise ValueError("Template tag name must not be empty")
        if tag in self.render_templates:
            logger.debug(f"Replacing render function for template tag '{tag}'")
        templates = dict(self.render_templates)
        templates[tag] = render
        return self.create_updated(render_templates=templates)

    def heading_font_size(self, level: int) -> float:
        """Return the clamped font size for a heading level."""
        return max(0.0, float(self.heading_size(level)))


@dataclass(frozen=True)
class NetworkFetchOptions(CloneFrozenMixin):
    """Network security options for remote image fetching.

    Parameters
    ----------
    allow_remote_fetch : bool, default True
        Whether ``http``/``https`` image references are fetched at all.
    allowed_hosts : list[str] | None, default None
        Hostnames allowed for remote fetching. None allows every host.
    require_https : bool, default False
        Reject plain ``http`` URLs.
    network_timeout : float, default 10.0
        Timeout in seconds for each request.
    max_image_bytes : int, default 20 MiB
        Maximum accepted response size; larger downloads are abandoned.

    Notes
    -----
    Setting the ``MDCOMPOSE_DISABLE_NETWORK`` environment variable disables
    remote fetching regardless of these options.

    """

    allow_remote_fetch: bool = field(
        default=DEFAULT_ALLOW_REMOTE_FETCH,
        metadata={"help": "Allow fetching remote image URLs", "importance": "security"},
    )
    allowed_hosts: list[str] | None = field(
        default=DEFAULT_ALLOWED_HOSTS,
        metadata={
            "help": "List of allowed hostnames for remote fetching. If None, all hosts are allowed.",
            "importance": "security",
        },
    )
    require_https: bool = field(
        default=DEFAULT_REQUIRE_HTTPS,
        metadata={"help": "Require HTTPS for all remote URL fetching", "importance": "security"},
    )
    network_timeout: float = field(
        default=DEFAULT_NETWORK_TIMEOUT,
        metadata={"help": "Timeout in seconds for remote URL fetching", "type": float, "importance": "security"},
    )
    max_image_bytes: int = field(
        default=DEFAULT_MAX_IMAGE_BYTES,
        metadata={"help": "Maximum size in bytes of a fetched image", "type": int, "importance": "security"},
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges and ensure immutability for network fetch options.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.allowed_hosts is not None:
            object.__setattr__(self, "allowed_hosts", [host.lower() for host in self.allowed_hosts])

        if self.network_timeout <= 0:
            raise ValueError(f"network_timeout must be positive, got {self.network_timeout}")

        if self.max_image_bytes <= 0:
            raise ValueError(f"max_image_bytes must be positive, got {self.max_image_bytes}")
