#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the mdcompose library.

This module centralizes the hardcoded values and default configuration
constants used across mdcompose.

Constants are organized by category:
1. Type Definitions - Literal types shared by options and renderers
2. Renderer Defaults - Colors, thicknesses, glyphs and spacing
3. Resource Resolution - Image fetching and caching settings
4. PDF Output - ReportLab backend settings
5. Dependencies - Optional package requirements
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

ParagraphAlignment = Literal["left", "center", "right", "justify", "start", "end"]
CellAlignment = Literal["left", "center", "right"]
TableBorderStyle = Literal["none", "horizontal", "full"]
PageSize = Literal["letter", "a4", "legal"]

# =============================================================================
# Renderer Defaults
# =============================================================================

DEFAULT_DEBUG = False
DEFAULT_PARAGRAPH_ALIGNMENT: ParagraphAlignment = "left"

# Material palette
DEFAULT_LINK_TEXT_COLOR = "#2196F3"
DEFAULT_MARKED_TEXT_BACKGROUND_COLOR = "#FFF59D"
DEFAULT_BLOCK_QUOTE_BORDER_COLOR = "#E0E0E0"
DEFAULT_BLOCK_QUOTE_TEXT_COLOR = "#616161"
DEFAULT_BLOCK_QUOTE_BORDER_THICKNESS = 2.0
DEFAULT_BLOCK_QUOTE_PADDING = 10.0

DEFAULT_CODE_FONT = "Courier"
DEFAULT_CODE_BLOCK_BACKGROUND = "#F5F5F5"
DEFAULT_CODE_INLINE_BACKGROUND = "#EEEEEE"
DEFAULT_CODE_BLOCK_PADDING = 5.0

DEFAULT_TASK_LIST_CHECKED_GLYPH = "☑"
DEFAULT_TASK_LIST_UNCHECKED_GLYPH = "☐"
DEFAULT_UNICODE_GLYPH_FONT = "DejaVuSans"

DEFAULT_TABLE_BORDER_COLOR = "#E0E0E0"
DEFAULT_TABLE_EVEN_ROW_BACKGROUND = "#F5F5F5"
DEFAULT_TABLE_ODD_ROW_BACKGROUND = "#FFFFFF"
DEFAULT_TABLE_HEADER_BORDER_THICKNESS = 3.0
DEFAULT_TABLE_BORDER_THICKNESS = 1.0
DEFAULT_TABLE_BORDER_STYLE: TableBorderStyle = "horizontal"
DEFAULT_TABLE_CELL_PADDING = 5.0

DEFAULT_HORIZONTAL_RULE_COLOR = "#E0E0E0"
DEFAULT_HORIZONTAL_RULE_THICKNESS = 2.0

DEFAULT_IMAGE_SCALING_FACTOR = 0.5
DEFAULT_MAX_IMAGE_WIDTH = 0.0
DEFAULT_MAX_IMAGE_HEIGHT = 0.0

DEFAULT_PARAGRAPH_SPACING = 10.0
DEFAULT_LIST_ITEM_SPACING = 5.0
DEFAULT_LIST_ITEM_LABEL_PADDING = 10.0
DEFAULT_UNORDERED_LIST_GLYPH = "•"

DEFAULT_HEADING_TEXT_COLOR = "#000000"
DEFAULT_HEADING_BASE_SIZE = 28.0
DEFAULT_HEADING_SIZE_STEP = 2.0

DEBUG_LEAF_BLOCK_COLOR = "#F44336"
DEBUG_CONTAINER_BLOCK_COLOR = "#2196F3"
DEBUG_AREA_TOP_PADDING = 20
UNKNOWN_INLINE_BACKGROUND = "#FF9800"

# =============================================================================
# Resource Resolution
# =============================================================================

DEFAULT_MAX_PARALLELISM = 4
DEFAULT_ALLOW_REMOTE_FETCH = True
DEFAULT_ALLOWED_HOSTS: list[str] | None = None
DEFAULT_REQUIRE_HTTPS = False
DEFAULT_NETWORK_TIMEOUT = 10.0
DEFAULT_MAX_IMAGE_BYTES = 20 * 1024 * 1024
DISABLE_NETWORK_ENV_VAR = "MDCOMPOSE_DISABLE_NETWORK"
DEFAULT_USER_AGENT = "mdcompose"
DEFAULT_MAX_REDIRECTS = 5

# =============================================================================
# PDF Output
# =============================================================================

DEFAULT_PDF_PAGE_SIZE: PageSize = "a4"
DEFAULT_PDF_MARGIN = 50.0
DEFAULT_PDF_FONT_FAMILY = "Helvetica"
DEFAULT_PDF_FONT_SIZE = 12.0
DEFAULT_PDF_LINE_SPACING = 1.2
DEFAULT_CREATOR = "mdcompose"

# =============================================================================
# Dependencies
# =============================================================================

DEPS_MARKDOWN = [("mistune", "mistune", ">=3.0.0")]
DEPS_PDF_RENDER = [("reportlab", "reportlab", ">=4.0.0")]
DEPS_NETWORK = [("httpx", "httpx", ">=0.28.1")]
DEPS_IMAGES = [("Pillow", "PIL", ">=9.0.0")]
