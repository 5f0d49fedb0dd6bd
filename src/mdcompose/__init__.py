"""mdcompose - Compose markdown documents into paginated layouts.

mdcompose parses markdown (CommonMark plus tables, grid tables, task lists,
extended emphasis and template tags) into a block/inline tree and renders
that tree through an abstract document-composition interface. A recording
layout backend and a ReportLab PDF backend ship with the library.

Rendering happens in two phases:

1. ``ParsedMarkdownDocument.resolve_images`` fetches, decodes and measures
   every image reference concurrently (data URIs, HTTP(S) URLs, and local
   files confined to a safe root directory).
2. ``MarkdownRenderer.compose`` walks the tree synchronously and emits
   layout calls. Images that could not be resolved become hyperlinks.

Requirements
------------
- Python 3.10+
- mistune, httpx, Pillow and ReportLab

Examples
--------
One-call conversion:

    >>> from pathlib import Path
    >>> from mdcompose import markdown_to_pdf
    >>> markdown_to_pdf(Path("notes.md"), "notes.pdf")

Step by step, with a template tag:

    >>> import asyncio
    >>> from mdcompose import MarkdownRenderer, MarkdownRendererOptions, ParsedMarkdownDocument
    >>> from mdcompose.composition import LayoutDocument, PdfLayoutWriter
    >>>
    >>> doc = ParsedMarkdownDocument.from_file("notes.md")
    >>> asyncio.run(doc.resolve_images(max_parallelism=8))
    >>> options = MarkdownRendererOptions().add_template_tag(
    ...     "today", lambda text: text.span("2025-06-01")
    ... )
    >>> layout = LayoutDocument()
    >>> MarkdownRenderer(doc, options).compose(layout.container())
    >>> PdfLayoutWriter().write(layout, "notes.pdf")

See Also
--------
mdcompose.ast : Block/inline node definitions
mdcompose.composition : Composition targets

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "mdcompose requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from mdcompose.api import (
    compose_markdown,
    load_markdown,
    markdown_to_layout,
    markdown_to_pdf,
    markdown_to_pdf_async,
)
from mdcompose.ast import Document
from mdcompose.exceptions import (
    DependencyError,
    InvalidOptionsError,
    MdComposeError,
    NetworkSecurityError,
    ParsingError,
    PathSecurityError,
    RenderingError,
    SecurityError,
    ValidationError,
)
from mdcompose.options import MarkdownParserOptions, MarkdownRendererOptions, NetworkFetchOptions, PdfOptions
from mdcompose.renderer import MarkdownRenderer, scale_image_dimensions
from mdcompose.resources import ImageWithDimensions, ParsedMarkdownDocument
from mdcompose.style import StyleContext, TextStyle

__all__ = [
    "__version__",
    # Entry points
    "compose_markdown",
    "load_markdown",
    "markdown_to_layout",
    "markdown_to_pdf",
    "markdown_to_pdf_async",
    # Core classes
    "Document",
    "ImageWithDimensions",
    "MarkdownRenderer",
    "ParsedMarkdownDocument",
    "StyleContext",
    "TextStyle",
    "scale_image_dimensions",
    # Options
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
    "NetworkFetchOptions",
    "PdfOptions",
    # Exceptions
    "DependencyError",
    "InvalidOptionsError",
    "MdComposeError",
    "NetworkSecurityError",
    "ParsingError",
    "PathSecurityError",
    "RenderingError",
    "SecurityError",
    "ValidationError",
]
