#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdcompose/api.py
"""Convenience entry points for mdcompose.

These functions chain the three phases of the library: parsing markdown into
a ``ParsedMarkdownDocument``, resolving its images, and composing it into a
layout that is written to PDF.

Examples
--------
Render a file to PDF:

    >>> from pathlib import Path
    >>> from mdcompose import markdown_to_pdf
    >>> markdown_to_pdf(Path("README.md"), "README.pdf")

Compose into your own target:

    >>> from mdcompose.composition import LayoutDocument
    >>> layout = LayoutDocument()
    >>> compose_markdown(ParsedMarkdownDocument.from_text("Hello"), layout.container())
    >>> layout.plain_text()
    'Hello'

"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import IO, Any, Optional, Union

from mdcompose.ast import Document
from mdcompose.composition.base import Container
from mdcompose.composition.layout import LayoutDocument
from mdcompose.composition.pdf import PdfLayoutWriter
from mdcompose.constants import DEFAULT_MAX_PARALLELISM
from mdcompose.options.markdown import MarkdownParserOptions
from mdcompose.options.pdf import PdfOptions
from mdcompose.options.renderer import MarkdownRendererOptions, NetworkFetchOptions
from mdcompose.renderer import MarkdownRenderer
from mdcompose.resources import ParsedMarkdownDocument
from mdcompose.utils.encoding import normalize_stream_to_text

logger = logging.getLogger(__name__)

MarkdownSource = Union[str, Path, IO[bytes], IO[str], ParsedMarkdownDocument, Document]


def compose_markdown(
    document: Union[ParsedMarkdownDocument, Document],
    container: Container,
    options: Optional[MarkdownRendererOptions] = None,
) -> None:
    """Compose a parsed document into a container.

    Parameters
    ----------
    document : ParsedMarkdownDocument or Document
        Document to render; resolve its images first to have them drawn
    container : Container
        Empty slot of any composition target
    options : MarkdownRendererOptions, optional
        Rendering options

    """
    MarkdownRenderer(document, options).compose(container)


def load_markdown(
    source: MarkdownSource, parser_options: Optional[MarkdownParserOptions] = None
) -> ParsedMarkdownDocument:
    """Turn any supported source into a ``ParsedMarkdownDocument``.

    A ``Path`` is read as a file. A ``str`` is treated as markdown text, never
    as a file name. Binary and text streams are read completely; a stream with
    a ``name`` attribute keeps it as the document path.
    """
    if isinstance(source, ParsedMarkdownDocument):
        return source
    if isinstance(source, Document):
        return ParsedMarkdownDocument(source)
    if isinstance(source, Path):
        return ParsedMarkdownDocument.from_file(source, options=parser_options)
    if isinstance(source, str):
        return ParsedMarkdownDocument.from_text(source, options=parser_options)

    name = getattr(source, "name", None)
    document_path = name if isinstance(name, str) else None
    text = normalize_stream_to_text(source)
    return ParsedMarkdownDocument.from_text(text, document_path=document_path, options=parser_options)


async def markdown_to_pdf_async(
    source: MarkdownSource,
    output: Union[str, Path, IO[bytes], None] = None,
    options: Optional[MarkdownRendererOptions] = None,
    pdf_options: Optional[PdfOptions] = None,
    parser_options: Optional[MarkdownParserOptions] = None,
    network: Optional[NetworkFetchOptions] = None,
    max_parallelism: int = DEFAULT_MAX_PARALLELISM,
    safe_root: Union[str, Path, None] = None,
    client: Any = None,
) -> Optional[bytes]:
    """Parse, resolve and write markdown to PDF from a running event loop.

    Parameters
    ----------
    source : str, Path, stream, ParsedMarkdownDocument or Document
        Markdown text, a markdown file, or an already parsed document
    output : str, Path, IO[bytes] or None, default None
        Destination. When None the PDF bytes are returned
    options : MarkdownRendererOptions, optional
        Rendering options
    pdf_options : PdfOptions, optional
        Page and font options of the PDF backend
    parser_options : MarkdownParserOptions, optional
        Markdown extensions to enable
    network : NetworkFetchOptions, optional
        Rules for fetching remote images
    max_parallelism : int, default 4
        Maximum number of images resolved at the same time
    safe_root : str, Path or None, default None
        Directory local images must live in. Defaults to the directory of
        the markdown file
    client : httpx.AsyncClient, optional
        Client reused for remote images

    Returns
    -------
    bytes or None
        PDF bytes when ``output`` is None

    Raises
    ------
    ParsingError
        If the markdown cannot be parsed
    RenderingError
        If composing or writing the PDF fails

    """
    document = load_markdown(source, parser_options)
    await document.resolve_images(
        max_parallelism=max_parallelism, client=client, safe_root=safe_root, network=network
    )

    layout = LayoutDocument()
    compose_markdown(document, layout.container(), options)

    writer = PdfLayoutWriter(pdf_options)
    if output is None:
        return writer.write_to_bytes(layout)

    writer.write(layout, output)
    if isinstance(output, (str, Path)):
        logger.info(f"Wrote PDF to {output}")
    return None


def markdown_to_pdf(
    source: MarkdownSource,
    output: Union[str, Path, IO[bytes], None] = None,
    options: Optional[MarkdownRendererOptions] = None,
    pdf_options: Optional[PdfOptions] = None,
    parser_options: Optional[MarkdownParserOptions] = None,
    network: Optional[NetworkFetchOptions] = None,
    max_parallelism: int = DEFAULT_MAX_PARALLELISM,
    safe_root: Union[str, Path, None] = None,
) -> Optional[bytes]:
    """Parse, resolve and write markdown to PDF.

    Blocking wrapper around ``markdown_to_pdf_async``; it must not be called
    from inside a running event loop. See ``markdown_to_pdf_async`` for the
    parameters.

    Examples
    --------
        >>> pdf_bytes = markdown_to_pdf("# Report\\n\\nAll systems nominal.")
        >>> pdf_bytes[:5]
        b'%PDF-'

    """
    return asyncio.run(
        markdown_to_pdf_async(
            source,
            output,
            options=options,
            pdf_options=pdf_options,
            parser_options=parser_options,
            network=network,
            max_parallelism=max_parallelism,
            safe_root=safe_root,
        )
    )


def markdown_to_layout(
    source: MarkdownSource,
    options: Optional[MarkdownRendererOptions] = None,
    parser_options: Optional[MarkdownParserOptions] = None,
) -> LayoutDocument:
    """Compose markdown into an inspectable layout tree without resolving images."""
    layout = LayoutDocument()
    compose_markdown(load_markdown(source, parser_options), layout.container(), options)
    return layout


__all__ = [
    "MarkdownSource",
    "compose_markdown",
    "load_markdown",
    "markdown_to_layout",
    "markdown_to_pdf",
    "markdown_to_pdf_async",
]
