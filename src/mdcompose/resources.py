#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdcompose/resources.py
"""Parsed documents and the image resolution phase.

``ParsedMarkdownDocument`` owns a parsed AST together with the cache of
resolved images. Images are resolved once, asynchronously, by
``resolve_images`` before any rendering happens; rendering only reads the
cache. An image that could not be resolved is simply missing from the cache
and is rendered as a hyperlink instead.

Examples
--------
    >>> import asyncio
    >>> doc = ParsedMarkdownDocument.from_text("![logo](images/logo.png)", document_path="README.md")
    >>> asyncio.run(doc.resolve_images())
    >>> doc.get_cached_image("images/logo.png")  # doctest: +SKIP
    ImageWithDimensions(width=64, height=64, ...)

"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union
from urllib.parse import unquote

from mdcompose.ast import Document, collect_image_urls
from mdcompose.constants import DEFAULT_MAX_PARALLELISM
from mdcompose.options.markdown import MarkdownParserOptions
from mdcompose.options.renderer import NetworkFetchOptions
from mdcompose.parsers.markdown import MarkdownParser
from mdcompose.utils.decorators import debug_timer
from mdcompose.utils.encoding import read_text_with_encoding_detection
from mdcompose.utils.images import decode_base64_image, is_image_data_uri, read_image_dimensions
from mdcompose.utils.network import create_async_client, fetch_image_bytes
from mdcompose.utils.paths import try_resolve_safe_local_path

logger = logging.getLogger(__name__)

# A scheme needs at least two characters so that "C:/img.png" stays a local path
_ABSOLUTE_URI_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]+:")


@dataclass(frozen=True)
class ImageWithDimensions:
    """A resolved image with its pixel dimensions.

    Parameters
    ----------
    width : int
        Width in pixels
    height : int
        Height in pixels
    data : bytes
        Encoded image bytes
    format : str or None
        Lowercase image format name such as ``"png"``

    """

    width: int
    height: int
    data: bytes = field(repr=False)
    format: Optional[str] = None


def is_absolute_uri(reference: str) -> bool:
    """Return True if ``reference`` starts with a URI scheme."""
    return _ABSOLUTE_URI_RE.match(reference) is not None


class ParsedMarkdownDocument:
    """A parsed markdown document and its resolved image cache.

    A single instance can be rendered any number of times, also from
    concurrent render calls, once ``resolve_images`` has completed.

    Parameters
    ----------
    document : Document
        Parsed AST
    document_path : str, Path or None, default None
        Location of the markdown source. Its directory is the default safe
        root for local images.

    """

    def __init__(self, document: Document, document_path: Union[str, Path, None] = None):
        self.document = document
        self.document_path = Path(document_path) if document_path is not None else None
        self._image_cache: dict[str, ImageWithDimensions] = {}

    @classmethod
    def from_text(
        cls,
        text: str,
        document_path: Union[str, Path, None] = None,
        options: MarkdownParserOptions | None = None,
    ) -> ParsedMarkdownDocument:
        """Parse markdown text.

        Parameters
        ----------
        text : str
            Markdown source
        document_path : str, Path or None, default None
            Where the text came from, used as the default safe root
        options : MarkdownParserOptions or None, default None
            Parser configuration

        Returns
        -------
        ParsedMarkdownDocument
            Parsed document with an empty image cache

        """
        return cls(MarkdownParser(options).parse(text), document_path=document_path)

    @classmethod
    def from_file(
        cls, path: Union[str, Path], options: MarkdownParserOptions | None = None
    ) -> ParsedMarkdownDocument:
        """Read and parse a markdown file, detecting its encoding."""
        path = Path(path)
        text = read_text_with_encoding_detection(path.read_bytes())
        return cls.from_text(text, document_path=path, options=options)

    @property
    def image_references(self) -> list[str]:
        """Distinct image references of the document, in document order."""
        return collect_image_urls(self.document)

    @property
    def cached_references(self) -> list[str]:
        """References that were resolved successfully."""
        return list(self._image_cache)

    def get_cached_image(self, reference: str) -> Optional[ImageWithDimensions]:
        """Return the resolved image for ``reference``, or None if it was not resolved."""
        return self._image_cache.get(reference)

    def default_safe_root(self) -> Optional[Path]:
        if self.document_path is None:
            return None
        return self.document_path.resolve().parent

    async def resolve_images(
        self,
        max_parallelism: int = DEFAULT_MAX_PARALLELISM,
        client: Any = None,
        safe_root: Union[str, Path, None] = None,
        network: NetworkFetchOptions | None = None,
    ) -> None:
        """Resolve every image reference of the document into the cache.

        Data URIs are decoded in place, absolute URIs are downloaded and
        other references are read from below the safe root. A reference
        that fails to resolve is logged and left out of the cache; it never
        affects the other references.

        Parameters
        ----------
        max_parallelism : int, default 4
            Maximum number of references resolved at the same time. Values
            below 1 are treated as 1
        client : httpx.AsyncClient or None, default None
            Client for remote images. It is reused and not closed. When None,
            a client is created for this call and closed afterwards
        safe_root : str, Path or None, default None
            Directory local images must live in. Defaults to the directory of
            ``document_path``; without either, local references stay
            unresolved
        network : NetworkFetchOptions or None, default None
            Rules for remote fetching

        """
        network = network or NetworkFetchOptions()
        references = [ref for ref in self.image_references if ref not in self._image_cache]
        if not references:
            return

        root = Path(safe_root) if safe_root is not None else self.default_safe_root()
        semaphore = asyncio.Semaphore(max(1, max_parallelism))

        owns_client = client is None and any(is_absolute_uri(ref) for ref in references)
        if owns_client:
            client = create_async_client(network)

        try:
            with debug_timer(logger, f"Resolving {len(references)} image reference(s)"):
                await asyncio.gather(
                    *(self._resolve_reference(ref, semaphore, client, root, network) for ref in references)
                )
        finally:
            if owns_client:
                await client.aclose()

        logger.debug(f"Resolved {len(self._image_cache)} of {len(self.image_references)} image reference(s)")

    async def _resolve_reference(
        self,
        reference: str,
        semaphore: asyncio.Semaphore,
        client: Any,
        root: Optional[Path],
        network: NetworkFetchOptions,
    ) -> None:
        async with semaphore:
            try:
                data = await self._load_reference(reference, client, root, network)
                if data is None:
                    logger.debug(f"Image reference left unresolved: {reference[:80]!r}")
                    return
                width, height, image_format = read_image_dimensions(data)
            except Exception as e:
                logger.warning(f"Could not resolve image {reference[:80]!r}: {e}")
                return

        # duplicate references may race; the first stored entry wins
        self._image_cache.setdefault(reference, ImageWithDimensions(width, height, data, image_format))

    @staticmethod
    async def _load_reference(
        reference: str, client: Any, root: Optional[Path], network: NetworkFetchOptions
    ) -> Optional[bytes]:
        if is_image_data_uri(reference):
            data, _image_format = decode_base64_image(reference)
            if data is None:
                raise ValueError("Malformed base64 image data URI")
            return data

        if is_absolute_uri(reference):
            return await fetch_image_bytes(reference, client, network)

        if root is None:
            return None

        # link destinations arrive percent-encoded
        path = try_resolve_safe_local_path(unquote(reference), root)
        if path is None:
            return None
        return await asyncio.to_thread(path.read_bytes)
