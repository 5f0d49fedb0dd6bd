#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdcompose/utils/images.py
"""Image handling utilities for the resource resolver.

This module decodes base64 image data URIs and reads pixel dimensions from
encoded image bytes with Pillow.

"""

from __future__ import annotations

import base64
import binascii
import io
import logging
import re

from mdcompose.constants import DEPS_IMAGES
from mdcompose.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)

_DATA_URI_RE = re.compile(r"^data:image/(?P<subtype>[^;,]+?);base64,(?P<data>.+)$", re.DOTALL)


def is_image_data_uri(uri: str) -> bool:
    """Check if a string is a base64 image data URI.

    Parameters
    ----------
    uri : str
        String to check

    Returns
    -------
    bool
        True if the string looks like ``data:image/...;base64,...``

    Examples
    --------
        >>> is_image_data_uri("data:image/png;base64,iVBORw0KGgo=")
        True
        >>> is_image_data_uri("https://example.com/image.png")
        False

    """
    if not uri or not isinstance(uri, str):
        return False
    return _DATA_URI_RE.match(uri) is not None


def decode_base64_image(data_uri: str) -> tuple[bytes | None, str | None]:
    """Decode a base64-encoded image data URI.

    Parameters
    ----------
    data_uri : str
        Data URI string in format: data:image/{format};base64,{data}

    Returns
    -------
    tuple[bytes or None, str or None]
        Tuple of (image_data, image_format) or (None, None) if decoding fails.
        image_format is the MIME subtype with ``jpeg`` normalized to ``jpg``
        and ``svg+xml`` to ``svg``

    """
    match = _DATA_URI_RE.match(data_uri or "")
    if not match:
        logger.debug(f"Invalid data URI format for URI starting with '{(data_uri or '')[:50]}...'")
        return None, None

    subtype = match.group("subtype").lower()
    image_format = {"jpeg": "jpg", "svg+xml": "svg"}.get(subtype, subtype)

    # base64 payloads are often wrapped across lines
    payload = re.sub(r"\s+", "", match.group("data"))
    try:
        return base64.b64decode(payload, validate=True), image_format
    except (ValueError, binascii.Error) as e:
        logger.debug(f"Invalid base64 encoding: failed to decode ({type(e).__name__}: {e})")
        return None, None


@requires_dependencies("images", DEPS_IMAGES)
def read_image_dimensions(data: bytes) -> tuple[int, int, str | None]:
    """Read pixel dimensions of encoded image bytes.

    Only the image header is read; pixel data is not decoded.

    Parameters
    ----------
    data : bytes
        Encoded image (PNG, JPEG, GIF, ...)

    Returns
    -------
    tuple[int, int, str or None]
        ``(width, height, format)`` where format is the lowercase Pillow
        format name (e.g. ``"png"``)

    Raises
    ------
    ValueError
        If Pillow cannot identify the image

    """
    from PIL import Image, UnidentifiedImageError

    try:
        with Image.open(io.BytesIO(data)) as image:
            width, height = image.size
            image_format = image.format.lower() if image.format else None
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Cannot identify image data: {e}") from e

    return width, height, image_format
