#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdcompose/utils/__init__.py
"""Utility modules for mdcompose.

This package contains helpers for encoding detection, dependency checks,
image decoding, network fetching and safe local path resolution.
"""

from mdcompose.utils.images import decode_base64_image, is_image_data_uri, read_image_dimensions
from mdcompose.utils.paths import resolve_safe_local_path, try_resolve_safe_local_path

__all__ = [
    "decode_base64_image",
    "is_image_data_uri",
    "read_image_dimensions",
    "resolve_safe_local_path",
    "try_resolve_safe_local_path",
]
