#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for mdcompose.

Every options class is a frozen dataclass. Use ``create_updated`` (or
``create_updated_options``) to derive a modified copy.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from mdcompose.options.base import BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from mdcompose.options.markdown import MarkdownParserOptions
from mdcompose.options.pdf import PdfOptions
from mdcompose.options.renderer import (
    MarkdownRendererOptions,
    NetworkFetchOptions,
    TemplateRenderFunction,
    default_heading_size,
)


def create_updated_options(options: Any, **kwargs: Any) -> Any:
    """Create a new options instance with updated values.

    Parameters
    ----------
    options : Any
        The original options instance (must be a dataclass)
    **kwargs : Any
        Field names and their new values

    Returns
    -------
    Any
        New options instance with the updated values

    """
    return replace(options, **kwargs)


__all__ = [
    "BaseParserOptions",
    "BaseRendererOptions",
    "CloneFrozenMixin",
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
    "NetworkFetchOptions",
    "PdfOptions",
    "TemplateRenderFunction",
    "create_updated_options",
    "default_heading_size",
]
