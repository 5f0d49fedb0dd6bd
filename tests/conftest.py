"""Pytest configuration and shared fixtures for the mdcompose test suite.

This module provides shared fixtures and test configuration used across
the unit and integration tests.
"""

import io

import pytest

from mdcompose.composition import LayoutDocument
from mdcompose.options import MarkdownRendererOptions
from mdcompose.renderer import MarkdownRenderer
from mdcompose.resources import ParsedMarkdownDocument


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")


def make_png(width: int, height: int, color: str = "red") -> bytes:
    """Encode a solid-color PNG of the given size with Pillow."""
    from PIL import Image

    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def render_layout(document, options=None) -> LayoutDocument:
    """Compose a document (markdown text or parsed document) into a fresh layout."""
    if isinstance(document, str):
        document = ParsedMarkdownDocument.from_text(document)
    layout = LayoutDocument()
    MarkdownRenderer(document, options).compose(layout.container())
    return layout


@pytest.fixture
def png_factory():
    """Provide the PNG builder to tests."""
    return make_png


@pytest.fixture
def render():
    """Provide ``render_layout`` to tests."""
    return render_layout


@pytest.fixture
def renderer_options() -> MarkdownRendererOptions:
    """Default renderer options."""
    return MarkdownRendererOptions()
