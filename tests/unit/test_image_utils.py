#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_image_utils.py
"""Unit tests for data URI decoding and image dimension reading."""

import base64

import pytest

from mdcompose.utils.images import decode_base64_image, is_image_data_uri, read_image_dimensions


@pytest.mark.unit
class TestDataUris:
    """Tests for data URI recognition and decoding."""

    @pytest.mark.parametrize(
        "uri,expected",
        [
            ("data:image/png;base64,iVBORw0KGgo=", True),
            ("data:image/svg+xml;base64,PHN2Zz4=", True),
            ("data:text/plain;base64,aGk=", False),
            ("data:image/png,rawbytes", False),
            ("https://example.com/image.png", False),
            ("", False),
        ],
    )
    def test_is_image_data_uri(self, uri, expected):
        """Test data URI detection."""
        assert is_image_data_uri(uri) is expected

    def test_decode(self, png_factory):
        """Test decoding a PNG data URI."""
        png = png_factory(3, 2)
        data, image_format = decode_base64_image("data:image/png;base64," + base64.b64encode(png).decode())
        assert data == png
        assert image_format == "png"

    @pytest.mark.parametrize("subtype,expected", [("jpeg", "jpg"), ("JPEG", "jpg"), ("svg+xml", "svg")])
    def test_format_normalization(self, subtype, expected):
        """Test that MIME subtypes are normalized to format names."""
        _data, image_format = decode_base64_image(f"data:image/{subtype};base64,aGk=")
        assert image_format == expected

    def test_wrapped_payload(self):
        """Test that whitespace in the payload is ignored."""
        data, _format = decode_base64_image("data:image/png;base64,aGVs\nbG8=")
        assert data == b"hello"

    @pytest.mark.parametrize("uri", ["data:image/png;base64,@@@@", "not a data uri"])
    def test_invalid(self, uri):
        """Test that malformed input decodes to (None, None)."""
        assert decode_base64_image(uri) == (None, None)


@pytest.mark.unit
class TestReadImageDimensions:
    """Tests for reading image headers with Pillow."""

    def test_png(self, png_factory):
        """Test width, height and format of a PNG."""
        assert read_image_dimensions(png_factory(200, 100)) == (200, 100, "png")

    def test_jpeg(self):
        """Test a JPEG image."""
        import io

        from PIL import Image

        buffer = io.BytesIO()
        Image.new("RGB", (12, 34)).save(buffer, format="JPEG")
        assert read_image_dimensions(buffer.getvalue()) == (12, 34, "jpeg")

    def test_not_an_image(self):
        """Test that unidentifiable bytes raise ValueError."""
        with pytest.raises(ValueError, match="Cannot identify"):
            read_image_dimensions(b"definitely not an image")
