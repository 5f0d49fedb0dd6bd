#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/integration/test_pdf_output.py
"""Integration tests for the end-to-end markdown to PDF pipeline.

Tests cover:
- PDF bytes, file and stream outputs
- Documents exercising every block kind
- Images, remote and embedded
- Input sources accepted by the convenience functions

"""

import base64
import io
from pathlib import Path

import httpx
import pytest

from mdcompose import (
    InvalidOptionsError,
    MarkdownRendererOptions,
    PdfOptions,
    load_markdown,
    markdown_to_layout,
    markdown_to_pdf,
    markdown_to_pdf_async,
)
from mdcompose.ast import Document, Paragraph, Text
from mdcompose.composition import LayoutDocument, PdfLayoutWriter

FULL_DOCUMENT = """\
# Quarterly report

Intro with **bold**, *italic*, ~~gone~~, ==marked==, ++inserted++, H~2~O and x^2^.
A [link](https://example.com) and <https://example.org> and `inline code`.

> A quote with a list:
>
> 1. first
> 2. second

- [x] shipped
- [ ] pending
  - nested item

```python
def answer():
    return 42
```

---

| Item | Qty | Price |
|:-----|:---:|------:|
| Apple | 3 | 1.20 |
| Pear | 10 | 0.80 |

+-------+-------+
| Left  | Right |
+=======+=======+
| spans both    |
+---------------+

Fish &amp; Chips &copy; 2025
"""


def _png(width: int, height: int) -> bytes:
    from PIL import Image

    buffer = io.BytesIO()
    Image.new("RGB", (width, height), "green").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture(autouse=True)
def _network_enabled(monkeypatch):
    monkeypatch.delenv("MDCOMPOSE_DISABLE_NETWORK", raising=False)


@pytest.mark.integration
class TestPdfOutput:
    """Tests for writing PDFs."""

    def test_returns_pdf_bytes(self):
        """Test that omitting the output returns PDF bytes."""
        pdf = markdown_to_pdf("# Hello\n\nWorld")
        assert pdf.startswith(b"%PDF-")

    def test_writes_file(self, tmp_path):
        """Test writing to a file path."""
        target = tmp_path / "out.pdf"
        assert markdown_to_pdf("# Hello", target) is None
        assert target.read_bytes().startswith(b"%PDF-")

    def test_writes_stream(self):
        """Test writing to a binary stream."""
        buffer = io.BytesIO()
        markdown_to_pdf("Hello", buffer)
        assert buffer.getvalue().startswith(b"%PDF-")

    def test_empty_document(self):
        """Test that an empty document still produces a valid PDF."""
        assert markdown_to_pdf("").startswith(b"%PDF-")

    @pytest.mark.slow
    def test_full_document(self):
        """Test a document using every block and inline kind."""
        pdf = markdown_to_pdf(FULL_DOCUMENT, options=MarkdownRendererOptions(table_border_style="full"))
        assert pdf.startswith(b"%PDF-")

    def test_debug_outlines(self):
        """Test that debug areas can be written."""
        pdf = markdown_to_pdf(FULL_DOCUMENT, options=MarkdownRendererOptions(debug=True))
        assert pdf.startswith(b"%PDF-")

    @pytest.mark.parametrize("page_size", ["letter", "a4", "legal"])
    def test_page_sizes(self, page_size):
        """Test every supported page size."""
        pdf = markdown_to_pdf("Page", pdf_options=PdfOptions(page_size=page_size, title="Title"))
        assert pdf.startswith(b"%PDF-")

    def test_template_tags(self):
        """Test that template tags render in the PDF pipeline."""
        options = MarkdownRendererOptions().add_template_tag("year", lambda text: text.span("2025"))
        pdf = markdown_to_pdf("Copyright {year}", options=options)
        assert pdf.startswith(b"%PDF-")

    def test_wrong_pdf_options_type(self):
        """Test that renderer options are rejected by the PDF writer."""
        with pytest.raises(InvalidOptionsError):
            PdfLayoutWriter(MarkdownRendererOptions())


@pytest.mark.integration
class TestPdfImages:
    """Tests for images in the PDF pipeline."""

    def test_embedded_image(self):
        """Test a data URI image, plain and linked."""
        uri = "data:image/png;base64," + base64.b64encode(_png(40, 20)).decode("ascii")
        markdown = f"Inline ![chart]({uri}) image.\n\n[![logo]({uri})](https://example.com)"
        pdf = markdown_to_pdf(markdown)
        assert pdf.startswith(b"%PDF-")
        assert b"/Subtype /Image" in pdf

    def test_local_image_from_file(self, tmp_path):
        """Test that images next to a markdown file are embedded."""
        (tmp_path / "pic.png").write_bytes(_png(30, 30))
        source = tmp_path / "doc.md"
        source.write_text("# With picture\n\n![pic](pic.png)\n", encoding="utf-8")
        assert markdown_to_pdf(source).startswith(b"%PDF-")

    def test_unresolved_image_falls_back_to_link(self):
        """Test that a missing image does not fail the document."""
        assert markdown_to_pdf("![missing](nowhere/missing.png)").startswith(b"%PDF-")

    @pytest.mark.asyncio
    async def test_remote_image_async(self):
        """Test the async pipeline with a mocked remote image."""
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=_png(16, 16)))
        async with httpx.AsyncClient(transport=transport) as client:
            pdf = await markdown_to_pdf_async("![remote](https://cdn.example.com/r.png)", client=client)
        assert pdf.startswith(b"%PDF-")

    def test_oversized_image_is_scaled_to_frame(self):
        """Test that images wider than the page are written."""
        uri = "data:image/png;base64," + base64.b64encode(_png(3000, 100)).decode("ascii")
        options = MarkdownRendererOptions(image_scaling_factor=1.0)
        assert markdown_to_pdf(f"![wide]({uri})", options=options).startswith(b"%PDF-")


@pytest.mark.integration
class TestPdfLayoutWriterImages:
    """Tests for images placed inside text regions by the PDF writer."""

    def test_inline_image_in_text(self):
        """Test that an image inside a text region is embedded in the PDF."""
        layout = LayoutDocument()
        text = layout.container().text()
        text.span("Before ")
        text.element().image(_png(20, 10), 20, 10, "png")
        text.span(" after")
        pdf = PdfLayoutWriter().write_to_bytes(layout)
        assert b"/Subtype /Image" in pdf

    def test_linked_image_in_text(self):
        """Test that a hyperlinked image inside a text region is embedded."""
        layout = LayoutDocument()
        layout.container().text().element().hyperlink("https://example.com").image(_png(20, 10), 20, 10, "png")
        pdf = PdfLayoutWriter().write_to_bytes(layout)
        assert b"/Subtype /Image" in pdf
        assert b"https://example.com" in pdf

    def test_image_files_removed_after_write(self, monkeypatch):
        """Test that image files written for the build are removed afterwards."""
        import tempfile

        created = []

        class RecordingDirectory(tempfile.TemporaryDirectory):
            def __init__(self, *args, **kwargs):
                super().__init__(*args, **kwargs)
                created.append(Path(self.name))

        monkeypatch.setattr(tempfile, "TemporaryDirectory", RecordingDirectory)
        layout = LayoutDocument()
        layout.container().text().element().image(_png(8, 8), 8, 8, "png")
        writer = PdfLayoutWriter()
        writer.write_to_bytes(layout)

        assert len(created) == 1
        assert not created[0].exists()
        assert writer._image_dir is None


@pytest.mark.integration
class TestSources:
    """Tests for the accepted markdown sources."""

    def test_path_source(self, tmp_path):
        """Test that a Path is read as a file and keeps its location."""
        source = tmp_path / "notes.md"
        source.write_text("# Notes", encoding="utf-8")
        document = load_markdown(source)
        assert document.document_path == source
        assert markdown_to_layout(source).plain_text() == "Notes"

    def test_string_is_text(self):
        """Test that a str is markdown text."""
        assert markdown_to_layout("notes.md").plain_text() == "notes.md"

    def test_binary_stream_with_name(self, tmp_path):
        """Test that a named file stream keeps its path."""
        source = tmp_path / "stream.md"
        source.write_bytes("Café".encode("utf-8"))
        with open(source, "rb") as stream:
            document = load_markdown(stream)
        assert document.document_path == Path(str(source))
        assert markdown_to_layout(document).plain_text() == "Café"

    def test_text_stream(self):
        """Test a text stream."""
        assert markdown_to_layout(io.StringIO("*text*")).plain_text() == "text"

    def test_ast_document(self):
        """Test that a prebuilt AST is accepted."""
        document = Document(children=[Paragraph(content=[Text("built")])])
        layout = markdown_to_layout(document)
        assert isinstance(layout, LayoutDocument)
        assert layout.plain_text() == "built"
