#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdcompose/composition/layout.py
"""In-memory composition target.

Every composition call is recorded as a ``LayoutElement`` node. The
resulting tree is backend-neutral: it can be inspected directly, serialized
with ``to_dict()`` for comparisons, or handed to the PDF writer.

Element kinds
-------------
Slots (hold at most one child):
    ``document``, ``item``, ``auto_item``, ``relative_item``, ``cell``, ``element``
Decorations (slots with properties):
    ``padding``, ``background``, ``border``, ``align``, ``hyperlink``, ``debug_area``
Regions:
    ``column``, ``row``, ``text``, ``table``
Leaves:
    ``span``, ``image``, ``line_horizontal``

"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Iterator, Optional

from mdcompose.composition.base import ColumnRegion, Container, RowRegion, TableRegion, TextRegion, TextSpan
from mdcompose.constants import CellAlignment, ParagraphAlignment
from mdcompose.exceptions import RenderingError
from mdcompose.style import StyleFrame, TextStyle

SLOT_KINDS = frozenset({"document", "item", "auto_item", "relative_item", "cell", "element"})
DECORATION_KINDS = frozenset({"padding", "background", "border", "align", "hyperlink", "debug_area"})


@dataclass
class LayoutElement:
    """Node of the recorded layout tree.

    Parameters
    ----------
    kind : str
        Element kind (see module docstring)
    props : dict, default = empty dict
        Kind-specific properties
    children : list of LayoutElement, default = empty list
        Child elements in call order

    """

    kind: str
    props: dict[str, Any] = field(default_factory=dict)
    children: list[LayoutElement] = field(default_factory=list)

    @property
    def is_slot(self) -> bool:
        """Whether this element accepts at most one child."""
        return self.kind in SLOT_KINDS or self.kind in DECORATION_KINDS

    @property
    def content(self) -> Optional[LayoutElement]:
        """Single child of a slot, or None when the slot is empty."""
        return self.children[0] if self.children else None

    def iter_elements(self) -> Iterator[LayoutElement]:
        """Yield this element and all descendants in pre-order."""
        stack = [self]
        while stack:
            element = stack.pop()
            yield element
            stack.extend(reversed(element.children))

    def find_all(self, kind: str) -> list[LayoutElement]:
        """Return every descendant (or self) of the given kind, in document order."""
        return [element for element in self.iter_elements() if element.kind == kind]

    def plain_text(self) -> str:
        """Concatenate the text of all spans below this element."""
        return "".join(element.props["text"] for element in self.find_all("span"))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain Python structures.

        Image payloads are replaced by their byte length and styles by their
        field dictionaries, so the result is cheap to compare and print.

        """
        props: dict[str, Any] = {}
        for key, value in self.props.items():
            if isinstance(value, TextStyle):
                props[key] = asdict(value)
            elif isinstance(value, (bytes, bytearray)):
                props[key] = len(value)
            elif isinstance(value, list):
                props[key] = list(value)
            else:
                props[key] = value

        result: dict[str, Any] = {"kind": self.kind, "props": props}
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


class LayoutTextSpan(TextSpan):
    """Span handle backed by a ``span`` element."""

    def __init__(self, node: LayoutElement):
        self.node = node

    @property
    def style(self) -> TextStyle:
        return self.node.props["style"]

    def update_style(self, frame: StyleFrame) -> LayoutTextSpan:
        self.node.props["style"] = frame(self.style)
        return self


class LayoutTextRegion(TextRegion):
    """Text region backed by a ``text`` element."""

    def __init__(self, node: LayoutElement):
        self.node = node

    def align(self, alignment: ParagraphAlignment) -> None:
        self.node.props["alignment"] = alignment

    def span(self, text: str) -> LayoutTextSpan:
        return self._add_span(text, url=None)

    def hyperlink(self, text: str, url: str) -> LayoutTextSpan:
        return self._add_span(text, url=url)

    def element(self) -> LayoutContainer:
        slot = LayoutElement("element")
        self.node.children.append(slot)
        return LayoutContainer(slot)

    def _add_span(self, text: str, url: Optional[str]) -> LayoutTextSpan:
        props: dict[str, Any] = {"text": text, "style": TextStyle()}
        if url is not None:
            props["url"] = url
        span = LayoutElement("span", props)
        self.node.children.append(span)
        return LayoutTextSpan(span)


class LayoutColumnRegion(ColumnRegion):
    """Vertical stack backed by a ``column`` element."""

    def __init__(self, node: LayoutElement):
        self.node = node
        self._spacing = 0.0

    def spacing(self, value: float) -> None:
        self._spacing = value

    def item(self) -> LayoutContainer:
        # The first item never gets a leading gap
        spacing = self._spacing if self.node.children else 0.0
        slot = LayoutElement("item", {"spacing": spacing})
        self.node.children.append(slot)
        return LayoutContainer(slot)


class LayoutRowRegion(RowRegion):
    """Horizontal row backed by a ``row`` element."""

    def __init__(self, node: LayoutElement):
        self.node = node

    def spacing(self, value: float) -> None:
        self.node.props["spacing"] = value

    def auto_item(self) -> LayoutContainer:
        slot = LayoutElement("auto_item")
        self.node.children.append(slot)
        return LayoutContainer(slot)

    def relative_item(self, weight: float = 1) -> LayoutContainer:
        slot = LayoutElement("relative_item", {"weight": weight})
        self.node.children.append(slot)
        return LayoutContainer(slot)


class LayoutTableRegion(TableRegion):
    """Table backed by a ``table`` element; column weights live in ``props["columns"]``."""

    def __init__(self, node: LayoutElement):
        self.node = node
        self.node.props.setdefault("columns", [])

    def relative_column(self, weight: float = 1) -> None:
        self.node.props["columns"].append(weight)

    def cell(self, row: int, column: int, row_span: int = 1, column_span: int = 1) -> LayoutContainer:
        if row < 1 or column < 1:
            raise RenderingError(
                f"Table cell coordinates are 1-based, got row={row}, column={column}", rendering_stage="layout"
            )
        slot = LayoutElement(
            "cell",
            {"row": row, "column": column, "row_span": max(1, row_span), "column_span": max(1, column_span)},
        )
        self.node.children.append(slot)
        return LayoutContainer(slot)


class LayoutContainer(Container):
    """Container backed by a slot element."""

    def __init__(self, node: LayoutElement):
        self.node = node

    def _fill(self, kind: str, props: Optional[dict[str, Any]] = None) -> LayoutElement:
        if self.node.children:
            raise RenderingError(
                f"'{self.node.kind}' slot already holds '{self.node.children[0].kind}', "
                f"cannot add '{kind}'",
                rendering_stage="layout",
            )
        child = LayoutElement(kind, props or {})
        self.node.children.append(child)
        return child

    def _decorate(self, kind: str, props: dict[str, Any]) -> LayoutContainer:
        return LayoutContainer(self._fill(kind, props))

    def padding(self, value: float) -> LayoutContainer:
        return self._decorate("padding", {"top": value, "right": value, "bottom": value, "left": value})

    def padding_left(self, value: float) -> LayoutContainer:
        return self._decorate("padding", {"top": 0, "right": 0, "bottom": 0, "left": value})

    def padding_top(self, value: float) -> LayoutContainer:
        return self._decorate("padding", {"top": value, "right": 0, "bottom": 0, "left": 0})

    def background(self, color: str) -> LayoutContainer:
        return self._decorate("background", {"color": color})

    def border(
        self,
        color: str,
        top: float = 0,
        right: float = 0,
        bottom: float = 0,
        left: float = 0,
    ) -> LayoutContainer:
        return self._decorate("border", {"color": color, "top": top, "right": right, "bottom": bottom, "left": left})

    def align(self, alignment: CellAlignment) -> LayoutContainer:
        return self._decorate("align", {"alignment": alignment})

    def hyperlink(self, url: str) -> LayoutContainer:
        return self._decorate("hyperlink", {"url": url})

    def debug_area(self, label: str, color: str) -> LayoutContainer:
        return self._decorate("debug_area", {"label": label, "color": color})

    def column(self) -> LayoutColumnRegion:
        return LayoutColumnRegion(self._fill("column"))

    def row(self) -> LayoutRowRegion:
        return LayoutRowRegion(self._fill("row", {"spacing": 0.0}))

    def text(self) -> LayoutTextRegion:
        return LayoutTextRegion(self._fill("text", {"alignment": None}))

    def table(self) -> LayoutTableRegion:
        return LayoutTableRegion(self._fill("table"))

    def image(self, data: bytes, width: float, height: float, image_format: Optional[str] = None) -> None:
        self._fill("image", {"data": data, "width": width, "height": height, "format": image_format})

    def line_horizontal(self, thickness: float, color: str) -> None:
        self._fill("line_horizontal", {"thickness": thickness, "color": color})


class LayoutDocument:
    """Root of a recorded layout.

    Examples
    --------
        >>> layout = LayoutDocument()
        >>> _ = layout.container().padding(5).text().span("Hello")
        >>> layout.plain_text()
        'Hello'

    """

    def __init__(self) -> None:
        self.root = LayoutElement("document")

    def container(self) -> LayoutContainer:
        """Return the top-level slot."""
        return LayoutContainer(self.root)

    def plain_text(self) -> str:
        """Concatenate the text of all spans in the document."""
        return self.root.plain_text()

    def find_all(self, kind: str) -> list[LayoutElement]:
        """Return every element of the given kind, in document order."""
        return self.root.find_all(kind)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the whole layout tree."""
        return self.root.to_dict()
