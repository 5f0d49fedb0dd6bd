#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdcompose/style.py
"""Text styles and the nested inline style context.

A ``TextStyle`` is an immutable description of how a text span looks. A
style *frame* is a pure function ``TextStyle -> TextStyle`` (for example
"make bold" or "set the font color"). The ``StyleContext`` is the stack of
frames that are active while the renderer walks a subtree; the effective
style of a span is the base style with every frame applied in push order.

Examples
--------
    >>> context = StyleContext()
    >>> with context.scoped(bold()):
    ...     with context.scoped(font_color("#2196F3")):
    ...         context.compose(TextStyle())
    TextStyle(..., font_color='#2196F3', ..., bold=True, ...)
    >>> context.depth
    0

"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Callable, Iterator, Optional, Protocol, TypeVar


@dataclass(frozen=True)
class TextStyle:
    """Immutable text span style.

    ``None`` values mean "inherit from the surrounding text region".

    Parameters
    ----------
    font_family : str or None
        Font name
    font_size : float or None
        Font size in points
    font_color : str or None
        Hex color of the glyphs
    background_color : str or None
        Hex color behind the glyphs
    decoration_color : str or None
        Hex color of underline/strikethrough decorations
    bold, italic, underline, strikethrough, superscript, subscript : bool
        Toggle flags

    """

    font_family: Optional[str] = None
    font_size: Optional[float] = None
    font_color: Optional[str] = None
    background_color: Optional[str] = None
    decoration_color: Optional[str] = None
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    superscript: bool = False
    subscript: bool = False


StyleFrame = Callable[[TextStyle], TextStyle]


class SupportsStyle(Protocol):
    """Anything carrying a ``TextStyle`` that can be restyled by a frame."""

    def update_style(self, frame: StyleFrame) -> SupportsStyle: ...


_SpanT = TypeVar("_SpanT", bound=SupportsStyle)


class StyleContext:
    """Stack of style frames scoped to a single render call.

    Every ``push`` made while descending into a subtree must be matched by
    exactly one ``pop`` when the subtree is left. ``scoped`` pairs them with
    ``try/finally`` so the stack is restored even when rendering the subtree
    raises.

    """

    def __init__(self) -> None:
        """Create an empty context."""
        self._frames: list[StyleFrame] = []

    @property
    def depth(self) -> int:
        """Number of frames currently pushed."""
        return len(self._frames)

    def push(self, frame: StyleFrame) -> None:
        """Append a style frame on top of the stack."""
        self._frames.append(frame)

    def pop(self) -> StyleFrame:
        """Remove and return the most recently pushed frame.

        Raises
        ------
        IndexError
            If the context is empty

        """
        if not self._frames:
            raise IndexError("pop from empty StyleContext")
        return self._frames.pop()

    @contextmanager
    def scoped(self, frame: StyleFrame) -> Iterator[None]:
        """Push ``frame`` for the duration of a ``with`` block."""
        self.push(frame)
        try:
            yield
        finally:
            self.pop()

    def compose(self, base: TextStyle) -> TextStyle:
        """Apply every frame, bottom to top, to ``base``."""
        style = base
        for frame in self._frames:
            style = frame(style)
        return style

    def apply_all(self, span: _SpanT) -> _SpanT:
        """Restyle ``span`` with the composition of all active frames.

        Parameters
        ----------
        span : SupportsStyle
            Span handle returned by a text region

        Returns
        -------
        SupportsStyle
            The same span, for chaining

        """
        span.update_style(self.compose)
        return span


# ============================================================================
# Frame factories
# ============================================================================


def bold() -> StyleFrame:
    """Frame turning on bold."""
    return lambda style: replace(style, bold=True)


def italic() -> StyleFrame:
    """Frame turning on italic."""
    return lambda style: replace(style, italic=True)


def underline(color: Optional[str] = None) -> StyleFrame:
    """Frame turning on underline, optionally with a decoration color."""

    def frame(style: TextStyle) -> TextStyle:
        if color is None:
            return replace(style, underline=True)
        return replace(style, underline=True, decoration_color=color)

    return frame


def strikethrough() -> StyleFrame:
    """Frame turning on strikethrough."""
    return lambda style: replace(style, strikethrough=True)


def superscript() -> StyleFrame:
    """Frame switching to superscript (clears subscript)."""
    return lambda style: replace(style, superscript=True, subscript=False)


def subscript() -> StyleFrame:
    """Frame switching to subscript (clears superscript)."""
    return lambda style: replace(style, subscript=True, superscript=False)


def font_family(name: str) -> StyleFrame:
    """Frame setting the font family."""
    return lambda style: replace(style, font_family=name)


def font_size(size: float) -> StyleFrame:
    """Frame setting the font size."""
    return lambda style: replace(style, font_size=size)


def font_color(color: str) -> StyleFrame:
    """Frame setting the glyph color."""
    return lambda style: replace(style, font_color=color)


def background_color(color: str) -> StyleFrame:
    """Frame setting the background color."""
    return lambda style: replace(style, background_color=color)


def chain(*frames: StyleFrame) -> StyleFrame:
    """Combine several frames into one, applied left to right."""
    captured = tuple(frames)

    def frame(style: TextStyle) -> TextStyle:
        for inner in captured:
            style = inner(style)
        return style

    return frame
