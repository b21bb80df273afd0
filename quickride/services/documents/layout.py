"""Flowing page layout: append blocks, measure them, break pages when needed.

Coordinates are top-down: ``y = 0`` is the top edge of the page.
"""
from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol


class Surface(Protocol):
    """Page-level drawing primitives used by the layout and its blocks."""

    page_width: float
    page_height: float

    def fill_rect(self, x: float, y: float, width: float, height: float, color: str, *, radius: float = 0) -> None: ...

    def stroke_rect(
        self, x: float, y: float, width: float, height: float, color: str, *, line_width: float = 1, radius: float = 0
    ) -> None: ...

    def line(self, x1: float, y1: float, x2: float, y2: float, color: str, *, line_width: float = 1) -> None: ...

    def text(
        self,
        value: str,
        x: float,
        y: float,
        *,
        width: float,
        font: str,
        size: float,
        color: str,
        align: str = "left",
    ) -> None:
        """Draw a single line of text, clipped to ``width``."""

    def paragraph(
        self,
        value: str,
        x: float,
        y: float,
        *,
        width: float,
        font: str,
        size: float,
        color: str,
        leading: float,
        align: str = "left",
    ) -> float:
        """Draw wrapped text and return the height actually used."""

    def image_size(self, data: bytes) -> tuple[int, int] | None:
        """Return the pixel size of an encoded raster image, or ``None`` if unreadable."""

    def image(self, data: bytes, x: float, y: float, width: float, height: float) -> None: ...

    def new_page(self) -> None: ...

    def finish(self) -> bytes: ...


class Block(Protocol):
    """A unit of content placed by :class:`FlowLayout`."""

    def estimate(self, frame: "Frame") -> float:
        """Height the block is expected to need before it is drawn."""

    def draw(self, surface: Surface, top: float, frame: "Frame") -> float:
        """Draw at ``top`` and return the vertical space consumed."""


@dataclass(frozen=True, slots=True)
class Frame:
    """Horizontal extent of the page body."""

    left: float
    width: float

    @property
    def right(self) -> float:
        return self.left + self.width


def estimate_lines(text: str, chars_per_line: int) -> int:
    """Approximate wrapped line count from the text length."""

    return max(1, math.ceil(len(text) / chars_per_line))


PageDecorator = Callable[[Surface, int], None]


class FlowLayout:
    """Places blocks top to bottom and starts a new page when a block does not fit."""

    def __init__(
        self,
        surface: Surface,
        *,
        frame: Frame,
        body_top: float,
        body_bottom: float,
        header: PageDecorator,
        footer: PageDecorator,
    ) -> None:
        if body_bottom <= body_top:
            raise ValueError("body_bottom must be below body_top")
        self.surface = surface
        self.frame = frame
        self.body_top = body_top
        self.body_bottom = body_bottom
        self._header = header
        self._footer = footer
        self.page_number = 1
        self.cursor = body_top
        self._finished = False
        self._header(surface, self.page_number)

    @property
    def remaining(self) -> float:
        return self.body_bottom - self.cursor

    def ensure_space(self, needed: float) -> None:
        if self.cursor + needed > self.body_bottom and self.cursor > self.body_top:
            self.break_page()

    def break_page(self) -> None:
        self._footer(self.surface, self.page_number)
        self.surface.new_page()
        self.page_number += 1
        self._header(self.surface, self.page_number)
        self.cursor = self.body_top

    def append(self, block: Block) -> None:
        self.ensure_space(block.estimate(self.frame))
        self.cursor += block.draw(self.surface, self.cursor, self.frame)

    def extend(self, blocks: list[Block]) -> None:
        for block in blocks:
            self.append(block)

    def skip(self, height: float) -> None:
        self.cursor += height

    def finish(self) -> bytes:
        if self._finished:
            raise RuntimeError("layout already finished")
        self._finished = True
        self._footer(self.surface, self.page_number)
        return self.surface.finish()


__all__ = [
    "Block",
    "FlowLayout",
    "Frame",
    "PageDecorator",
    "Surface",
    "estimate_lines",
]
