"""ReportLab canvas implementation of the layout ``Surface``."""
from __future__ import annotations

import logging
from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib.colors import HexColor
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph

logger = logging.getLogger(__name__)

_ALIGNMENTS = {"left": TA_LEFT, "center": TA_CENTER, "right": TA_RIGHT, "justify": TA_JUSTIFY}
_BASELINE_RATIO = 0.8


class ReportLabSurface:
    """Draws on an A4 canvas using top-down coordinates."""

    def __init__(self, *, title: str = "", author: str = "", pagesize: tuple[float, float] = A4) -> None:
        self._buffer = BytesIO()
        self._canvas = canvas.Canvas(self._buffer, pagesize=pagesize)
        if title:
            self._canvas.setTitle(title)
        if author:
            self._canvas.setAuthor(author)
        self.page_width, self.page_height = pagesize

    def _flip(self, y: float, height: float = 0) -> float:
        return self.page_height - y - height

    def fill_rect(self, x: float, y: float, width: float, height: float, color: str, *, radius: float = 0) -> None:
        c = self._canvas
        c.saveState()
        c.setFillColor(HexColor(color))
        if radius > 0:
            c.roundRect(x, self._flip(y, height), width, height, radius, fill=1, stroke=0)
        else:
            c.rect(x, self._flip(y, height), width, height, fill=1, stroke=0)
        c.restoreState()

    def stroke_rect(
        self, x: float, y: float, width: float, height: float, color: str, *, line_width: float = 1, radius: float = 0
    ) -> None:
        c = self._canvas
        c.saveState()
        c.setStrokeColor(HexColor(color))
        c.setLineWidth(line_width)
        if radius > 0:
            c.roundRect(x, self._flip(y, height), width, height, radius, fill=0, stroke=1)
        else:
            c.rect(x, self._flip(y, height), width, height, fill=0, stroke=1)
        c.restoreState()

    def line(self, x1: float, y1: float, x2: float, y2: float, color: str, *, line_width: float = 1) -> None:
        c = self._canvas
        c.saveState()
        c.setStrokeColor(HexColor(color))
        c.setLineWidth(line_width)
        c.line(x1, self._flip(y1), x2, self._flip(y2))
        c.restoreState()

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
        while stringWidth(value, font, size) > width and len(value) > 3:
            value = value[:-4] + "..."
        c = self._canvas
        c.saveState()
        c.setFont(font, size)
        c.setFillColor(HexColor(color))
        baseline = self._flip(y + size * _BASELINE_RATIO)
        if align == "center":
            c.drawCentredString(x + width / 2, baseline, value)
        elif align == "right":
            c.drawRightString(x + width, baseline, value)
        else:
            c.drawString(x, baseline, value)
        c.restoreState()

    def _paragraph(self, value: str, *, font: str, size: float, color: str, leading: float, align: str) -> Paragraph:
        style = ParagraphStyle(
            name=f"{font}-{size}-{align}",
            fontName=font,
            fontSize=size,
            leading=leading,
            textColor=HexColor(color),
            alignment=_ALIGNMENTS.get(align, TA_LEFT),
        )
        return Paragraph(escape(value), style)

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
        flowable = self._paragraph(value, font=font, size=size, color=color, leading=leading, align=align)
        _, height = flowable.wrap(width, self.page_height)
        flowable.drawOn(self._canvas, x, self._flip(y, height))
        return height

    def image_size(self, data: bytes) -> tuple[int, int] | None:
        try:
            return ImageReader(BytesIO(data)).getSize()
        except Exception:  # PIL and ReportLab raise a variety of types for corrupt images
            logger.warning("embedded image could not be decoded (%d bytes)", len(data))
            return None

    def image(self, data: bytes, x: float, y: float, width: float, height: float) -> None:
        self._canvas.drawImage(
            ImageReader(BytesIO(data)),
            x,
            self._flip(y, height),
            width=width,
            height=height,
            preserveAspectRatio=True,
            mask="auto",
        )

    def new_page(self) -> None:
        self._canvas.showPage()

    def finish(self) -> bytes:
        self._canvas.save()
        return self._buffer.getvalue()


__all__ = ["ReportLabSurface"]
