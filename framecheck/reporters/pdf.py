"""PDF report — lays a TestVerdict out on an A4 page and writes it with ReportLab.

``render()`` is the pure part: it fixes every field's position (mm from the
top-left corner) and wraps text with the same font metrics the sink uses,
so two renders of one verdict compare equal apart from ``generated_at``.
``PdfSink`` only draws what the document says.
"""

import io
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import BinaryIO, Optional, Tuple, Union

from reportlab.lib import colors
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from framecheck.core.models import TestVerdict
from framecheck.reporters.fields import (
    missing_summary, status_label, format_tested_at,
)

PAGE_W, PAGE_H = 210.0, 297.0   # A4, mm
LEFT = 15.0
TEXT_W = 180.0
LINE_FACTOR = 1.15               # line height / font size

DISCLAIMER = (
    "This report and the information contained herein are the proprietary "
    "property of {brand} and are intended solely for the internal use of the "
    "designated client. This document may contain confidential or sensitive "
    "information and is shared with the client for review and informational "
    "purposes only. It may not be reproduced, distributed, or disclosed to any "
    "third party, in whole or in part, without the prior written consent of "
    "{brand}. All rights reserved © {year}."
)


# ── Document model ──────────────────────────────────────────────

@dataclass(frozen=True)
class TextBlock:
    lines: Tuple[str, ...]
    x: float                       # mm
    y: float                       # mm, baseline of the first line
    font: str = "Helvetica-Bold"
    size: float = 12
    align: str = "left"            # "left" | "right"
    alpha: float = 1.0
    flows: bool = False            # may continue on later pages

    @property
    def leading(self) -> float:
        """Distance between baselines, in mm."""
        return self.size * LINE_FACTOR / mm


@dataclass(frozen=True)
class ImageBlock:
    path: Optional[str]
    x: float
    y: float
    width: float
    height: float
    alt_text: str = ""


@dataclass(frozen=True)
class ReportDocument:
    title: str
    blocks: Tuple[TextBlock, ...]
    watermark: ImageBlock
    is_vulnerable: Optional[bool]
    generated_at: datetime = field(compare=False)
    background: str = "#4d0c26"
    text_color: str = "#f3cda2"
    filename: str = "clickjacking_report.pdf"


# ── Layout ──────────────────────────────────────────────────────

def wrap(text: str, font: str, size: float, width_mm: float = TEXT_W) -> Tuple[str, ...]:
    """Split *text* into lines no wider than *width_mm*; "" gives no lines."""
    if not text:
        return ()
    max_w = width_mm * mm
    out = []
    for line in text.splitlines():
        if stringWidth(line, font, size) <= max_w:
            out.append(line)
        else:
            out.extend(simpleSplit(line, font, size, max_w))
    return tuple(out)


def render(verdict: TestVerdict, brand: str = "Quasar CyberTech",
           watermark: Optional[str] = None,
           now: Optional[datetime] = None) -> ReportDocument:
    """Build a fresh ReportDocument for *verdict*. Never raises on empty fields."""
    now = now or datetime.now(timezone.utc)
    title = f"{brand} – Clickjacking Report"

    reason = wrap(str(verdict.rationale or ""), "Courier", 12)
    raw_y = 100 + len(reason) * 6
    raw = wrap(verdict.raw_headers or "", "Courier", 12)

    disclaimer = wrap(DISCLAIMER.format(brand=brand, year=now.year),
                      "Times-Roman", 8)

    blocks = (
        TextBlock(("Confidential",), 195, 10, size=10, align="right"),
        TextBlock((title,), LEFT, 20, size=22),
        TextBlock((f"Site Tested: {verdict.target_url}",), LEFT, 35),
        TextBlock((f"IP Address: {verdict.source_ip}",), LEFT, 45),
        TextBlock((f"Test Time: {format_tested_at(verdict)}",), LEFT, 55),
        TextBlock((f"Missing Headers: {missing_summary(verdict)}",), LEFT, 65),
        TextBlock((f"Vulnerability Status: {status_label(verdict)}",), LEFT, 75),
        TextBlock(("Reason:",), LEFT, 85),
        TextBlock(reason, LEFT, 93, font="Courier"),
        TextBlock(("Raw Headers:",), LEFT, raw_y, font="Courier"),
        TextBlock(disclaimer, LEFT, 295 - len(disclaimer) * 4,
                  font="Times-Roman", size=8, alpha=0.5),
        TextBlock(raw, LEFT, raw_y + 8, font="Courier", flows=True),
    )

    size = 30.0
    mark = ImageBlock(path=watermark, x=(PAGE_W - size) / 2, y=250,
                      width=size, height=size, alt_text=brand)

    return ReportDocument(title=title, blocks=blocks, watermark=mark,
                          is_vulnerable=verdict.is_vulnerable,
                          generated_at=now)


# ── Sink ────────────────────────────────────────────────────────

class PdfSink:
    """
    Draws a ReportDocument with the ReportLab canvas.

    ``invariant=True`` keeps ReportLab's own output byte-stable (no random
    document id, fixed creation date).
    """

    def __init__(self, invariant: bool = False, top_margin: float = 15.0,
                 bottom_margin: float = 5.0):
        self.invariant = invariant
        self.top_margin = top_margin
        self.bottom_margin = bottom_margin

    def write(self, doc: ReportDocument, target: Union[str, BinaryIO, None] = None):
        target = target or doc.filename
        c = canvas.Canvas(target, pagesize=(PAGE_W * mm, PAGE_H * mm),
                          invariant=int(self.invariant))
        c.setTitle(doc.title)
        c.setAuthor(doc.watermark.alt_text)

        self._page(c, doc)
        for block in doc.blocks:
            if not block.flows:
                self._text(c, doc, block)
        self._image(c, doc, doc.watermark)
        for block in doc.blocks:
            if block.flows:
                self._text(c, doc, block)

        c.showPage()
        c.save()
        return target

    def to_bytes(self, doc: ReportDocument) -> bytes:
        buf = io.BytesIO()
        self.write(doc, buf)
        return buf.getvalue()

    # ── drawing helpers ─────────────────────────────────────────

    @staticmethod
    def _page(c, doc: ReportDocument):
        c.setFillColor(colors.HexColor(doc.background))
        c.rect(0, 0, PAGE_W * mm, PAGE_H * mm, fill=1, stroke=0)

    def _text(self, c, doc: ReportDocument, block: TextBlock):
        c.saveState()
        c.setFont(block.font, block.size)
        c.setFillColor(colors.HexColor(doc.text_color))
        c.setFillAlpha(block.alpha)

        y = block.y
        for line in block.lines:
            if block.flows and y > PAGE_H - self.bottom_margin:
                c.restoreState()
                c.showPage()
                self._page(c, doc)
                c.saveState()
                c.setFont(block.font, block.size)
                c.setFillColor(colors.HexColor(doc.text_color))
                c.setFillAlpha(block.alpha)
                y = self.top_margin
            baseline = (PAGE_H - y) * mm
            if block.align == "right":
                c.drawRightString(block.x * mm, baseline, line)
            else:
                c.drawString(block.x * mm, baseline, line)
            y += block.leading
        c.restoreState()

    @staticmethod
    def _image(c, doc: ReportDocument, img: ImageBlock):
        x, y = img.x * mm, (PAGE_H - img.y - img.height) * mm
        w, h = img.width * mm, img.height * mm
        if img.path and os.path.isfile(img.path):
            c.drawImage(img.path, x, y, width=w, height=h, mask="auto",
                        preserveAspectRatio=True)
            return
        # No asset: a framed brand mark in its place.
        c.saveState()
        c.setStrokeColor(colors.HexColor(doc.text_color))
        c.setFillColor(colors.HexColor(doc.text_color))
        c.rect(x, y, w, h, fill=0, stroke=1)
        c.setFont("Helvetica-Bold", 7)
        c.drawCentredString(x + w / 2, y + h / 2 - 2, img.alt_text)
        c.restoreState()
