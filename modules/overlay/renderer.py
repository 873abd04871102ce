"""Stamp field values onto a rasterised template page.

:func:`render` is the whole export: page 1 of the source PDF becomes a
full-page JPEG background and every non-empty field value is drawn on top of
it at the position configured in the template layout.
"""

from __future__ import annotations

import base64
import io
import logging
from typing import Optional

from reportlab.lib.pagesizes import landscape
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .layout import FONT_NAME, plan_placements
from .models import FieldValues, TemplateLayout, TextPlacement
from .rasterizer import Rasterizer

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
DEFAULT_DATA_URI_FILENAME = "generated.pdf"


class OverlayRenderer:
    """Render template overlays to PDF bytes.

    Instances hold no per-call state; one renderer can serve concurrent
    exports.  The rasterizer is injectable so tests can supply a fake page.
    """

    def __init__(self, *, rasterizer: Rasterizer | None = None) -> None:
        self.rasterizer = rasterizer or Rasterizer()

    # ------------------------------------------------------------------
    def render(self, source: bytes, layout: TemplateLayout, values: FieldValues) -> bytes:
        """Return the filled PDF for ``values`` over page 1 of ``source``."""

        # The background must be fully decoded before anything is drawn.
        background = self.rasterizer.first_page_jpeg(source)
        placements = plan_placements(layout, values)

        page_width, page_height = landscape((layout.page_width, layout.page_height))
        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=(page_width, page_height), invariant=1)
        pdf.setTitle("Filled template")

        pdf.drawImage(
            ImageReader(io.BytesIO(background)),
            0,
            page_height - layout.page_height,
            width=layout.page_width,
            height=layout.page_height,
        )
        pdf.setFillColorRGB(0, 0, 0)
        for placement in placements:
            self._draw_text(pdf, placement, page_height)

        pdf.showPage()
        pdf.save()

        logger.debug(
            "Rendered overlay: %d of %d fields drawn on %sx%s page",
            len({p.field_id for p in placements}),
            len(layout.fields),
            page_width,
            page_height,
        )
        return buffer.getvalue()

    def render_and_encode(self, source: bytes, layout: TemplateLayout, values: FieldValues) -> str:
        """Render and return the base64 payload of the PDF data URI."""

        uri = to_data_uri(self.render(source, layout, values))
        return uri.split(",", 1)[1]

    # ------------------------------------------------------------------
    def _draw_text(self, pdf: canvas.Canvas, placement: TextPlacement, page_height: float) -> None:
        pdf.setFont(FONT_NAME, placement.font_size)
        # Layout coordinates grow downwards; reportlab's grow upwards.
        y = page_height - placement.y
        if placement.align == "center":
            pdf.drawCentredString(placement.x, y, placement.text)
        elif placement.align == "right":
            pdf.drawRightString(placement.x, y, placement.text)
        else:
            pdf.drawString(placement.x, y, placement.text)


def to_data_uri(pdf_bytes: bytes, filename: Optional[str] = None) -> str:
    """Encode ``pdf_bytes`` as a ``data:application/pdf`` URI."""

    encoded = base64.b64encode(pdf_bytes).decode("ascii")
    name = filename or DEFAULT_DATA_URI_FILENAME
    return f"data:{PDF_MIME_TYPE};filename={name};base64,{encoded}"


def render(
    source: bytes,
    layout: TemplateLayout,
    values: FieldValues,
    *,
    rasterizer: Rasterizer | None = None,
) -> bytes:
    return OverlayRenderer(rasterizer=rasterizer).render(source, layout, values)


def render_and_encode(
    source: bytes,
    layout: TemplateLayout,
    values: FieldValues,
    *,
    rasterizer: Rasterizer | None = None,
) -> str:
    return OverlayRenderer(rasterizer=rasterizer).render_and_encode(source, layout, values)


__all__ = [
    "OverlayRenderer",
    "PDF_MIME_TYPE",
    "render",
    "render_and_encode",
    "to_data_uri",
]
