from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import Callable

import pytest
from reportlab.pdfgen import canvas

ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def build_pdf(pages: int = 1, size: tuple[float, float] = (792, 612), *, dark_pages: tuple[int, ...] = ()) -> bytes:
    """Build a small PDF; pages listed in ``dark_pages`` (1-based) are filled black."""

    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=size, invariant=1)
    for number in range(1, pages + 1):
        if number in dark_pages:
            pdf.setFillColorRGB(0, 0, 0)
            pdf.rect(0, 0, size[0], size[1], stroke=0, fill=1)
        else:
            pdf.setStrokeColorRGB(0.2, 0.2, 0.2)
            pdf.rect(36, 36, size[0] - 72, size[1] - 72, stroke=1, fill=0)
            pdf.setFont("Helvetica", 10)
            pdf.drawString(48, size[1] - 60, f"Template page {number}")
        pdf.showPage()
    pdf.save()
    return buffer.getvalue()


@pytest.fixture
def make_pdf() -> Callable[..., bytes]:
    return build_pdf


@pytest.fixture
def template_pdf() -> bytes:
    return build_pdf()
