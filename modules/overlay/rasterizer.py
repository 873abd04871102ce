"""PDF page rasterisation helpers."""

from __future__ import annotations

import io
import logging
import threading
from dataclasses import dataclass
from typing import Protocol

import pypdfium2 as pdfium
from PIL import Image

from .errors import DocumentDecodeError, EmptyDocumentError, RenderSurfaceError

logger = logging.getLogger(__name__)

DEFAULT_SCALE = 2.0
MIN_SCALE = 2.0
DEFAULT_JPEG_QUALITY = 95

# pdfium is not thread-safe; every call into it goes through this lock.
_PDFIUM_LOCK = threading.Lock()


class RasterizeEngine(Protocol):
    """Protocol describing a rasterisation backend."""

    def __call__(self, pdf_bytes: bytes, scale: float) -> Image.Image:
        ...


def pdfium_first_page(pdf_bytes: bytes, scale: float) -> Image.Image:
    """Render page 1 of ``pdf_bytes`` with pypdfium2.

    The returned image is detached from pdfium; document, page and bitmap are
    released before returning, on success and on failure.
    """

    with _PDFIUM_LOCK:
        try:
            document = pdfium.PdfDocument(pdf_bytes)
        except pdfium.PdfiumError as exc:
            raise DocumentDecodeError(f"Source document could not be parsed: {exc}") from exc

        try:
            if len(document) == 0:
                raise EmptyDocumentError("Source document has no pages")
            page = document[0]
            try:
                try:
                    bitmap = page.render(scale=scale)
                except pdfium.PdfiumError as exc:
                    raise RenderSurfaceError(f"Could not render page 1: {exc}") from exc
                try:
                    # copy() so the image no longer borrows the bitmap's buffer
                    image = bitmap.to_pil().copy()
                finally:
                    bitmap.close()
            finally:
                page.close()
        finally:
            document.close()
    return image


@dataclass(slots=True)
class Rasterizer:
    """Dependency injectable first-page rasteriser.

    ``scale`` is the supersampling factor applied to the page's point size.
    It must be at least 2 so that the background stays sharp once it is
    stretched back to full page size under the text overlay.
    """

    engine: RasterizeEngine | None = None
    scale: float = DEFAULT_SCALE
    jpeg_quality: int = DEFAULT_JPEG_QUALITY

    def __post_init__(self) -> None:
        if self.scale < MIN_SCALE:
            raise ValueError(f"Rasterisation scale must be at least {MIN_SCALE}, got {self.scale}")
        if not 1 <= self.jpeg_quality <= 100:
            raise ValueError(f"JPEG quality must be between 1 and 100, got {self.jpeg_quality}")

    def rasterize_first_page(self, pdf_bytes: bytes) -> Image.Image:
        """Return page 1 of ``pdf_bytes`` as an image."""

        if not pdf_bytes:
            raise DocumentDecodeError("Source document is empty")
        engine = self.engine or pdfium_first_page
        image = engine(pdf_bytes, self.scale)
        logger.debug("Rasterised page 1 at scale %s to %sx%s px", self.scale, image.width, image.height)
        return image

    def first_page_jpeg(self, pdf_bytes: bytes) -> bytes:
        """Rasterise page 1 and return it JPEG encoded."""

        image = self.rasterize_first_page(pdf_bytes)
        try:
            return encode_jpeg(image, self.jpeg_quality)
        finally:
            image.close()


def encode_jpeg(image: Image.Image, quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
    """Encode ``image`` as a baseline JPEG."""

    buffer = io.BytesIO()
    try:
        rgb = image if image.mode == "RGB" else image.convert("RGB")
        try:
            rgb.save(buffer, format="JPEG", quality=quality)
        finally:
            if rgb is not image:
                rgb.close()
    except (OSError, ValueError) as exc:
        raise RenderSurfaceError(f"Could not encode page image: {exc}") from exc
    return buffer.getvalue()


__all__ = [
    "DEFAULT_JPEG_QUALITY",
    "DEFAULT_SCALE",
    "MIN_SCALE",
    "RasterizeEngine",
    "Rasterizer",
    "encode_jpeg",
    "pdfium_first_page",
]
