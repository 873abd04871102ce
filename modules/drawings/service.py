"""Drawing export: the caller side of the overlay renderer.

The service acquires the template document, resolves field values for a
drawing and hands both to :class:`~modules.overlay.renderer.OverlayRenderer`.
Output goes either to the caller as PDF bytes (file download) or, base64
encoded, to the workflow-automation webhook.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from modules.overlay import OverlayRenderer, Rasterizer, TemplateLayout, load_layout
from modules.overlay.renderer import PDF_MIME_TYPE
from utils.app_settings import AppSettings, load_settings

from .bindings import render_values
from .clients import DocumentFetcher, HttpClient, WebhookClient
from .models import DrawingRecord, TemplateRecord

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9._ -]+")


@dataclass(slots=True)
class ExportResult:
    filename: str
    content: bytes
    mime_type: str = PDF_MIME_TYPE


def safe_filename(name: str) -> str:
    cleaned = _UNSAFE_FILENAME.sub("_", name).strip(" ._")
    return cleaned


class DrawingExportService:
    """Service facade used by the HTTP API and command line tools."""

    def __init__(
        self,
        *,
        settings: AppSettings | None = None,
        renderer: OverlayRenderer | None = None,
        http: HttpClient | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.renderer = renderer or OverlayRenderer(
            rasterizer=Rasterizer(scale=self.settings.raster_scale, jpeg_quality=self.settings.jpeg_quality)
        )
        self.http = http or HttpClient(timeout=self.settings.http_timeout)
        self.fetcher = DocumentFetcher(self.http)
        self.webhook = WebhookClient(self.http, self.settings.webhook_url)

    # ------------------------------------------------------------------
    def resolve_filename(self, filename: Optional[str] = None, drawing: DrawingRecord | None = None) -> str:
        """Caller filename, else ``<drawing_number>.pdf``, else the default."""

        for candidate in (filename, drawing.drawing_number if drawing else None):
            if candidate and safe_filename(candidate):
                name = safe_filename(candidate)
                return name if name.lower().endswith(".pdf") else f"{name}.pdf"
        return self.settings.default_filename

    def values_for(
        self,
        layout: TemplateLayout,
        drawing: DrawingRecord | None,
        field_values: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        if drawing is None:
            return dict(field_values or {})
        return render_values(layout, drawing, field_values)

    # ------------------------------------------------------------------
    def export_pdf(
        self,
        pdf_url: str,
        template_data: Mapping[str, Any] | str | None,
        field_values: Optional[Mapping[str, Any]] = None,
        *,
        drawing: DrawingRecord | None = None,
        filename: Optional[str] = None,
    ) -> ExportResult:
        """Fetch, fill and return the PDF for download."""

        layout = load_layout(template_data)
        values = self.values_for(layout, drawing, field_values)
        source = self.fetcher.fetch(pdf_url)
        content = self.renderer.render(source, layout, values)
        name = self.resolve_filename(filename, drawing)
        logger.info("Exported %s (%d bytes, %d values)", name, len(content), len(values))
        return ExportResult(filename=name, content=content)

    def export_base64(
        self,
        pdf_url: str,
        template_data: Mapping[str, Any] | str | None,
        field_values: Optional[Mapping[str, Any]] = None,
        *,
        drawing: DrawingRecord | None = None,
        filename: Optional[str] = None,
    ) -> tuple[str, str]:
        """Like :meth:`export_pdf` but return ``(filename, base64 payload)``."""

        layout = load_layout(template_data)
        values = self.values_for(layout, drawing, field_values)
        source = self.fetcher.fetch(pdf_url)
        data = self.renderer.render_and_encode(source, layout, values)
        return self.resolve_filename(filename, drawing), data

    def export_drawing(self, template: TemplateRecord, drawing: DrawingRecord, pdf_url: str) -> ExportResult:
        """Export ``drawing`` over its ``template`` reference document."""

        return self.export_pdf(pdf_url, template.template_data, drawing=drawing)

    def send_to_webhook(
        self,
        pdf_url: str,
        template_data: Mapping[str, Any] | str | None,
        field_values: Optional[Mapping[str, Any]] = None,
        *,
        drawing: DrawingRecord | None = None,
        filename: Optional[str] = None,
        template: TemplateRecord | None = None,
    ) -> tuple[str, int]:
        """Render and post the PDF to the webhook; returns ``(filename, HTTP status)``."""

        name, data = self.export_base64(
            pdf_url, template_data, field_values, drawing=drawing, filename=filename
        )
        payload: dict[str, Any] = {
            "filename": name,
            "mimeType": PDF_MIME_TYPE,
            "data": data,
        }
        if drawing is not None:
            payload["drawing"] = {
                "id": drawing.id,
                "drawing_number": drawing.drawing_number,
                "job_number": drawing.job_number,
                "customer": drawing.customer,
            }
        if template is not None:
            payload["template"] = {"id": template.id, "template_name": template.template_name}
        status = self.webhook.send(payload)
        return name, status

    def close(self) -> None:
        self.http.close()


__all__ = ["DrawingExportService", "ExportResult", "safe_filename"]
