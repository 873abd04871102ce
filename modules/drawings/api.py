"""FastAPI routes for exporting filled drawing PDFs."""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from modules.overlay import (
    DocumentDecodeError,
    EmptyDocumentError,
    LayoutValidationError,
    OverlayError,
)

from .clients import DocumentFetchError, WebhookDeliveryError
from .models import DrawingRecord
from .service import DrawingExportService
from .validators import ExportBase64Response, ExportRequest, WebhookSendResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/drawings", tags=["drawings"])


@lru_cache(maxsize=1)
def get_service() -> DrawingExportService:
    return DrawingExportService()


def close_service() -> None:
    """Close the shared service's HTTP client, if one was created."""
    if get_service.cache_info().currsize:
        get_service().close()
        get_service.cache_clear()


def _error(status_code: int, code: str, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": code, "message": str(exc)})


def _failure_response(exc: Exception) -> JSONResponse:
    if isinstance(exc, LayoutValidationError):
        return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, "invalid_layout", exc)
    if isinstance(exc, DocumentFetchError):
        return _error(status.HTTP_502_BAD_GATEWAY, "document_unavailable", exc)
    if isinstance(exc, (DocumentDecodeError, EmptyDocumentError)):
        return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, "invalid_document", exc)
    if isinstance(exc, WebhookDeliveryError):
        return _error(status.HTTP_502_BAD_GATEWAY, "webhook_failed", exc)
    logger.error("Drawing export failed: %s", exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "render_failed", exc)


_HANDLED = (LayoutValidationError, DocumentFetchError, OverlayError, WebhookDeliveryError)


def _drawing(payload: ExportRequest) -> DrawingRecord | None:
    return payload.drawing.to_record() if payload.drawing is not None else None


@router.post("/export", response_class=Response)
def export_pdf(payload: ExportRequest, service: DrawingExportService = Depends(get_service)) -> Response:
    try:
        result = service.export_pdf(
            payload.pdf_url,
            payload.template_data,
            payload.field_values,
            drawing=_drawing(payload),
            filename=payload.filename,
        )
    except _HANDLED as exc:
        return _failure_response(exc)
    return Response(
        content=result.content,
        media_type=result.mime_type,
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )


@router.post("/export/base64", response_model=ExportBase64Response)
def export_base64(payload: ExportRequest, service: DrawingExportService = Depends(get_service)) -> Response:
    try:
        filename, data = service.export_base64(
            payload.pdf_url,
            payload.template_data,
            payload.field_values,
            drawing=_drawing(payload),
            filename=payload.filename,
        )
    except _HANDLED as exc:
        return _failure_response(exc)
    return JSONResponse(content=ExportBase64Response(filename=filename, data=data).model_dump())


@router.post("/send", response_model=WebhookSendResponse)
def send_to_webhook(payload: ExportRequest, service: DrawingExportService = Depends(get_service)) -> Response:
    try:
        filename, status_code = service.send_to_webhook(
            payload.pdf_url,
            payload.template_data,
            payload.field_values,
            drawing=_drawing(payload),
            filename=payload.filename,
        )
    except _HANDLED as exc:
        return _failure_response(exc)
    return JSONResponse(content=WebhookSendResponse(filename=filename, status_code=status_code).model_dump())


__all__ = ["router", "close_service", "get_service"]
