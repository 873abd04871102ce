"""Pydantic schemas for drawing forms and export REST payloads."""

from __future__ import annotations

import json
import math
import re
from typing import Any, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from .models import DrawingRecord

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

TEXT_COLUMNS = (
    "drawing_id",
    "job_number",
    "work_order",
    "drawing_number",
    "name",
    "customer",
    "customer_source",
    "dl",
    "checked_by",
    "prog_by",
    "material",
    "thk",
)


class DrawingFormError(ValueError):
    """Raised when a submitted drawing form cannot be accepted."""


class DrawingPayload(BaseModel):
    """Drawing columns as posted by a client, normalised for binding."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    template_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("templateId", "template_id"))
    drawing_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("drawingId", "drawing_id", "id"))
    job_number: Optional[str] = None
    work_order: Optional[str] = None
    drawing_number: Optional[str] = None
    name: Optional[str] = None
    customer: Optional[str] = None
    customer_source: Optional[str] = None
    quantity: int = 0
    dl: Optional[str] = None
    checked_by: Optional[str] = None
    prog_by: Optional[str] = None
    material: Optional[str] = None
    thk: Optional[str] = None
    additional_data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("template_id", mode="before")
    @classmethod
    def template_text(cls, value: Any) -> Optional[str]:
        if value is None or not str(value).strip():
            return None
        return str(value).strip()

    @field_validator(*TEXT_COLUMNS, mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("quantity", mode="before")
    @classmethod
    def parse_quantity(cls, value: Any) -> int:
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return int(value) if math.isfinite(value) else 0
        match = _LEADING_INT.match(str(value or ""))
        return int(match.group(1)) if match else 0

    @field_validator("additional_data", mode="before")
    @classmethod
    def parse_additional(cls, value: Any) -> dict[str, Any]:
        if isinstance(value, Mapping):
            return dict(value)
        if not value:
            return {}
        try:
            parsed = json.loads(value)
        except (TypeError, ValueError):
            return {}
        return parsed if isinstance(parsed, dict) else {}

    def to_record(self) -> DrawingRecord:
        return DrawingRecord(
            id=self.drawing_id,
            template_id=self.template_id,
            job_number=self.job_number,
            work_order=self.work_order,
            drawing_number=self.drawing_number,
            name=self.name,
            customer=self.customer,
            customer_source=self.customer_source,
            quantity=self.quantity,
            dl=self.dl,
            checked_by=self.checked_by,
            prog_by=self.prog_by,
            material=self.material,
            thk=self.thk,
            additional_data=dict(self.additional_data),
        )


class DrawingForm(DrawingPayload):
    template_id: str = Field(default="", validation_alias=AliasChoices("templateId", "template_id"), validate_default=True)

    @field_validator("template_id", mode="before")
    @classmethod
    def template_text(cls, value: Any) -> str:
        if value is None or not str(value).strip():
            raise ValueError("Template is required")
        return str(value).strip()


def parse_drawing_form(form: Mapping[str, Any]) -> DrawingForm:
    """Validate submitted drawing form data.

    Blank text inputs become ``None``, an unparseable quantity becomes ``0``
    and malformed ``additional_data`` JSON becomes an empty object.  Only a
    missing template is rejected.
    """

    try:
        return DrawingForm.model_validate(dict(form))
    except ValidationError as exc:
        messages = []
        for err in exc.errors():
            msg = str(err.get("msg", ""))
            messages.append(msg.removeprefix("Value error, "))
        raise DrawingFormError("; ".join(messages)) from exc


FieldValueIn = Union[str, int, float, None]


class ExportRequest(BaseModel):
    pdf_url: str
    template_data: dict[str, Any]
    field_values: dict[str, FieldValueIn] = Field(default_factory=dict)
    drawing: Optional[DrawingPayload] = None
    filename: Optional[str] = None

    @field_validator("pdf_url")
    @classmethod
    def url_required(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("pdf_url is required")
        return value.strip()


class ExportBase64Response(BaseModel):
    filename: str
    mime_type: str = "application/pdf"
    data: str


class WebhookSendResponse(BaseModel):
    filename: str
    status_code: int


__all__ = [
    "DrawingForm",
    "DrawingFormError",
    "DrawingPayload",
    "ExportBase64Response",
    "ExportRequest",
    "WebhookSendResponse",
    "parse_drawing_form",
]
