"""Pydantic schemas for the ``template_data`` JSON stored with each template."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import LayoutValidationError
from .models import (
    DEFAULT_FONT_SIZE,
    TEXTAREA_TYPE,
    FieldDefinition,
    FieldPosition,
    SingleLineField,
    TemplateLayout,
    TextAlign,
    TextAreaField,
)

logger = logging.getLogger(__name__)

TEXT_POSITIONS: tuple[TextAlign, ...] = ("left", "center", "right")


class FieldPositionPayload(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    x: float
    y: float
    width: float = Field(ge=0)
    height: float = Field(ge=0)


class FieldPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", allow_inf_nan=False)

    id: str
    type: str = "text"
    label: str = ""
    text_position: Optional[str] = Field(default=None, alias="textPosition")
    font_size: Optional[float] = Field(default=None, alias="fontSize")
    target_field: Optional[str] = Field(default=None, alias="targetField")
    # Older templates were saved with this misspelled key.
    target_field_legacy: Optional[str] = Field(default=None, alias="targetFieldf")
    position: FieldPositionPayload

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("id")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Field id is required")
        return value.strip()

    @field_validator("font_size")
    @classmethod
    def positive_font(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value < 0:
            raise ValueError("fontSize must not be negative")
        return value

    def resolved_text_position(self) -> TextAlign:
        raw = (self.text_position or "left").strip().lower()
        if raw in TEXT_POSITIONS:
            return raw  # type: ignore[return-value]
        logger.warning("Unknown textPosition %r on field %s; using left", self.text_position, self.id)
        return "left"

    def to_definition(self) -> FieldDefinition:
        position = FieldPosition(
            x=self.position.x,
            y=self.position.y,
            width=self.position.width,
            height=self.position.height,
        )
        # zero means unset
        font_size = self.font_size or DEFAULT_FONT_SIZE
        target = self.target_field or self.target_field_legacy or None
        if self.type == TEXTAREA_TYPE:
            return TextAreaField(
                id=self.id,
                label=self.label,
                position=position,
                text_position=self.resolved_text_position(),
                font_size=font_size,
                target_field=target,
            )
        return SingleLineField(
            id=self.id,
            type=self.type,
            label=self.label,
            position=position,
            text_position=self.resolved_text_position(),
            font_size=font_size,
            target_field=target,
        )


class TemplateDataPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", allow_inf_nan=False)

    field_list: list[FieldPayload] = Field(default_factory=list, alias="fields")
    page_width: float = Field(alias="pageWidth", gt=0)
    page_height: float = Field(alias="pageHeight", gt=0)

    @model_validator(mode="after")
    def unique_ids(self) -> "TemplateDataPayload":
        seen: set[str] = set()
        duplicates: list[str] = []
        for field in self.field_list:
            if field.id in seen:
                duplicates.append(field.id)
            seen.add(field.id)
        if duplicates:
            raise ValueError(f"Duplicate field ids: {', '.join(sorted(set(duplicates)))}")
        return self

    def to_layout(self) -> TemplateLayout:
        return TemplateLayout(
            fields=tuple(field.to_definition() for field in self.field_list),
            page_width=self.page_width,
            page_height=self.page_height,
        )


def _format_errors(exc: ValidationError) -> list[str]:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        messages.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return messages


def load_layout(template_data: Mapping[str, Any] | str | bytes | None) -> TemplateLayout:
    """Validate persisted ``template_data`` and return a :class:`TemplateLayout`.

    ``template_data`` may be the decoded JSON object or its raw text.  Any
    problem is reported as :class:`LayoutValidationError` listing every
    offending location.
    """

    if template_data is None:
        raise LayoutValidationError("Template has no layout data")
    if isinstance(template_data, (str, bytes)):
        try:
            template_data = json.loads(template_data)
        except ValueError as exc:
            raise LayoutValidationError(f"Template layout is not valid JSON: {exc}") from exc
    if not isinstance(template_data, Mapping):
        raise LayoutValidationError("Template layout must be a JSON object")

    try:
        payload = TemplateDataPayload.model_validate(dict(template_data))
    except ValidationError as exc:
        errors = _format_errors(exc)
        raise LayoutValidationError("Invalid template layout: " + "; ".join(errors), errors=errors) from exc

    layout = payload.to_layout()
    logger.debug(
        "Loaded template layout with %d fields (%sx%s)",
        len(layout.fields),
        layout.page_width,
        layout.page_height,
    )
    return layout


__all__ = [
    "FieldPayload",
    "FieldPositionPayload",
    "TemplateDataPayload",
    "load_layout",
]
