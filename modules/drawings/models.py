"""Datamodel definitions for drawing and template records."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping, Optional


@dataclass(slots=True)
class TemplateRecord:
    id: str
    template_name: str
    category: Optional[str] = None
    template_data: Optional[dict[str, Any]] = None
    visual_document: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "TemplateRecord":
        return cls(
            id=str(row["id"]),
            template_name=row.get("template_name") or "",
            category=row.get("category"),
            template_data=row.get("template_data"),
            visual_document=row.get("visual_document"),
            description=row.get("description"),
        )


@dataclass(slots=True)
class DrawingRecord:
    id: Optional[str] = None
    template_id: Optional[str] = None
    job_number: Optional[str] = None
    work_order: Optional[str] = None
    drawing_number: Optional[str] = None
    name: Optional[str] = None
    customer: Optional[str] = None
    customer_source: Optional[str] = None
    quantity: Optional[int] = None
    dl: Optional[str] = None
    checked_by: Optional[str] = None
    prog_by: Optional[str] = None
    material: Optional[str] = None
    thk: Optional[str] = None
    additional_data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "DrawingRecord":
        known = {f.name for f in fields(cls)}
        data = {key: value for key, value in row.items() if key in known}
        if data.get("id") is not None:
            data["id"] = str(data["id"])
        if data.get("template_id") is not None:
            data["template_id"] = str(data["template_id"])
        data["additional_data"] = dict(data.get("additional_data") or {})
        return cls(**data)


# Drawing columns a template field may bind to through ``targetField``.
BINDABLE_ATTRIBUTES: frozenset[str] = frozenset(
    f.name for f in fields(DrawingRecord) if f.name not in {"id", "template_id", "additional_data"}
)


__all__ = ["BINDABLE_ATTRIBUTES", "DrawingRecord", "TemplateRecord"]
