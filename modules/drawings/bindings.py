from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from modules.overlay.models import TemplateLayout

from .models import BINDABLE_ATTRIBUTES, DrawingRecord


def _lookup(drawing: DrawingRecord, key: str) -> Any:
    if key in BINDABLE_ATTRIBUTES:
        return getattr(drawing, key)
    return drawing.additional_data.get(key)


def render_values(
    layout: TemplateLayout,
    drawing: DrawingRecord,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Resolve the value of every layout field for ``drawing``.

    A field bound with ``targetField`` reads that drawing column (or, for
    names that are not columns, the matching ``additional_data`` entry).
    Unbound fields are looked up the same way by their own id.  ``overrides``
    keyed by field id win over both.
    """

    out: Dict[str, Any] = {}
    for field in layout.fields:
        key = field.target_field or field.id
        value = _lookup(drawing, key)
        if value is not None:
            out[field.id] = value
    for field_id, value in (overrides or {}).items():
        out[field_id] = value
    return out


__all__ = ["render_values"]
