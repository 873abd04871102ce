"""Datamodels for template layouts used by the overlay renderer.

Layouts arrive as JSON in a template's ``template_data`` column and are
validated once by :mod:`modules.overlay.validators`.  Past that boundary the
renderer only ever sees the frozen dataclasses defined here.

Field kinds are modelled as two concrete classes rather than a ``type`` string
so the renderer can dispatch on the variant:

* :class:`SingleLineField` for ``text``, ``number``, ``date`` and any other
  type that draws one line vertically centred in its box.
* :class:`TextAreaField` for ``textarea`` fields, which wrap inside the box.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Mapping, Optional, Union

TextAlign = Literal["left", "center", "right"]
FieldValue = Union[str, int, float, None]
FieldValues = Mapping[str, FieldValue]

DEFAULT_FONT_SIZE = 12
TEXTAREA_TYPE = "textarea"


@dataclass(frozen=True, slots=True)
class FieldPosition:
    """Bounding box of a field in page points, origin top-left."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True, slots=True)
class SingleLineField:
    id: str
    type: str
    label: str
    position: FieldPosition
    text_position: TextAlign = "left"
    font_size: float = DEFAULT_FONT_SIZE
    target_field: Optional[str] = None


@dataclass(frozen=True, slots=True)
class TextAreaField:
    id: str
    label: str
    position: FieldPosition
    text_position: TextAlign = "left"
    font_size: float = DEFAULT_FONT_SIZE
    target_field: Optional[str] = None

    @property
    def type(self) -> str:
        return TEXTAREA_TYPE


FieldDefinition = Union[SingleLineField, TextAreaField]


@dataclass(frozen=True, slots=True)
class TemplateLayout:
    """All placeable fields of one template plus the output canvas size."""

    fields: tuple[FieldDefinition, ...]
    page_width: float
    page_height: float

    def field_ids(self) -> list[str]:
        return [field.id for field in self.fields]

    def get(self, field_id: str) -> FieldDefinition | None:
        for field in self.fields:
            if field.id == field_id:
                return field
        return None


@dataclass(frozen=True, slots=True)
class TextPlacement:
    """A single run of text the writer will draw.

    ``x``/``y`` are the anchor and baseline in top-left page coordinates;
    ``align`` says which edge of the text ``x`` refers to.
    """

    field_id: str
    text: str
    x: float
    y: float
    font_size: float
    align: TextAlign


__all__ = [
    "DEFAULT_FONT_SIZE",
    "TEXTAREA_TYPE",
    "FieldDefinition",
    "FieldPosition",
    "FieldValue",
    "FieldValues",
    "SingleLineField",
    "TemplateLayout",
    "TextAlign",
    "TextAreaField",
    "TextPlacement",
]
