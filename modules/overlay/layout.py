"""Placement math for field overlays.

Everything in this module is pure: given a layout and the field values it
returns the exact text runs to draw, in top-left page coordinates.  The PDF
writer in :mod:`modules.overlay.renderer` only flips ``y`` and draws.
"""

from __future__ import annotations

import logging
from typing import Any

from reportlab.pdfbase.pdfmetrics import stringWidth

from .models import (
    FieldDefinition,
    FieldValues,
    SingleLineField,
    TemplateLayout,
    TextAlign,
    TextAreaField,
    TextPlacement,
)

logger = logging.getLogger(__name__)

FONT_NAME = "Helvetica"
PADDING = 4.0
LINE_HEIGHT_FACTOR = 1.2


def stringify(value: Any) -> str | None:
    """Return the text to draw for ``value`` or ``None`` when it should be skipped."""

    if value is None:
        return None
    try:
        text = str(value)
    except Exception:
        logger.warning("Skipping value of type %s that cannot be converted to text", type(value).__name__)
        return None
    if text == "":
        return None
    return text


def text_anchor(field: FieldDefinition) -> tuple[float, TextAlign]:
    """Horizontal anchor and alignment for ``field``."""

    pos = field.position
    if field.text_position == "center":
        return pos.x + pos.width / 2, "center"
    if field.text_position == "right":
        return pos.x + pos.width - PADDING, "right"
    return pos.x + PADDING, "left"


def text_width(text: str, font_size: float, font_name: str = FONT_NAME) -> float:
    return stringWidth(text, font_name, font_size)


def _break_word(word: str, max_width: float, font_size: float, font_name: str) -> list[str]:
    pieces: list[str] = []
    current = ""
    for char in word:
        candidate = current + char
        if current and text_width(candidate, font_size, font_name) > max_width:
            pieces.append(current)
            current = char
        else:
            current = candidate
    pieces.append(current)
    return pieces


def wrap_text(text: str, max_width: float, font_size: float, font_name: str = FONT_NAME) -> list[str]:
    """Split ``text`` into lines no wider than ``max_width``.

    Explicit newlines always start a new line (blank lines are kept).  Within
    a paragraph words are packed greedily; a word that is wider than the box
    on its own is broken between characters.
    """

    paragraphs = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    if max_width <= 0:
        return paragraphs

    lines: list[str] = []
    for paragraph in paragraphs:
        words = paragraph.split()
        if not words:
            lines.append("")
            continue
        current = ""
        for word in words:
            candidate = f"{current} {word}" if current else word
            if text_width(candidate, font_size, font_name) <= max_width:
                current = candidate
                continue
            if current:
                lines.append(current)
            if text_width(word, font_size, font_name) > max_width:
                pieces = _break_word(word, max_width, font_size, font_name)
                lines.extend(pieces[:-1])
                current = pieces[-1]
            else:
                current = word
        lines.append(current)
    return lines


def _single_line(field: SingleLineField, text: str) -> list[TextPlacement]:
    x, align = text_anchor(field)
    pos = field.position
    y = pos.y + pos.height / 2 + field.font_size / 3
    flat = " ".join(text.splitlines())
    return [TextPlacement(field.id, flat, x, y, field.font_size, align)]


def _text_area(field: TextAreaField, text: str) -> list[TextPlacement]:
    x, align = text_anchor(field)
    pos = field.position
    font_size = field.font_size
    line_height = font_size * LINE_HEIGHT_FACTOR
    top = pos.y + PADDING
    limit = pos.bottom - PADDING
    baseline = top + font_size / 3

    placements: list[TextPlacement] = []
    for index, line in enumerate(wrap_text(text, pos.width - 2 * PADDING, font_size)):
        # A line occupies [top + i*lh, top + (i+1)*lh]; the first line is always drawn.
        if index > 0 and top + (index + 1) * line_height > limit:
            logger.debug("Truncated textarea %s after %d lines", field.id, index)
            break
        if line:
            placements.append(
                TextPlacement(field.id, line, x, baseline + index * line_height, font_size, align)
            )
    return placements


def place_field(field: FieldDefinition, value: Any) -> list[TextPlacement]:
    """Text runs for a single field; empty when the value is skipped."""

    text = stringify(value)
    if text is None:
        return []
    if isinstance(field, TextAreaField):
        return _text_area(field, text)
    if isinstance(field, SingleLineField):
        return _single_line(field, text)
    raise TypeError(f"Unsupported field definition: {type(field).__name__}")


def plan_placements(layout: TemplateLayout, values: FieldValues) -> list[TextPlacement]:
    """Every text run for ``values`` over ``layout``, in field order."""

    placements: list[TextPlacement] = []
    for field in layout.fields:
        placements.extend(place_field(field, values.get(field.id)))
    return placements


__all__ = [
    "FONT_NAME",
    "LINE_HEIGHT_FACTOR",
    "PADDING",
    "place_field",
    "plan_placements",
    "stringify",
    "text_anchor",
    "text_width",
    "wrap_text",
]
