"""Field overlay rendering.

Turns a template's reference PDF plus a set of field values into a filled
PDF.  The public surface is :func:`render` / :func:`render_and_encode`, the
layout loader :func:`load_layout` and the error classes.
"""

from .errors import (
    DocumentDecodeError,
    EmptyDocumentError,
    LayoutValidationError,
    OverlayError,
    RenderSurfaceError,
)
from .models import FieldPosition, SingleLineField, TemplateLayout, TextAreaField, TextPlacement
from .layout import plan_placements, wrap_text
from .rasterizer import Rasterizer
from .renderer import OverlayRenderer, render, render_and_encode, to_data_uri
from .validators import load_layout

__all__ = [
    "DocumentDecodeError",
    "EmptyDocumentError",
    "FieldPosition",
    "LayoutValidationError",
    "OverlayError",
    "OverlayRenderer",
    "Rasterizer",
    "RenderSurfaceError",
    "SingleLineField",
    "TemplateLayout",
    "TextAreaField",
    "TextPlacement",
    "load_layout",
    "plan_placements",
    "render",
    "render_and_encode",
    "to_data_uri",
    "wrap_text",
]
