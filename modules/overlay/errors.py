"""Exception taxonomy for the overlay renderer.

Every error raised here is terminal for a single export call; no partial
document is ever returned.
"""

from __future__ import annotations


class OverlayError(RuntimeError):
    """Base class for failures while producing an overlaid PDF."""


class DocumentDecodeError(OverlayError):
    """Raised when the source document cannot be parsed."""


class EmptyDocumentError(OverlayError):
    """Raised when the source document has no pages."""


class RenderSurfaceError(OverlayError):
    """Raised when the page bitmap or its encoded image cannot be produced."""


class LayoutValidationError(ValueError):
    """Raised when persisted ``template_data`` does not describe a usable layout."""

    def __init__(self, message: str, *, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = list(errors or [])


__all__ = [
    "OverlayError",
    "DocumentDecodeError",
    "EmptyDocumentError",
    "RenderSurfaceError",
    "LayoutValidationError",
]
