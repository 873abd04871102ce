"""Drawing export module entry point."""

from __future__ import annotations

from fastapi import FastAPI

__all__ = ["register_api"]


def register_api(app: FastAPI) -> None:
    """Register FastAPI routes for drawing exports."""
    from .api import router as drawings_router

    if not any(getattr(r, "path", "").startswith("/api/drawings") for r in app.router.routes):
        app.include_router(drawings_router)
