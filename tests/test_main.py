from __future__ import annotations

from fastapi.testclient import TestClient


def test_app_mounts_drawing_routes():
    from main import create_app

    client = TestClient(create_app())
    assert client.get("/healthz").json() == {"status": "ok"}
    paths = {route.path for route in client.app.router.routes}
    assert "/api/drawings/export" in paths


def test_shutdown_closes_shared_service(monkeypatch):
    from main import create_app
    from modules.drawings import api

    api.get_service.cache_clear()
    closed = []
    with TestClient(create_app()):
        service = api.get_service()
        monkeypatch.setattr(service, "close", lambda: closed.append(True))
    assert closed == [True]
    assert api.get_service.cache_info().currsize == 0
