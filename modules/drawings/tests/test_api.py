from __future__ import annotations

import base64
import io

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pypdf import PdfReader

from modules import drawings
from modules.drawings.api import get_service
from modules.drawings.clients import HttpClient
from modules.drawings.service import DrawingExportService
from utils.app_settings import AppSettings

TEMPLATE_DATA = {
    "pageWidth": 792,
    "pageHeight": 612,
    "fields": [
        {"id": "job", "label": "Job", "targetField": "job_number", "position": {"x": 100, "y": 50, "width": 150, "height": 20}},
    ],
}


@pytest.fixture()
def state(template_pdf):
    return {"pdf": template_pdf, "document_status": 200, "posted": []}


@pytest.fixture()
def client(state):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(state["document_status"], content=state["pdf"])
        state["posted"].append(request.content)
        return httpx.Response(202)

    service = DrawingExportService(
        settings=AppSettings(webhook_url="https://hooks.example.test/drawings"),
        http=HttpClient(transport=httpx.MockTransport(handler)),
    )
    app = FastAPI()
    drawings.register_api(app)
    drawings.register_api(app)
    app.dependency_overrides[get_service] = lambda: service
    return TestClient(app)


def _body(**extra):
    body = {"pdf_url": "https://storage.example.test/edge.pdf", "template_data": TEMPLATE_DATA}
    body.update(extra)
    return body


def test_routes_registered_once(client):
    paths = [route.path for route in client.app.router.routes if route.path.startswith("/api/drawings")]
    assert sorted(paths) == ["/api/drawings/export", "/api/drawings/export/base64", "/api/drawings/send"]


def test_export_returns_pdf_attachment(client):
    resp = client.post("/api/drawings/export", json=_body(field_values={"job": "J-1"}))
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert 'filename="edge-template-filled.pdf"' in resp.headers["content-disposition"]
    assert resp.content.startswith(b"%PDF")


def test_export_uses_drawing_record(client):
    resp = client.post(
        "/api/drawings/export",
        json=_body(drawing={"drawing_number": "D-12", "job_number": "J-12"}),
    )
    assert resp.status_code == 200
    assert 'filename="D-12.pdf"' in resp.headers["content-disposition"]


def test_export_base64(client):
    resp = client.post("/api/drawings/export/base64", json=_body(field_values={"job": 5}, filename="out"))
    assert resp.status_code == 200
    body = resp.json()
    assert body["filename"] == "out.pdf"
    assert body["mime_type"] == "application/pdf"
    assert base64.b64decode(body["data"]).startswith(b"%PDF")


def test_send_posts_to_webhook(client, state):
    resp = client.post("/api/drawings/send", json=_body(field_values={"job": "J-3"}))
    assert resp.status_code == 200
    assert resp.json() == {"filename": "edge-template-filled.pdf", "status_code": 202}
    assert len(state["posted"]) == 1


def test_invalid_layout_is_422(client):
    resp = client.post("/api/drawings/export", json=_body(template_data={"fields": []}))
    assert resp.status_code == 422
    assert resp.json()["error"] == "invalid_layout"


def test_unavailable_document_is_502(client, state):
    state["document_status"] = 404
    resp = client.post("/api/drawings/export", json=_body())
    assert resp.status_code == 502
    assert resp.json()["error"] == "document_unavailable"


def test_corrupt_document_is_422(client, state):
    state["pdf"] = b"not a pdf"
    resp = client.post("/api/drawings/export/base64", json=_body())
    assert resp.status_code == 422
    assert resp.json()["error"] == "invalid_document"


def test_missing_url_is_rejected(client):
    resp = client.post("/api/drawings/export", json=_body(pdf_url=" "))
    assert resp.status_code == 422


def test_drawing_payload_is_normalised(client):
    template_data = {
        "pageWidth": 792,
        "pageHeight": 612,
        "fields": [{"id": "edge", "label": "Edge", "position": {"x": 100, "y": 50, "width": 150, "height": 20}}],
    }
    drawing = {"drawing_number": "D1", "quantity": "abc", "additional_data": '{"edge": 300}'}
    resp = client.post("/api/drawings/export", json=_body(template_data=template_data, drawing=drawing))
    assert resp.status_code == 200
    assert 'filename="D1.pdf"' in resp.headers["content-disposition"]
    text = PdfReader(io.BytesIO(resp.content)).pages[0].extract_text()
    assert "300" in text
