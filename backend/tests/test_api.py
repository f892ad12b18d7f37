"""Tests for the preview and export endpoints."""
import pytest
from fastapi.testclient import TestClient

# Conftest adds backend dir to path: use direct imports (no backend. prefix)
from conftest import FakePrintEngine
from main import app, get_print_engine
from reporting.errors import ExportFailure


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _use_engine(engine: FakePrintEngine) -> None:
    app.dependency_overrides[get_print_engine] = lambda: engine


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert "X-Request-Id" in r.headers


def test_render_returns_preview_html(client, minimal_payload):
    r = client.post("/render", json=minimal_payload)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert "Quarterly Review" in r.text
    assert "Hello" in r.text


def test_render_rejects_invalid_payload_with_paths(client, minimal_payload):
    r = client.post("/render", json={**minimal_payload, "components": []})
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "Invalid payload"
    assert any(issue["path"] == "components" for issue in body["issues"])


def test_render_rejects_non_json_body(client):
    r = client.post("/render", content=b"{not json", headers={"content-type": "application/json"})
    assert r.status_code == 400
    assert r.json()["issues"][0]["type"] == "json_invalid"


def test_render_pdf_returns_pdf_bytes(client, minimal_payload):
    engine = FakePrintEngine(content=b"%PDF-1.7 body")
    _use_engine(engine)
    r = client.post("/render.pdf", json={**minimal_payload, "reportName": "Año Fiscal 2024"})
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/pdf"
    assert r.headers["content-disposition"] == 'inline; filename="Ano_Fiscal_2024.pdf"'
    assert r.headers["content-length"] == str(len(b"%PDF-1.7 body"))
    assert r.content == b"%PDF-1.7 body"


def test_render_pdf_passes_geometry(client, minimal_payload):
    engine = FakePrintEngine()
    _use_engine(engine)
    payload = {**minimal_payload, "configs": {"page": {"size": "Letter", "orientation": "landscape"}}}
    assert client.post("/render.pdf", json=payload).status_code == 200
    options = engine.calls[0]["options"]
    assert options.landscape is True
    assert options.is_letter is True


def test_render_pdf_invalid_payload_is_400_and_engine_untouched(client, minimal_payload):
    engine = FakePrintEngine()
    _use_engine(engine)
    r = client.post("/render.pdf", json={**minimal_payload, "components": [{"type": "bogus", "props": {}}]})
    assert r.status_code == 400
    assert r.json()["issues"][0]["path"] == "components.0"
    assert engine.calls == []


def test_render_pdf_engine_failure_is_500_json(client, minimal_payload):
    _use_engine(FakePrintEngine(error=ExportFailure("Browser closed unexpectedly")))
    r = client.post("/render.pdf", json=minimal_payload)
    assert r.status_code == 500
    assert r.headers["content-type"].startswith("application/json")
    assert r.json() == {"error": "PDF render failed", "detail": "Browser closed unexpectedly"}
