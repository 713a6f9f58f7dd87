# tests/test_ui_endpoint.py
import pytest
from fastapi.testclient import TestClient

from prompt_receiver.app import app
from prompt_receiver import app as app_module
from prompt_receiver.service import PromptService


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(app_module, "service", PromptService())
    return TestClient(app)


def test_ui_latest_when_empty(client):
    r = client.get("/api/ui/latest")
    assert r.status_code == 200
    assert r.json()["ui"] is None


def test_ui_latest_renders_vendor_insights(client):
    pid = client.post("/api/receive", json={"prompt": "AI - Vendor Insights report"}).json()["id"]
    j = client.get("/api/ui/latest").json()
    assert j["id"] == pid
    assert j["category"] == "VendorInsights"
    assert j["ui"]["template"] == "VendorInsights"
    assert j["ui"]["title"] == "AI Vendor Insights"
    stats = client.get("/api/prompts").json()["stats"]
    assert (stats["total"], stats["processed"], stats["unprocessed"]) == (1, 0, 1)


def test_ui_by_id(client):
    first = client.post("/api/receive", json={"prompt": "shopping cart"}).json()["id"]
    client.post("/api/receive", json={"prompt": "Build a form"})
    j = client.get(f"/api/ui/{first}").json()
    assert j["category"] == "Ecommerce"
    assert j["ui"]["title"] == "Product Catalog"


def test_ui_by_id_not_found(client):
    r = client.get("/api/ui/99")
    assert r.status_code == 404
    assert r.json()["error_code"] == "E_NOT_FOUND"
