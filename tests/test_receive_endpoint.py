# tests/test_receive_endpoint.py
import pytest
from fastapi.testclient import TestClient

from prompt_receiver.app import app
from prompt_receiver import app as app_module
from prompt_receiver.service import PromptService


@pytest.fixture
def client(monkeypatch):
    # fresh store per test
    monkeypatch.setattr(app_module, "service", PromptService())
    return TestClient(app)


def test_receive_stores_prompt(client):
    r = client.post("/api/receive", json={"prompt": "AI - Vendor Insights report"},
                    headers={"user-agent": "pytest-agent", "x-forwarded-for": "10.0.0.1"})
    assert r.status_code == 200
    j = r.json()
    assert j["status"] == "success"
    assert j["category"] == "VendorInsights"
    assert j["original_prompt"] == "AI - Vendor Insights report"
    assert "ready for UI generation" in j["processed_response"]
    assert j["metadata"]["user_agent"] == "pytest-agent"
    assert j["metadata"]["ip"] == "10.0.0.1"
    assert j["metadata"]["method"] == "POST"
    assert j["storage_info"]["total"] == 1
    assert j["storage_info"]["unprocessed"] == 1

    latest = client.get("/api/get-latest-prompt").json()
    assert latest["id"] == j["id"]
    assert latest["prompt"] == "AI - Vendor Insights report"
    assert latest["processed"] is False


def test_receive_accepts_text_alias(client):
    r = client.post("/api/receive", json={"text": "Build a form"})
    assert r.status_code == 200
    assert r.json()["category"] == "Form"


@pytest.mark.parametrize("body", [{}, {"prompt": ""}, {"prompt": "   "}, {"text": None}])
def test_receive_rejects_missing_or_blank(client, body):
    r = client.post("/api/receive", json=body)
    assert r.status_code == 400
    j = r.json()
    assert j["status"] == "error"
    assert j["error_code"] == "E_INVALID_INPUT"
    assert app_module.service.stats()["total"] == 0


def test_receive_status_lists_stats(client):
    client.post("/api/receive", json={"prompt": "hello"})
    r = client.get("/api/receive")
    assert r.status_code == 200
    j = r.json()
    assert j["stats"]["total"] == 1
    assert "POST /api/receive" in j["endpoints"]
    assert "Generic" in j["templates"]


def test_latest_when_empty(client):
    r = client.get("/api/get-latest-prompt")
    assert r.status_code == 200
    j = r.json()
    assert j["status"] == "success"
    assert j["prompt"] is None
    assert j["message"] == "No prompts received yet"


def test_latest_follows_newest_insert(client):
    ids = [client.post("/api/receive", json={"prompt": f"p{i}"}).json()["id"] for i in range(3)]
    assert ids == sorted(ids)
    assert client.get("/api/get-latest-prompt").json()["id"] == ids[-1]


def test_receive_unexpected_error_returns_500(client, monkeypatch):
    def boom(text, metadata=None):
        raise RuntimeError("kaboom")

    monkeypatch.setattr(app_module.service, "ingest", boom)
    r = client.post("/api/receive", json={"prompt": "x"})
    assert r.status_code == 500
    assert r.json()["error_code"] == "E_INTERNAL"


def test_cors_preflight(client):
    r = client.options(
        "/api/receive",
        headers={"Origin": "https://example.com", "Access-Control-Request-Method": "POST"},
    )
    assert r.status_code == 200
    assert r.headers.get("access-control-allow-origin") in ("*", "https://example.com")


def test_receive_falls_through_blank_prompt_to_text(client):
    r = client.post("/api/receive", json={"prompt": "", "text": "Build a form"})
    assert r.status_code == 200
    j = r.json()
    assert j["original_prompt"] == "Build a form"
    assert j["category"] == "Form"


def test_receive_prefers_prompt_when_both_present(client):
    r = client.post("/api/receive", json={"prompt": "shopping cart", "text": "Build a form"})
    assert r.json()["original_prompt"] == "shopping cart"
