# tests/test_generator.py
import pytest

import prompt_receiver.generator as gen
import prompt_receiver.llm_wrapper as llm
from prompt_receiver.errors import UpstreamFailure
from prompt_receiver.templates import fallback_component_code

GENERATED = """```jsx
export default function Signup() {
  return <form></form>
}
```"""


@pytest.fixture
def real_mode(monkeypatch):
    monkeypatch.setenv("MOCK_LLM", "false")
    monkeypatch.setattr(llm, "LLM_PROVIDER", "openai")


def test_mock_mode_returns_template(monkeypatch):
    monkeypatch.setenv("MOCK_LLM", "true")
    out = gen.generate_component("contact form")
    assert out["generator"] == gen.MOCK_GENERATOR
    assert out["code"] == fallback_component_code("contact form")
    assert out["category"] == "Form"


def test_llm_code_is_returned_without_fences(monkeypatch, real_mode):
    calls = {}

    def fake_call_llm(messages, **kwargs):
        calls["messages"] = messages
        calls["kwargs"] = kwargs
        return {"text": GENERATED, "model": "gpt-4", "response_id": "resp-1", "raw": {}}

    monkeypatch.setattr(llm, "call_llm", fake_call_llm)
    out = gen.generate_component("signup form")

    assert out["code"].startswith("export default function Signup()")
    assert "```" not in out["code"]
    assert out["generator"] == "openai-v0-style"
    assert out["model"] == "gpt-4"
    assert out["response_id"] == "resp-1"
    assert calls["messages"][1]["content"] == "Generate a React component for: signup form"
    assert calls["kwargs"]["temperature"] == 0.7
    assert calls["kwargs"]["max_tokens"] == 2000
    assert calls["kwargs"]["timeout"] == gen.GENERATOR_TIMEOUT_SECONDS


def test_upstream_failure_falls_back(monkeypatch, real_mode):
    def boom(messages, **kwargs):
        raise UpstreamFailure("timeout")

    monkeypatch.setattr(llm, "call_llm", boom)
    out = gen.generate_component("vendor invoice review")
    assert out["generator"] == gen.FALLBACK_GENERATOR
    assert out["category"] == "VendorInsights"
    assert out["code"] == fallback_component_code("vendor invoice review")
    assert out["model"] is None


def test_empty_response_falls_back(monkeypatch, real_mode):
    monkeypatch.setattr(llm, "call_llm", lambda messages, **kw: {"text": "   ", "model": "gpt-4"})
    out = gen.generate_component("hello")
    assert out["generator"] == gen.FALLBACK_GENERATOR


def test_malformed_response_falls_back(monkeypatch, real_mode):
    monkeypatch.setattr(llm, "call_llm", lambda messages, **kw: {"choices": []})
    out = gen.generate_component("hello")
    assert out["generator"] == gen.FALLBACK_GENERATOR
    assert "Built from your prompt" in out["code"]


def test_wrapper_raises_upstream_failure(monkeypatch):
    monkeypatch.setattr(llm, "LLM_PROVIDER", "openai")

    def broken(*args, **kwargs):
        raise ConnectionError("connection refused")

    monkeypatch.setitem(llm._BACKENDS, "openai", broken)
    with pytest.raises(UpstreamFailure):
        llm.call_llm([{"role": "user", "content": "hi"}])


def test_wrapper_passes_settings_to_backend(monkeypatch):
    seen = {}

    def fake_backend(messages, **kwargs):
        seen.update(kwargs)
        return {"text": "ok", "model": kwargs["model"], "response_id": "r1", "raw": {}}

    monkeypatch.setattr(llm, "LLM_PROVIDER", "anthropic")
    monkeypatch.setitem(llm._BACKENDS, "anthropic", fake_backend)
    resp = llm.call_llm([{"role": "user", "content": "hi"}], model="m", timeout=5)
    assert resp["text"] == "ok"
    assert seen == {"model": "m", "max_tokens": 2000, "temperature": 0.7, "timeout": 5}


def test_split_system_moves_system_prompt_out():
    system, chat = llm._split_system([
        {"role": "system", "content": " be brief \n"},
        {"role": "user", "content": "hi"},
    ])
    assert system == "be brief"
    assert chat == [{"role": "user", "content": "hi"}]
