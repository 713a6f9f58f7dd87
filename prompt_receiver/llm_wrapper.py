# prompt_receiver/llm_wrapper.py
"""
Completion API client used by the component generator.

call_llm(messages, ...) -> {"text", "model", "response_id", "raw"}

Provider is picked once at import:
  LLM_PROVIDER=openai|anthropic   (default: anthropic when only its key is set, else openai)
  OPENAI_API_KEY / ANTHROPIC_API_KEY
  GENERATOR_LLM_MODEL             (default: gpt-4 / claude-sonnet-4-20250514)

Mock mode lives in the generator (MOCK_LLM); this module always talks to a
real provider. Any SDK error, timeout or non-success status is raised as
UpstreamFailure so callers have a single exception to recover from.
"""

import os
from typing import Any, Callable, Dict, List, Optional, Tuple

from anthropic import Anthropic
from openai import OpenAI

from prompt_receiver.errors import UpstreamFailure

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "").strip()
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "").strip()

_PROVIDER_ALIASES = {"openai": "openai", "gpt": "openai", "anthropic": "anthropic", "claude": "anthropic"}
_DEFAULT_MODELS = {"openai": "gpt-4", "anthropic": "claude-sonnet-4-20250514"}


def _pick_provider() -> str:
    explicit = _PROVIDER_ALIASES.get(os.getenv("LLM_PROVIDER", "").strip().lower())
    if explicit:
        return explicit
    if ANTHROPIC_API_KEY and not OPENAI_API_KEY:
        return "anthropic"
    return "openai"


LLM_PROVIDER = _pick_provider()
DEFAULT_MODEL = os.getenv("GENERATOR_LLM_MODEL", _DEFAULT_MODELS[LLM_PROVIDER])


def _split_system(messages: List[Dict[str, str]]) -> Tuple[str, List[Dict[str, str]]]:
    """Anthropic wants the system prompt outside the message list."""
    system = "\n".join(m["content"].strip() for m in messages if m["role"] == "system")
    chat = [{"role": m["role"], "content": m["content"]} for m in messages if m["role"] != "system"]
    return system, chat


def _anthropic_complete(messages: List[Dict[str, str]], model: str, max_tokens: int,
                        temperature: float, timeout: float) -> Dict[str, Any]:
    client = Anthropic(api_key=ANTHROPIC_API_KEY, timeout=timeout)
    system, chat = _split_system(messages)
    kwargs: Dict[str, Any] = {
        "model": model,
        "max_tokens": max_tokens,
        "temperature": temperature,
        "messages": chat,
    }
    if system:
        kwargs["system"] = system
    resp = client.messages.create(**kwargs)
    text = "".join(getattr(block, "text", "") for block in resp.content)
    return {"text": text, "model": model, "response_id": getattr(resp, "id", None), "raw": resp}


def _openai_complete(messages: List[Dict[str, str]], model: str, max_tokens: int,
                     temperature: float, timeout: float) -> Dict[str, Any]:
    client = OpenAI(api_key=OPENAI_API_KEY, timeout=timeout)
    resp = client.chat.completions.create(
        model=model,
        messages=messages,
        max_tokens=max_tokens,
        temperature=temperature,
    )
    choices = getattr(resp, "choices", None) or []
    text = choices[0].message.content if choices else ""
    return {"text": text or "", "model": model, "response_id": getattr(resp, "id", None), "raw": resp}


_BACKENDS: Dict[str, Callable[..., Dict[str, Any]]] = {
    "anthropic": _anthropic_complete,
    "openai": _openai_complete,
}


def call_llm(messages: List[Dict[str, str]], model: Optional[str] = None,
             max_tokens: int = 2000, temperature: float = 0.7,
             timeout: float = 30) -> Dict[str, Any]:
    backend = _BACKENDS[LLM_PROVIDER]
    try:
        return backend(messages, model=model or DEFAULT_MODEL, max_tokens=max_tokens,
                       temperature=temperature, timeout=timeout)
    except Exception as e:
        raise UpstreamFailure(f"LLM call failed ({LLM_PROVIDER}): {e}") from e
