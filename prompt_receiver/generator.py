# prompt_receiver/generator.py
import os
import time
import datetime
from typing import Any, Dict

from prompt_receiver import llm_wrapper as _llm
from prompt_receiver import monitoring
from prompt_receiver.classifier import classify
from prompt_receiver.errors import UpstreamFailure
from prompt_receiver.templates import fallback_component_code

GENERATOR_SYSTEM_PROMPT = """
You are a v0.dev-style React component generator. Generate modern, beautiful React components using Tailwind CSS based on user prompts.

Rules:
- Always return ONLY the JSX component code, no explanations
- Use Tailwind CSS for all styling
- Make components modern, beautiful, and interactive
- Include hover effects, animations, and professional design
- Use gradients, shadows, and modern UI patterns
- Components should be responsive and accessible
- Use React hooks (useState, useEffect) when needed
- Return functional components with export default

The component should look like it came from v0.dev - professional, modern, and visually stunning.
"""

GENERATOR_USER_PROMPT_TEMPLATE = "Generate a React component for: {}"

GENERATOR_TIMEOUT_SECONDS = float(os.getenv("GENERATOR_TIMEOUT_SECONDS", "30"))
GENERATOR_MAX_TOKENS = 2000
GENERATOR_TEMPERATURE = 0.7

FALLBACK_GENERATOR = "fallback-v0-style"
MOCK_GENERATOR = "mock-v0-style"


def _now_iso() -> str:
    return datetime.datetime.utcnow().isoformat() + "Z"


def _call_llm(system: str, user: str, prompt: str) -> Dict[str, Any]:
    """
    Call the completion API through the wrapper and return its response dict.
    If MOCK_LLM is set, returns the deterministic template for `prompt` instead.
    Isolated so tests can monkeypatch without touching the SDKs.
    """
    use_mock = os.getenv("MOCK_LLM", "true").lower() in ("1", "true", "yes")
    if use_mock:
        return {"text": fallback_component_code(prompt), "model": "mock", "response_id": None, "mock": True}

    return _llm.call_llm(
        messages=[
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ],
        max_tokens=GENERATOR_MAX_TOKENS,
        temperature=GENERATOR_TEMPERATURE,
        timeout=GENERATOR_TIMEOUT_SECONDS,
    )


def _strip_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```") and text.endswith("```"):
        lines = text.splitlines()
        if len(lines) >= 3:
            text = "\n".join(lines[1:-1]).strip()
    return text


def generate_component(prompt: str) -> Dict[str, Any]:
    """
    Ask the completion API for a component implementing `prompt`.
    Never raises for upstream problems: on failure the deterministic
    fallback component is returned with generator="fallback-v0-style".
    """
    category = classify(prompt)
    start = time.time()
    try:
        resp = _call_llm(
            GENERATOR_SYSTEM_PROMPT,
            GENERATOR_USER_PROMPT_TEMPLATE.format(prompt),
            prompt,
        )
        if not isinstance(resp, dict) or not isinstance(resp.get("text"), str):
            raise UpstreamFailure("Malformed completion response")
        code = _strip_fences(resp["text"])
        if not code:
            raise UpstreamFailure("Empty completion response")

        generator = MOCK_GENERATOR if resp.get("mock") else f"{_llm.LLM_PROVIDER}-v0-style"
        monitoring.observe_generation(start, "llm")
        return {
            "code": code,
            "prompt": prompt,
            "category": category.value,
            "generator": generator,
            "model": resp.get("model"),
            "response_id": resp.get("response_id"),
            "timestamp": _now_iso(),
        }
    except Exception as e:
        monitoring.observe_generation(start, "fallback")
        monitoring.logger.warning(
            "Component generation failed, using fallback template",
            extra={"error": str(e), "category": category.value},
        )
        return {
            "code": fallback_component_code(prompt, category),
            "prompt": prompt,
            "category": category.value,
            "generator": FALLBACK_GENERATOR,
            "model": None,
            "response_id": None,
            "timestamp": _now_iso(),
        }
