# prompt_receiver/service.py
import os
from typing import Any, Dict, Optional

# Import modules (not bare functions) so monkeypatching in tests works correctly
import prompt_receiver.generator as _generator
from prompt_receiver import monitoring
from prompt_receiver.classifier import classify, category_counts
from prompt_receiver.errors import InvalidInput
from prompt_receiver.store import Prompt, PromptStore
from prompt_receiver.templates import render_template

STORE_CAPACITY = int(os.getenv("PROMPT_STORE_CAPACITY", "100"))


def validate_prompt_text(text: Any) -> str:
    """Reject missing, non-string and blank prompt text before it reaches the store."""
    if text is None:
        raise InvalidInput("Prompt is required")
    if not isinstance(text, str):
        raise InvalidInput("Prompt must be a string")
    if not text.strip():
        raise InvalidInput("Prompt must not be empty")
    return text


class PromptService:
    """
    Ingestion and read boundary over a single PromptStore.
    The app creates one instance at startup and routes every endpoint through it.
    """

    def __init__(self, store: Optional[PromptStore] = None, capacity: int = STORE_CAPACITY):
        self.store = store if store is not None else PromptStore(capacity=capacity)
        self.store.on_evict = self._count_evictions

    def _count_evictions(self, n: int):
        monitoring.inc_evictions(n)

    def ingest(self, text: Any, metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Validate and store a prompt.
        Raises InvalidInput (store untouched) for missing/blank text.
        """
        try:
            text = validate_prompt_text(text)
        except InvalidInput:
            monitoring.inc_prompt_rejected("invalid_input")
            raise

        prompt = self.store.insert(text, metadata=metadata)
        monitoring.set_store_size(len(self.store))

        category = classify(prompt.text)
        monitoring.inc_prompt_received()
        monitoring.inc_classification(category.value)
        monitoring.logger.info(
            "Prompt stored",
            extra={"prompt_id": prompt.id, "category": category.value, "prompt_preview": text[:200]},
        )
        return {
            "status": "success",
            "id": prompt.id,
            "timestamp": prompt.received_at,
            "received_at": prompt.received_at,
            "category": category.value,
            "original_prompt": prompt.text,
            "processed_response": (
                f'I received your message: "{prompt.text}". '
                "This prompt has been stored and is ready for UI generation!"
            ),
            "metadata": prompt.metadata,
            "storage_info": self.store.stats(),
        }

    def latest(self) -> Optional[Prompt]:
        return self.store.latest()

    def get(self, prompt_id: int) -> Optional[Prompt]:
        return self.store.by_id(prompt_id)

    def mark_processed(self, prompt_id: int) -> Optional[Prompt]:
        return self.store.mark_processed(prompt_id)

    def clear_all(self) -> int:
        count = self.store.clear_all()
        monitoring.set_store_size(0)
        monitoring.logger.info("Prompt store cleared", extra={"cleared_count": count})
        return count

    def stats(self) -> Dict[str, Any]:
        return self.store.stats()

    def list_prompts(self, limit: int = 10, offset: int = 0,
                     processed: Optional[bool] = None,
                     search: Optional[str] = None) -> Dict[str, Any]:
        """Filtered, newest-first page of the current window plus aggregate stats."""
        limit = max(int(limit), 0)
        offset = max(int(offset), 0)
        prompts = self.store.snapshot()

        filtered = prompts
        if processed is not None:
            filtered = [p for p in filtered if p.processed == processed]
        if search:
            term = search.lower()
            filtered = [p for p in filtered if term in p.text.lower()]

        # ids follow insertion order, so this is newest first
        filtered = sorted(filtered, key=lambda p: p.id, reverse=True)
        end = offset + limit
        page = filtered[offset:end]

        processed_count = sum(1 for p in prompts if p.processed)
        stats = {
            "total": len(prompts),
            "processed": processed_count,
            "unprocessed": len(prompts) - processed_count,
            "latest_timestamp": prompts[-1].received_at if prompts else None,
            "filtered": len(filtered),
            "returned": len(page),
            "has_more": end < len(filtered),
            "categories": category_counts(p.text for p in prompts),
        }
        return {
            "status": "success",
            "prompts": [self.prompt_out(p) for p in page],
            "stats": stats,
            "pagination": {
                "limit": limit,
                "offset": offset,
                "total": len(filtered),
                "has_next": end < len(filtered),
                "has_prev": offset > 0,
            },
        }

    def render(self, prompt: Prompt) -> Dict[str, Any]:
        """Classify a stored prompt and build its display template."""
        category = classify(prompt.text)
        monitoring.inc_classification(category.value)
        return {
            "status": "success",
            "id": prompt.id,
            "category": category.value,
            "processed": prompt.processed,
            "ui": render_template(category, prompt.text),
        }

    def generate(self, text: Any) -> Dict[str, Any]:
        text = validate_prompt_text(text)
        result = _generator.generate_component(text)
        result["status"] = "success"
        return result

    @staticmethod
    def prompt_out(prompt: Prompt) -> Dict[str, Any]:
        d = prompt.to_dict()
        d["category"] = classify(prompt.text).value
        return d
