# prompt_receiver/store.py
"""
In-memory prompt store.

A bounded, append-only log of received prompts with FIFO eviction:
- insert(text) assigns a strictly increasing id (millisecond timestamp,
  bumped past the previous id when the clock has not moved)
- latest() / by_id() / mark_processed() / stats() / clear_all()

State lives only for the lifetime of the process. All operations are
serialised by a single lock so inserts stay atomic with eviction when the
store is shared between FastAPI's worker threads.
"""

import copy
import datetime
import threading
import time
from collections import deque
from dataclasses import dataclass, field, asdict
from typing import Any, Callable, Deque, Dict, List, Optional

DEFAULT_CAPACITY = 100


def _now_iso() -> str:
    return datetime.datetime.utcnow().isoformat() + "Z"


def _clock_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class Prompt:
    id: int
    text: str
    received_at: str
    processed: bool = False
    processed_at: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        # keep the field names the polling front end reads
        d["prompt"] = self.text
        d["timestamp"] = self.received_at
        return d


class PromptStore:
    """Thread-safe bounded prompt log (per-process)."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY,
                 on_evict: Optional[Callable[[int], None]] = None):
        if not isinstance(capacity, int) or capacity < 1:
            raise ValueError("capacity must be a positive integer")
        self.capacity = capacity
        self._prompts: Deque[Prompt] = deque()
        self._index: Dict[int, Prompt] = {}
        self._last_id = 0
        self._evicted = 0
        self._lock = threading.Lock()
        # called under the lock with the number of prompts one insert evicted
        self.on_evict = on_evict

    def _next_id(self) -> int:
        candidate = _clock_ms()
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate

    def insert(self, text: str, metadata: Optional[Dict[str, Any]] = None) -> Prompt:
        """Append a new prompt, evicting the oldest ones beyond capacity."""
        with self._lock:
            prompt = Prompt(
                id=self._next_id(),
                text=text,
                received_at=_now_iso(),
                metadata=dict(metadata or {}),
            )
            self._prompts.append(prompt)
            self._index[prompt.id] = prompt
            evicted = 0
            while len(self._prompts) > self.capacity:
                old = self._prompts.popleft()
                del self._index[old.id]
                evicted += 1
            self._evicted += evicted
            if evicted and self.on_evict is not None:
                self.on_evict(evicted)
            return copy.deepcopy(prompt)

    def latest(self) -> Optional[Prompt]:
        with self._lock:
            if not self._prompts:
                return None
            return copy.deepcopy(self._prompts[-1])

    def by_id(self, prompt_id: int) -> Optional[Prompt]:
        with self._lock:
            prompt = self._index.get(prompt_id)
            return copy.deepcopy(prompt) if prompt is not None else None

    def mark_processed(self, prompt_id: int) -> Optional[Prompt]:
        with self._lock:
            prompt = self._index.get(prompt_id)
            if prompt is None:
                return None
            if not prompt.processed:
                prompt.processed = True
                prompt.processed_at = _now_iso()
            return copy.deepcopy(prompt)

    def stats(self) -> Dict[str, Any]:
        """Counts over the current window only; evicted prompts are not counted."""
        with self._lock:
            processed = sum(1 for p in self._prompts if p.processed)
            return {
                "total": len(self._prompts),
                "processed": processed,
                "unprocessed": len(self._prompts) - processed,
                "latest_timestamp": self._prompts[-1].received_at if self._prompts else None,
            }

    def clear_all(self) -> int:
        with self._lock:
            count = len(self._prompts)
            self._prompts.clear()
            self._index.clear()
            return count

    def snapshot(self) -> List[Prompt]:
        """Copy of the current window in insertion order."""
        with self._lock:
            return copy.deepcopy(list(self._prompts))

    @property
    def evicted_count(self) -> int:
        return self._evicted

    def __len__(self) -> int:
        with self._lock:
            return len(self._prompts)
