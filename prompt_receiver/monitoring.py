# prompt_receiver/monitoring.py
"""
Centralized monitoring: Prometheus metrics, structured JSON logging, optional Sentry.

Env vars:
- PROMETHEUS_ENABLED (default: true)
- SENTRY_DSN (optional)
- LOG_AS_JSON (default: true)
- LOG_LEVEL (default: INFO)
- ENVIRONMENT (default: development)
"""

import os
import logging
import time
from typing import Tuple

import sentry_sdk
from prometheus_client import (
    Counter, Histogram, Gauge,
    generate_latest, CONTENT_TYPE_LATEST, REGISTRY,
)
from pythonjsonlogger import jsonlogger

# --- ENV flags
PROMETHEUS_ENABLED = os.getenv("PROMETHEUS_ENABLED", "true").lower() in ("1", "true", "yes")
SENTRY_DSN = os.getenv("SENTRY_DSN", None)
LOG_AS_JSON = os.getenv("LOG_AS_JSON", "true").lower() in ("1", "true", "yes")
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")


# --- Logger setup
def setup_logger(name: str = "prompt-receiver", level: int = None) -> logging.Logger:
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO")) if level is None else level
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        if LOG_AS_JSON:
            fmt = jsonlogger.JsonFormatter(
                "%(asctime)s %(levelname)s %(name)s %(message)s"
            )
            handler.setFormatter(fmt)
        logger.addHandler(handler)
    return logger


logger = setup_logger()

# --- Sentry (optional)
if SENTRY_DSN:
    sentry_sdk.init(dsn=SENTRY_DSN, environment=ENVIRONMENT)
    logger.info("Sentry initialized")


# --- Prometheus metrics
REQUEST_COUNT = Counter(
    "prompt_receiver_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

REQUEST_LATENCY = Histogram(
    "prompt_receiver_request_latency_seconds",
    "Request latency in seconds",
    ["endpoint"],
)

PROMPTS_RECEIVED = Counter(
    "prompt_receiver_prompts_received_total",
    "Prompts accepted into the store",
)

PROMPTS_REJECTED = Counter(
    "prompt_receiver_prompts_rejected_total",
    "Prompts rejected at ingestion",
    ["reason"],
)

CLASSIFICATIONS = Counter(
    "prompt_receiver_classifications_total",
    "Prompt classifications",
    ["category"],
)

STORE_EVICTIONS = Counter(
    "prompt_receiver_store_evictions_total",
    "Prompts evicted from the store",
)

GENERATION_COUNTER = Counter(
    "prompt_receiver_generation_total",
    "Component generation attempts",
    ["outcome"],
)

GENERATION_LATENCY = Histogram(
    "prompt_receiver_generation_latency_seconds",
    "Component generation latency",
)

STORE_SIZE = Gauge(
    "prompt_receiver_store_size",
    "Prompts currently held in the store",
)


# --- Helper wrappers (never crash the app)
def observe_request(start_ts: float, endpoint: str, method: str, status: str):
    try:
        REQUEST_LATENCY.labels(endpoint=endpoint).observe(time.time() - start_ts)
        REQUEST_COUNT.labels(method=method, endpoint=endpoint, status=status).inc()
    except Exception:
        pass


def observe_generation(start_ts: float, outcome: str):
    try:
        GENERATION_LATENCY.observe(time.time() - start_ts)
        GENERATION_COUNTER.labels(outcome=outcome).inc()
    except Exception:
        pass


def inc_prompt_received():
    try:
        PROMPTS_RECEIVED.inc()
    except Exception:
        pass


def inc_prompt_rejected(reason: str):
    try:
        PROMPTS_REJECTED.labels(reason=reason).inc()
    except Exception:
        pass


def inc_classification(category: str):
    try:
        CLASSIFICATIONS.labels(category=category).inc()
    except Exception:
        pass


def inc_evictions(n: int):
    try:
        if n > 0:
            STORE_EVICTIONS.inc(n)
    except Exception:
        pass


def set_store_size(n: int):
    try:
        STORE_SIZE.set(n)
    except Exception:
        pass


def prometheus_metrics_response() -> Tuple[bytes, str]:
    """Return (body_bytes, content_type) for Prometheus scrape."""
    try:
        return generate_latest(REGISTRY), CONTENT_TYPE_LATEST
    except Exception:
        return b"", CONTENT_TYPE_LATEST
