"""Instrumentation helpers for the food analysis pipeline.

Metrics:
* Counter food_analysis_backend_requests_total{backend,status}
* Counter food_analysis_fallback_total{reason,source}
* Histogram food_analysis_latency_ms{backend}
* Counter food_analysis_image_type_total{image_type}
* Counter food_analysis_macro_tier_total{tier}
* Counter food_analysis_calorie_source_total{source}

`backend`/`source` is the BackendId value (supabase|openai|stub).
`reason` is the exception class name that made the chain advance.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

from .core import registry, RegistrySnapshot


def record_backend_request(backend: str, status: str) -> None:
    registry.counter(
        "food_analysis_backend_requests_total", backend=backend, status=status
    ).inc()


def record_fallback(reason: str, *, source: str) -> None:
    registry.counter("food_analysis_fallback_total", reason=reason, source=source).inc()


def record_latency_ms(ms: float, *, backend: str) -> None:
    registry.histogram("food_analysis_latency_ms", backend=backend).observe(ms)


def record_image_type(image_type: str) -> None:
    registry.counter("food_analysis_image_type_total", image_type=image_type).inc()


def record_macro_tier(tier: str) -> None:
    registry.counter("food_analysis_macro_tier_total", tier=tier).inc()


def record_calorie_source(source: str) -> None:
    registry.counter("food_analysis_calorie_source_total", source=source).inc()


@contextmanager
def time_backend(backend: str) -> Iterator[None]:
    """Count one backend attempt as completed/failed and record its latency."""
    start = time.perf_counter()
    try:
        yield
        record_backend_request(backend, "completed")
    except Exception:
        record_backend_request(backend, "failed")
        raise
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        record_latency_ms(elapsed_ms, backend=backend)


def snapshot() -> RegistrySnapshot:  # pragma: no cover - passthrough
    return registry.snapshot()


def reset_all() -> None:
    """Reset every metric (test utility)."""
    registry.reset()
