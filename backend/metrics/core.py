"""In-memory metrics registry for the food analysis service.

Counters and latency histograms keyed by metric name plus a tag set.
Thread-safe, no exporter: ``snapshot()`` returns a JSON-serializable view
used by the tests and the ``/metrics`` debug route.
"""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass, field
from threading import Lock
from typing import Callable, Deque, Dict, List, Tuple, TypedDict, TypeVar

MetricKey = Tuple[str, Tuple[Tuple[str, str], ...]]

# Samples kept per histogram (sliding window)
HISTOGRAM_WINDOW = 2000


def metric_key(name: str, tags: Dict[str, str]) -> MetricKey:
    return name, tuple(sorted(tags.items()))


class CounterSnap(TypedDict):
    name: str
    tags: Dict[str, str]
    value: int


class HistogramSnap(TypedDict):
    name: str
    tags: Dict[str, str]
    count: int
    avg: float
    p50: float
    p95: float
    min: float
    max: float


class RegistrySnapshot(TypedDict):
    counters: List[CounterSnap]
    histograms: List[HistogramSnap]
    generatedAt: float


@dataclass
class _Metric:
    name: str
    tags: Dict[str, str]
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)


@dataclass
class Counter(_Metric):
    _value: int = 0

    def inc(self, amount: int = 1) -> None:
        with self._lock:
            self._value += amount

    def value(self) -> int:
        with self._lock:
            return self._value

    def to_snapshot(self) -> CounterSnap:
        return {"name": self.name, "tags": dict(self.tags), "value": self.value()}


def _percentile(ordered: List[float], q: float) -> float:
    """Nearest-rank (floor) percentile of an already sorted list."""
    return ordered[int(q * (len(ordered) - 1))]


@dataclass
class Histogram(_Metric):
    _samples: Deque[float] = field(
        default_factory=lambda: deque(maxlen=HISTOGRAM_WINDOW), repr=False
    )

    def observe(self, value: float) -> None:
        with self._lock:
            self._samples.append(value)

    def to_snapshot(self) -> HistogramSnap:
        with self._lock:
            ordered = sorted(self._samples)
        if not ordered:
            ordered = [0.0]
            count = 0
        else:
            count = len(ordered)
        return {
            "name": self.name,
            "tags": dict(self.tags),
            "count": count,
            "avg": sum(ordered) / len(ordered),
            "p50": _percentile(ordered, 0.50),
            "p95": _percentile(ordered, 0.95),
            "min": ordered[0],
            "max": ordered[-1],
        }

    def snapshot(self) -> HistogramSnap:
        return self.to_snapshot()


M = TypeVar("M", Counter, Histogram)


class MetricsRegistry:
    """Get-or-create store of counters and histograms."""

    def __init__(self) -> None:
        self._counters: Dict[MetricKey, Counter] = {}
        self._histograms: Dict[MetricKey, Histogram] = {}
        self._lock = Lock()

    def _get_or_create(
        self,
        store: Dict[MetricKey, M],
        factory: Callable[..., M],
        name: str,
        tags: Dict[str, str],
    ) -> M:
        key = metric_key(name, tags)
        with self._lock:
            metric = store.get(key)
            if metric is None:
                metric = factory(name=name, tags=tags)
                store[key] = metric
            return metric

    def counter(self, name: str, **tags: str) -> Counter:
        return self._get_or_create(self._counters, Counter, name, tags)

    def histogram(self, name: str, **tags: str) -> Histogram:
        return self._get_or_create(self._histograms, Histogram, name, tags)

    def counter_value(self, name: str, **tags: str) -> int:
        """Current value of a counter, 0 if it was never incremented."""
        with self._lock:
            counter = self._counters.get(metric_key(name, tags))
        return counter.value() if counter is not None else 0

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
            self._histograms.clear()

    def snapshot(self) -> RegistrySnapshot:
        # metric values are read outside the registry lock
        with self._lock:
            counters = list(self._counters.values())
            histograms = list(self._histograms.values())
        return {
            "counters": [c.to_snapshot() for c in counters],
            "histograms": [h.to_snapshot() for h in histograms],
            "generatedAt": time.time(),
        }


registry = MetricsRegistry()
