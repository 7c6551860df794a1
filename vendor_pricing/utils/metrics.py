"""Bounded in-memory buffer of request timings.

The buffer is owned by whoever creates it (the API app keeps one on app.state);
oldest samples are evicted once capacity is reached. Samples are observability
only and are drained on an interval, so nothing may depend on them.
"""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass
class MetricSample:
    """One timed operation (usually an HTTP request)."""

    name: str
    duration_ms: float
    status: int | None = None
    recorded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class MetricsBuffer:
    """Fixed-capacity ring buffer of MetricSample, safe to use from worker threads."""

    def __init__(self, capacity: int = 1000) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._samples: deque[MetricSample] = deque(maxlen=capacity)
        self._lock = threading.Lock()
        self._evicted = 0

    @property
    def capacity(self) -> int:
        return self._samples.maxlen or 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)

    def record(self, name: str, duration_ms: float, status: int | None = None) -> None:
        with self._lock:
            if len(self._samples) == self._samples.maxlen:
                self._evicted += 1
            self._samples.append(MetricSample(name=name, duration_ms=duration_ms, status=status))

    def snapshot(self) -> list[MetricSample]:
        """Copy of the current samples, oldest first."""
        with self._lock:
            return list(self._samples)

    def drain(self) -> list[MetricSample]:
        """Return all samples and reset the buffer."""
        with self._lock:
            samples = list(self._samples)
            self._samples.clear()
            self._evicted = 0
            return samples

    def summary(self, samples: list[MetricSample] | None = None) -> dict[str, Any]:
        """Per-name count, mean and max duration, plus error count (status >= 500)."""
        if samples is None:
            samples = self.snapshot()
            with self._lock:
                evicted = self._evicted
        else:
            evicted = 0
        by_name: dict[str, dict[str, Any]] = {}
        for s in samples:
            entry = by_name.setdefault(
                s.name, {"count": 0, "total_ms": 0.0, "max_ms": 0.0, "errors": 0}
            )
            entry["count"] += 1
            entry["total_ms"] += s.duration_ms
            entry["max_ms"] = max(entry["max_ms"], s.duration_ms)
            if s.status is not None and s.status >= 500:
                entry["errors"] += 1
        items = [
            {
                "name": name,
                "count": e["count"],
                "mean_ms": round(e["total_ms"] / e["count"], 2),
                "max_ms": round(e["max_ms"], 2),
                "errors": e["errors"],
            }
            for name, e in sorted(by_name.items())
        ]
        return {"samples": len(samples), "evicted": evicted, "items": items}
