"""Tests for the request metrics ring buffer."""

import threading

import pytest

from vendor_pricing.utils.metrics import MetricsBuffer


def test_oldest_samples_are_evicted():
    buf = MetricsBuffer(capacity=2)
    buf.record("a", 1.0, 200)
    buf.record("b", 2.0, 200)
    buf.record("c", 3.0, 200)
    assert [s.name for s in buf.snapshot()] == ["b", "c"]
    assert buf.summary()["evicted"] == 1


def test_drain_resets():
    buf = MetricsBuffer(capacity=10)
    buf.record("GET /health", 1.0, 200)
    samples = buf.drain()
    assert len(samples) == 1
    assert len(buf) == 0
    assert buf.summary() == {"samples": 0, "evicted": 0, "items": []}


def test_summary_aggregates_by_name():
    buf = MetricsBuffer(capacity=10)
    buf.record("POST /uploads", 10.0, 200)
    buf.record("POST /uploads", 30.0, 500)
    buf.record("GET /offers", 5.0, 200)
    items = {i["name"]: i for i in buf.summary()["items"]}
    assert items["POST /uploads"] == {"name": "POST /uploads", "count": 2, "mean_ms": 20.0, "max_ms": 30.0, "errors": 1}
    assert items["GET /offers"]["count"] == 1


def test_concurrent_records_stay_bounded():
    buf = MetricsBuffer(capacity=50)

    def worker():
        for _ in range(100):
            buf.record("x", 1.0, 200)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(buf) == 50
    assert buf.summary()["evicted"] == 350


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        MetricsBuffer(capacity=0)
