"""Prometheus metrics for netapi.

Network operations are counted and timed per operation and outcome. The
/metrics endpoint serves these in Prometheus exposition format.
"""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, Counter, Histogram, generate_latest


network_operation_duration = Histogram(
    "netapi_network_operation_seconds",
    "Duration of network operations",
    ["operation", "status"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10, float("inf")),
)

network_operation_errors = Counter(
    "netapi_network_operation_errors_total",
    "Total failed network operations",
    ["operation", "error"],
)


@contextmanager
def track_operation(operation: str) -> Iterator[None]:
    """Time the wrapped block and record its outcome."""
    start = time.monotonic()
    status = "success"
    try:
        yield
    except Exception as e:
        status = "error"
        network_operation_errors.labels(operation=operation, error=type(e).__name__).inc()
        raise
    finally:
        network_operation_duration.labels(operation=operation, status=status).observe(
            time.monotonic() - start
        )


def get_metrics() -> tuple[bytes, str]:
    """Generate Prometheus metrics output."""
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST
