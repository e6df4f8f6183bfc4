"""Prometheus metrics for flystate."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

remote_calls_total = Counter(
    "flystate_remote_calls_total",
    "Remote API calls by operation and outcome",
    ["operation", "outcome"],
)

remote_call_duration_seconds = Histogram(
    "flystate_remote_call_duration_seconds",
    "Remote API call latency",
    ["operation"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
)

secret_mutations_total = Counter(
    "flystate_secret_mutations_total",
    "Secret entries submitted in set/unset batches",
    ["kind"],
)

secret_drift_total = Counter(
    "flystate_secret_drift_total",
    "Managed secrets found changed or removed out-of-band",
    ["kind"],
)

lifecycle_operations_total = Counter(
    "flystate_lifecycle_operations_total",
    "Lifecycle operations by resource type, operation and outcome",
    ["resource", "operation", "outcome"],
)
