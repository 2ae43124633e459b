"""Prometheus metrics for log collection.

All metrics are labelled by ``gatherer`` so that several gatherers sharing
the collection helper can be told apart.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

log_records_total = Counter(
    "kubegather_log_records_total",
    "Container log records produced",
    ["gatherer"],
)

log_errors_total = Counter(
    "kubegather_log_errors_total",
    "Errors reported while collecting container logs",
    ["gatherer", "kind"],
)

log_bytes_read_total = Counter(
    "kubegather_log_bytes_read_total",
    "Log bytes received from the API server",
    ["gatherer"],
)

log_truncated_total = Counter(
    "kubegather_log_truncated_total",
    "Container log streams cut short by the byte cap",
    ["gatherer"],
)

collection_duration_seconds = Histogram(
    "kubegather_collection_duration_seconds",
    "Wall-clock duration of one log collection",
    ["gatherer"],
    buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
)
