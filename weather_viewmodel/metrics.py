"""Prometheus metrics for view model operations."""

from prometheus_client import Counter, Histogram

OPERATION_COUNT = Counter(
    "viewmodel_operations_total",
    "Completed view model operations",
    ["operation", "outcome"],
)
OPERATION_LATENCY = Histogram(
    "viewmodel_operation_duration_seconds",
    "View model operation duration in seconds",
    ["operation"],
)
