"""Prometheus metrics for change detection."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

change_entries_total = Counter(
    "fieldaudit_change_entries_total",
    "Change entries produced, by field type.",
    ["field_type"],
)

resolution_failures_total = Counter(
    "fieldaudit_resolution_failures_total",
    "Referenced files or nested items that could not be resolved.",
    ["target"],
)

change_log_append_failures_total = Counter(
    "fieldaudit_change_log_append_failures_total",
    "Change entries the change log sink failed to store.",
)

detection_duration_seconds = Histogram(
    "fieldaudit_detection_duration_seconds",
    "Wall time of one change detection pass.",
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
)
