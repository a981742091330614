from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "flowstats_requests_total",
    "Total HTTP requests processed by FlowStats",
    ("method", "path", "status"),
)

REQUEST_LATENCY = Histogram(
    "flowstats_request_latency_seconds",
    "HTTP request latency in seconds",
    ("method", "path"),
)

REQUEST_ERRORS = Counter(
    "flowstats_request_errors_total",
    "HTTP requests resulting in server errors",
    ("method", "path", "status"),
)

STATS_COMPUTATIONS = Counter(
    "flowstats_computations_total",
    "Stats computations served, by view and timeframe",
    ("kind", "timeframe"),
)

ENTRIES_SCANNED = Counter(
    "flowstats_entries_scanned_total",
    "Day entries received for stats computation",
)

__all__ = [
    "ENTRIES_SCANNED",
    "REQUEST_COUNT",
    "REQUEST_ERRORS",
    "REQUEST_LATENCY",
    "STATS_COMPUTATIONS",
]
