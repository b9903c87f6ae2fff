from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "tracker_requests_total",
    "Total HTTP requests processed by the tracker",
    ("method", "path", "status"),
)

REQUEST_LATENCY = Histogram(
    "tracker_request_latency_seconds",
    "HTTP request latency in seconds",
    ("method", "path"),
)

REQUEST_ERRORS = Counter(
    "tracker_request_errors_total",
    "HTTP requests resulting in server errors",
    ("method", "path", "status"),
)

TRACKER_ACTIONS = Counter(
    "tracker_actions_total",
    "Tracker actions processed, by whether they changed state",
    ("action", "applied"),
)

TRACKER_STATE_WRITE_ERRORS = Counter(
    "tracker_state_write_errors_total",
    "Failures writing the tracker state file",
)

__all__ = [
    "REQUEST_COUNT",
    "REQUEST_ERRORS",
    "REQUEST_LATENCY",
    "TRACKER_ACTIONS",
    "TRACKER_STATE_WRITE_ERRORS",
]
