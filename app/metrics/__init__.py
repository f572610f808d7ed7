# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Prometheus metrics for the ops-logbook service."""
from prometheus_client import Counter, Histogram

EVENTS_CREATED = Counter(
    "logbook_events_created_total", "Total logbook events created", ["severity"]
)
EVENTS_LISTED = Histogram(
    "logbook_events_listed", "Rows returned per list request",
    buckets=[0, 1, 5, 10, 25, 50, 100, 200],
)
STORAGE_ERRORS = Counter(
    "logbook_storage_errors_total", "Storage failures surfaced to clients", ["kind"]
)
REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "endpoint", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "HTTP request latency", ["method", "endpoint"]
)
HTTP_ERRORS = Counter(
    "http_errors_total", "Total HTTP errors", ["method", "endpoint", "status"]
)
