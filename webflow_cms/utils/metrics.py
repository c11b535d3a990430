"""
Prometheus Metrics Module

Application metrics using the prometheus_client library, exposed at
/metrics for Prometheus scraping. Covers inbound HTTP requests and the
outbound calls this service makes to the Webflow API.
"""

import re
import time
from collections.abc import Callable
from functools import wraps

from prometheus_client import Counter, Histogram, Info

# =============================================================================
# Application Info
# =============================================================================

APP_INFO = Info("webflow_cms_app", "Webflow CMS Manager information")


def set_app_info(version: str, environment: str) -> None:
    """Set application info labels."""
    APP_INFO.info({"version": version, "environment": environment})


# =============================================================================
# HTTP Request Metrics
# =============================================================================

HTTP_REQUESTS_TOTAL = Counter(
    "webflow_cms_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "webflow_cms_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# =============================================================================
# Webflow API Metrics
# =============================================================================

WEBFLOW_API_REQUESTS_TOTAL = Counter(
    "webflow_api_requests_total",
    "Total calls made to the Webflow API",
    ["operation", "outcome"],  # success, error
)

WEBFLOW_API_REQUEST_DURATION_SECONDS = Histogram(
    "webflow_api_request_duration_seconds",
    "Webflow API call duration in seconds",
    ["operation"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

FIELD_SCHEMA_SOURCE_TOTAL = Counter(
    "webflow_field_schema_source_total",
    "Which fallback tier produced a collection field schema",
    ["tier"],  # fields_endpoint, collection_get, legacy_http, failed
)

# Webflow object IDs are 24 hex characters
_WEBFLOW_ID = re.compile(r"^[0-9a-f]{24}$")


def normalize_path(path: str) -> str:
    """
    Normalize URL path for metrics by replacing dynamic segments.

    Examples:
        /api/collections/580e63fc8c9a982ac9b8b745/items -> /api/collections/{id}/items
    """
    normalized = []
    for part in path.split("/"):
        if part.isdigit() or _WEBFLOW_ID.match(part):
            normalized.append("{id}")
        else:
            normalized.append(part)
    return "/".join(normalized)


def record_http_request(method: str, path: str, status_code: int, duration_seconds: float) -> None:
    """Record one inbound HTTP request."""
    endpoint = normalize_path(path)
    HTTP_REQUEST_DURATION_SECONDS.labels(method=method, endpoint=endpoint).observe(duration_seconds)
    HTTP_REQUESTS_TOTAL.labels(method=method, endpoint=endpoint, status_code=str(status_code)).inc()


def record_schema_source(tier: str) -> None:
    """Record which fallback tier resolved a field schema."""
    FIELD_SCHEMA_SOURCE_TOTAL.labels(tier=tier).inc()


def track_webflow_call(operation: str):
    """
    Decorator to track Webflow API call metrics.

    Usage:
        @track_webflow_call("list_items")
        async def list_items(self, collection_id):
            ...
    """

    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            outcome = "error"
            try:
                result = await func(*args, **kwargs)
                outcome = "success"
                return result
            finally:
                duration = time.perf_counter() - start_time
                WEBFLOW_API_REQUESTS_TOTAL.labels(operation=operation, outcome=outcome).inc()
                WEBFLOW_API_REQUEST_DURATION_SECONDS.labels(operation=operation).observe(duration)

        return wrapper

    return decorator
