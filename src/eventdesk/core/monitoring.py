"""Prometheus metrics and Sentry integration.

Provides:
- MetricsMiddleware: records request count and latency per route template
- Planner counters for meeting enrichment and the seed migration
- init_sentry(): Initialize Sentry when a DSN is configured
- get_metrics_response(): Exposition body for the /metrics route
"""

from __future__ import annotations

import time

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Label used for requests that matched no route (404s, scanners)
UNMATCHED_ROUTE = "<unmatched>"

# ── HTTP Metrics ─────────────────────────────────────────────────────────────

http_requests_total = Counter(
    "http_requests_total",
    "HTTP requests handled, by route template and status",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds, by route template",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

# ── Planner Metrics ──────────────────────────────────────────────────────────

meetings_enriched_total = Counter(
    "meetings_enriched_total",
    "Meetings returned by the enrichment step",
)

enrichment_lookups_total = Counter(
    "enrichment_lookups_total",
    "Store lookups issued while enriching meetings",
    ["kind"],
)

migration_records_total = Counter(
    "migration_records_total",
    "Seed records processed by the mock data migration",
    ["entity", "outcome"],
)


# ── Metrics Middleware ───────────────────────────────────────────────────────


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record request count and latency for every request except /metrics.

    The endpoint label is the matched route template (``/api/meetings/{meeting_id}``),
    never the raw path, so ids do not turn into label values.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            endpoint = _route_template(request)
            http_requests_total.labels(request.method, endpoint, str(status_code)).inc()
            http_request_duration_seconds.labels(request.method, endpoint).observe(
                time.perf_counter() - start
            )


# ── Sentry Integration ───────────────────────────────────────────────────────


def init_sentry(dsn: str, environment: str) -> None:
    """Initialize Sentry SDK with the Starlette and FastAPI integrations."""
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.starlette import StarletteIntegration

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        traces_sample_rate=0.1 if environment == "production" else 1.0,
        send_default_pii=False,
        integrations=[StarletteIntegration(), FastApiIntegration()],
    )


# ── Metrics Endpoint ─────────────────────────────────────────────────────────


def get_metrics_response() -> Response:
    return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)
