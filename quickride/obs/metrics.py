"""Prometheus metrics for the API process."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_LATENCY_SECONDS = Histogram(
    "http_request_latency_seconds",
    "Latency of HTTP requests in seconds.",
    labelnames=("method", "route"),
)
REQUEST_COUNTER = Counter(
    "http_requests_total",
    "Total number of HTTP requests processed.",
    labelnames=("method", "route", "status"),
)
REQUEST_ERROR_COUNTER = Counter(
    "http_request_errors_total",
    "Total number of HTTP requests that resulted in server errors.",
    labelnames=("method", "route", "status"),
)
BUSINESS_DECLINE_COUNTER = Counter(
    "business_declines_total",
    "Expected, user-facing declines returned by the API.",
    labelnames=("reason",),
)
DIVIDEND_RECORDS_COUNTER = Counter(
    "dividend_records_created_total",
    "Number of dividend records written.",
)
DIVIDEND_AMOUNT_COUNTER = Counter(
    "dividend_gross_amount_total",
    "Sum of gross dividend amounts paid out.",
)
AGREEMENT_PAGES_HISTOGRAM = Histogram(
    "agreement_document_pages",
    "Page count of rendered agreement documents.",
    buckets=(1, 2, 3, 4, 5, 8, 13),
)


def _route_label(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware that records request metrics for Prometheus scraping."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:  # type: ignore[override]
        method = request.method
        start_time = time.perf_counter()
        status = "500"

        try:
            response = await call_next(request)
            status = str(response.status_code)
            if response.status_code >= 500:
                REQUEST_ERROR_COUNTER.labels(method=method, route=_route_label(request), status=status).inc()
            return response
        except Exception:
            REQUEST_ERROR_COUNTER.labels(method=method, route=_route_label(request), status="500").inc()
            raise
        finally:
            route = _route_label(request)
            REQUEST_LATENCY_SECONDS.labels(method=method, route=route).observe(time.perf_counter() - start_time)
            REQUEST_COUNTER.labels(method=method, route=route, status=status).inc()


metrics_router = APIRouter(tags=["observability"])


@metrics_router.get("/metrics", include_in_schema=False)
def metrics_endpoint() -> Response:
    """Expose Prometheus metrics for scraping."""
    payload = generate_latest()
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


def record_decline(reason: str) -> None:
    BUSINESS_DECLINE_COUNTER.labels(reason=reason).inc()


__all__ = [
    "AGREEMENT_PAGES_HISTOGRAM",
    "BUSINESS_DECLINE_COUNTER",
    "DIVIDEND_AMOUNT_COUNTER",
    "DIVIDEND_RECORDS_COUNTER",
    "PrometheusMiddleware",
    "REQUEST_COUNTER",
    "REQUEST_ERROR_COUNTER",
    "REQUEST_LATENCY_SECONDS",
    "metrics_endpoint",
    "metrics_router",
    "record_decline",
]
