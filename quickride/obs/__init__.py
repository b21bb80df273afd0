"""Observability utilities."""

from .audit import AuditLogRecord, AuditMiddleware, mask_payload
from .metrics import (
    AGREEMENT_PAGES_HISTOGRAM,
    BUSINESS_DECLINE_COUNTER,
    DIVIDEND_AMOUNT_COUNTER,
    DIVIDEND_RECORDS_COUNTER,
    REQUEST_COUNTER,
    REQUEST_ERROR_COUNTER,
    REQUEST_LATENCY_SECONDS,
    PrometheusMiddleware,
    metrics_router,
    record_decline,
)
from .tracing import (
    business_span,
    initialise_tracing,
    instrument_fastapi_app,
    instrument_sqlalchemy_engine,
)

__all__ = [
    "AGREEMENT_PAGES_HISTOGRAM",
    "AuditLogRecord",
    "AuditMiddleware",
    "BUSINESS_DECLINE_COUNTER",
    "DIVIDEND_AMOUNT_COUNTER",
    "DIVIDEND_RECORDS_COUNTER",
    "PrometheusMiddleware",
    "REQUEST_COUNTER",
    "REQUEST_ERROR_COUNTER",
    "REQUEST_LATENCY_SECONDS",
    "business_span",
    "initialise_tracing",
    "instrument_fastapi_app",
    "instrument_sqlalchemy_engine",
    "mask_payload",
    "metrics_router",
    "record_decline",
]
