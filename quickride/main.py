"""FastAPI application entrypoint."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from quickride.api.routes import register_routes
from quickride.core.config import Settings, get_settings
from quickride.core.errors import BusinessDecline
from quickride.core.logging import configure_logging
from quickride.obs import (
    AuditMiddleware,
    PrometheusMiddleware,
    initialise_tracing,
    instrument_fastapi_app,
    metrics_router,
    record_decline,
)
from quickride.schemas import DeclineResponse, FaultResponse

logger = logging.getLogger("quickride.api")


async def business_decline_handler(request: Request, exc: BusinessDecline) -> JSONResponse:
    """Declines are ordinary outcomes: HTTP 200 with ``success: false``."""
    record_decline(exc.reason)
    logger.info("%s %s declined (%s): %s", request.method, request.url.path, exc.reason, exc.message)
    body = DeclineResponse(reason=exc.reason, message=exc.message)
    return JSONResponse(status_code=200, content=body.model_dump())


async def fault_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s failed", request.method, request.url.path, exc_info=exc)
    body = FaultResponse(message="Internal server error")
    return JSONResponse(status_code=500, content=body.model_dump())


def create_application(settings: Settings | None = None) -> FastAPI:
    """Application factory used by ASGI servers and tests."""
    settings = settings or get_settings()
    configure_logging(level=settings.log_level)

    if settings.enable_tracing:
        initialise_tracing(service_name=settings.app_name, endpoint=settings.otel_exporter_endpoint)

    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
    )

    application.add_exception_handler(BusinessDecline, business_decline_handler)
    application.add_exception_handler(Exception, fault_handler)

    application.add_middleware(AuditMiddleware, settings=settings)
    if settings.enable_metrics:
        application.add_middleware(PrometheusMiddleware)
        application.include_router(metrics_router)
    register_routes(application)

    if settings.enable_tracing:
        instrument_fastapi_app(application)

    return application


app = create_application()
