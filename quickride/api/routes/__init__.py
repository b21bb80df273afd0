"""Top level API router registration."""
from fastapi import APIRouter, FastAPI

from quickride.api.routes import admin, agreements, auth, catalog, dividends, health, shareholders


def register_routes(application: FastAPI) -> None:
    """Register all API routers with the FastAPI application."""
    api_router = APIRouter(prefix="/api")

    api_router.include_router(health.router, tags=["health"])
    api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
    api_router.include_router(agreements.router, tags=["agreements"])
    api_router.include_router(shareholders.router, prefix="/shareholders", tags=["shareholders"])
    api_router.include_router(catalog.router, tags=["catalog"])
    api_router.include_router(dividends.router, tags=["dividends"])
    api_router.include_router(admin.router, tags=["admin"])

    application.include_router(api_router)


__all__ = ["register_routes"]
