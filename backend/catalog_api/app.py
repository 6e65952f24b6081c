"""Application factory for the ShadowPlex catalog API."""
import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from .errors import CatalogError
from .routers import admin, catalog, health, movies, series, session, site_settings
from .settings import CatalogSettings
from .state import AppState

logger = logging.getLogger(__name__)


async def _catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
        message = f"Invalid {field or 'request'}: {first.get('msg', 'invalid value')}"
    else:  # pragma: no cover - FastAPI always reports at least one error
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Global error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


def create_app(
    settings: CatalogSettings | None = None,
    *,
    provider_transport: httpx.BaseTransport | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application."""

    resolved_settings = settings or CatalogSettings()
    app_state = AppState(settings=resolved_settings, provider_transport=provider_transport)

    app = FastAPI(title="ShadowPlex Catalog API", version="0.1.0")
    app.state.app_state = app_state
    app.state.settings = app_state.settings

    app.add_middleware(
        SessionMiddleware,
        secret_key=resolved_settings.session_secret,
        session_cookie="shadowplex_session",
        same_site="lax",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(CatalogError, _catalog_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    for router in (
        health.router,
        session.router,
        site_settings.router,
        movies.router,
        series.router,
        catalog.router,
        admin.router,
    ):
        app.include_router(router)

    return app
