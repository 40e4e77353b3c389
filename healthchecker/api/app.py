"""FastAPI application factory for the metrics endpoint.

Usage::

    from healthchecker.api.app import create_app

    app = create_app(registry=registry)

Used by both the production bootstrap (``healthchecker.app``) and tests.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from healthchecker.api.routes import router
from healthchecker.observability.metrics import GaugeRegistry

_log = structlog.get_logger(component="api.app")


def create_app(registry: GaugeRegistry) -> FastAPI:
    """Create the FastAPI app serving /metrics and /healthz from *registry*."""
    from healthchecker import __version__

    app = FastAPI(
        title="OpenShift Health Checker",
        summary="Binary platform health gauges for Prometheus",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    # Route handlers read the registry from app.state; nothing is global.
    app.state.registry = registry
    app.include_router(router)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unhandled exceptions; never expose stack traces."""
        _log.error(
            "unhandled_exception",
            path=str(request.url.path),
            method=request.method,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content={"error": "INTERNAL_ERROR", "detail": "An unexpected error occurred."},
        )

    return app
