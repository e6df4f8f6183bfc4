"""FastAPI application factory for flystate.

Usage::

    from flystate.api.app import create_app

    app = create_app(registry=build_registry(api), api=api, config=config)

The factory is used by both the production bootstrap (``flystate.app``) and
unit tests.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import ValidationError as PayloadValidationError

from flystate.api.routes import APIError, router
from flystate.api.schemas import ErrorResponse
from flystate.client.api import FlyAPI
from flystate.models.config import FlyStateConfig

_log = structlog.get_logger(component="api.app")

_API_PREFIX = "/api/v1"


def _first_error(errors: list[Any]) -> str:
    if not errors:
        return "invalid request body"
    locs = errors[0].get("loc", ())
    where = ".".join(str(loc) for loc in locs)
    msg = str(errors[0].get("msg", ""))
    return f"{where}: {msg}" if where else msg


def _envelope(status_code: int, error: str, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=error, detail=detail).model_dump())


def create_app(
    registry: dict[str, Any],
    api: FlyAPI | None = None,
    config: FlyStateConfig | None = None,
) -> FastAPI:
    """Create and configure the flystate FastAPI application.

    Args:
        registry: Resource type name -> lifecycle controller.
        api:      Shared FlyAPI handle, used by the data source lookups.
        config:   FlyStateConfig, kept for handlers that need it.

    Returns:
        Configured FastAPI application, ready to be served by uvicorn.
    """
    from flystate import __version__

    app = FastAPI(
        title="flystate",
        summary="Declarative state reconciliation for Fly.io apps and secrets",
        version=__version__,
        docs_url="/api/v1/docs",
        redoc_url="/api/v1/redoc",
        openapi_url="/api/v1/openapi.json",
    )

    app.state.registry = registry
    app.state.api = api
    app.state.config = config

    app.include_router(router, prefix=_API_PREFIX)

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # -----------------------------------------------------------------------
    # Exception handlers
    # -----------------------------------------------------------------------

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return _envelope(400, "INVALID_REQUEST", _first_error(list(exc.errors())))

    @app.exception_handler(PayloadValidationError)
    async def payload_exception_handler(_request: Request, exc: PayloadValidationError) -> JSONResponse:
        """Resource payloads are validated by the codecs after routing."""
        return _envelope(400, "INVALID_REQUEST", _first_error(list(exc.errors())))

    @app.exception_handler(APIError)
    async def api_error_handler(_request: Request, exc: APIError) -> JSONResponse:
        return _envelope(exc.status_code, exc.error, exc.detail)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unhandled exceptions; never expose stack traces."""
        _log.error(
            "unhandled_exception",
            path=str(request.url.path),
            method=request.method,
            error=str(exc),
        )
        return _envelope(500, "INTERNAL_ERROR", "An unexpected error occurred.")

    return app
