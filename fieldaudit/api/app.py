"""FastAPI application factory for fieldaudit.

Usage::

    from fieldaudit.api.app import create_app

    app = create_app(change_log=change_log, config=config)

The factory is designed for use by both the production bootstrap
(``fieldaudit.app``) and unit tests.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from fieldaudit.api.routes import router
from fieldaudit.api.schemas import ErrorResponse
from fieldaudit.ledger import ChangeLog
from fieldaudit.ledger.memory import InMemoryChangeLog
from fieldaudit.models.config import FieldAuditConfig

_log = structlog.get_logger(component="api.app")

_API_PREFIX = "/api/v1"


def create_app(
    change_log: ChangeLog | None = None,
    config: FieldAuditConfig | None = None,
) -> FastAPI:
    """Create and configure the fieldaudit FastAPI application.

    Args:
        change_log: Sink for detected entries.  Defaults to an in-memory log.
        config:     FieldAuditConfig.  Supplies exclusion sets and time zone.

    Returns:
        Configured FastAPI application, ready to be served by uvicorn.
    """
    from fieldaudit import __version__

    config = config or FieldAuditConfig()

    app = FastAPI(
        title="fieldaudit",
        summary="Field-level change auditing API",
        version=__version__,
        description=(
            "fieldaudit compares two revisions of a record and records "
            "human-readable, field-level differences, including nested paragraphs."
        ),
        docs_url="/api/v1/docs",
        redoc_url="/api/v1/redoc",
        openapi_url="/api/v1/openapi.json",
    )

    # Route handlers read their collaborators from app.state.
    app.state.change_log = change_log if change_log is not None else InMemoryChangeLog()
    app.state.audit_config = config.audit

    app.include_router(router, prefix=_API_PREFIX)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        _request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Map Pydantic validation errors to our error envelope."""
        errors = exc.errors()
        detail = ""
        if errors:
            locs = errors[0].get("loc", ())
            field = ".".join(str(part) for part in locs[1:]) if locs else ""
            detail = f"{field}: {errors[0].get('msg', '')}" if field else str(errors[0].get("msg", ""))

        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error="INVALID_REQUEST", detail=detail).model_dump(),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Catch-all for unhandled exceptions; never expose stack traces."""
        _log.error(
            "unhandled_exception",
            path=str(request.url.path),
            method=request.method,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="INTERNAL_ERROR",
                detail="An unexpected error occurred.",
            ).model_dump(),
        )

    return app
