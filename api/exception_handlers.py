"""
Exception handlers for converting pipeline exceptions to HTTP responses.

Routes raise domain exceptions from pipeline.core.exceptions; this module
maps them to status codes in one place.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import logfire
from fastapi import Request, status
from fastapi.responses import JSONResponse

from pipeline.core.exceptions import (
    ExternalAPIError,
    NotFoundError,
    PersistenceError,
    StepExecutionError,
    ValidationError,
)

if TYPE_CHECKING:
    from fastapi import FastAPI


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register handlers for pipeline exceptions.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(_: Request, exc: ValidationError) -> JSONResponse:
        """Convert ValidationError to 400 response."""
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": str(exc) or "Validation failed", "field": exc.field},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(_: Request, exc: NotFoundError) -> JSONResponse:
        """Convert NotFoundError to 404 response."""
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": str(exc) or "Resource not found"},
        )

    @app.exception_handler(PersistenceError)
    async def handle_persistence_error(request: Request, exc: PersistenceError) -> JSONResponse:
        """Convert PersistenceError to 500 response with the classified message."""
        logfire.error(
            "Persistence error",
            path=request.url.path,
            error=str(exc),
            detail=exc.detail,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc), "detail": exc.detail},
        )

    @app.exception_handler(ExternalAPIError)
    async def handle_external_api_error(_: Request, exc: ExternalAPIError) -> JSONResponse:
        """Convert ExternalAPIError to 502 response."""
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"error": str(exc) or "Text generation backend failed"},
        )

    @app.exception_handler(StepExecutionError)
    async def handle_step_execution_error(_: Request, exc: StepExecutionError) -> JSONResponse:
        """Convert a StepExecutionError that escaped the runner to 500 response."""
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc), "failedStep": exc.step_name},
        )
