"""Error handlers for API routes.

Provides one error response format across all HTTP endpoints. The bridge
request endpoint itself reports pipeline failures inside its response
body; these handlers cover what escapes it (validation, unknown routes,
unexpected errors).
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.core.exceptions import (
    AllParticipantsFailedError,
    ParticipantConfigError,
    ReconciliationError,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Error Response Model
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response model.

    Attributes:
        error: Error type/category
        detail: Human-readable error description
        code: Optional machine-readable error code
        path: Optional request path that caused the error
    """

    error: str = Field(..., description="Error type or category")
    detail: str = Field(..., description="Human-readable error description")
    code: str | None = Field(default=None, description="Machine-readable error code")
    path: str | None = Field(default=None, description="Request path that caused the error")


# =============================================================================
# Exception Handlers
# =============================================================================

async def http_exception_handler(
    request: Request,
    exc: HTTPException,
) -> JSONResponse:
    """Handle HTTPException with ErrorResponse schema."""
    error_type = {
        400: "BadRequest",
        404: "NotFound",
        405: "MethodNotAllowed",
        422: "ValidationError",
        500: "InternalServerError",
        503: "ServiceUnavailable",
    }.get(exc.status_code, "Error")

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=error_type,
            detail=str(exc.detail),
            path=str(request.url.path),
        ).model_dump(),
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Handle Pydantic validation errors with field details."""
    field_errors = []
    for error in exc.errors():
        loc = ".".join(str(x) for x in error.get("loc", []))
        msg = error.get("msg", "Invalid value")
        field_errors.append(f"{loc}: {msg}")

    detail = "; ".join(field_errors) if field_errors else "Validation error"

    return JSONResponse(
        status_code=422,
        content=ErrorResponse(
            error="ValidationError",
            detail=detail,
            code="VALIDATION_ERROR",
            path=str(request.url.path),
        ).model_dump(),
    )


async def reconciliation_error_handler(
    request: Request,
    exc: ReconciliationError,
) -> JSONResponse:
    """Handle pipeline errors raised outside the request handler."""
    if isinstance(exc, ParticipantConfigError):
        status_code, code = 400, "PARTICIPANT_CONFIG_ERROR"
    elif isinstance(exc, AllParticipantsFailedError):
        status_code, code = 503, "ALL_PARTICIPANTS_FAILED"
    else:
        status_code, code = 500, "RECONCILIATION_ERROR"

    logger.error("Reconciliation error on %s: %s", request.url.path, exc.message)

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=type(exc).__name__,
            detail=exc.message,
            code=code,
            path=str(request.url.path),
        ).model_dump(),
    )


async def generic_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle uncaught exceptions."""
    logger.exception(
        "Unhandled exception",
        extra={
            "path": str(request.url.path),
            "error_type": type(exc).__name__,
        },
    )

    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="InternalServerError",
            detail="An unexpected error occurred",
            code="INTERNAL_ERROR",
            path=str(request.url.path),
        ).model_dump(),
    )


# =============================================================================
# Registration Function
# =============================================================================

def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers with the FastAPI app."""
    app.add_exception_handler(
        HTTPException,
        http_exception_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(
        RequestValidationError,
        validation_exception_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(
        ReconciliationError,
        reconciliation_error_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(
        Exception,
        generic_exception_handler,
    )


__all__ = [
    "ErrorResponse",
    "register_error_handlers",
]
