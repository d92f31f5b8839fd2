"""Error Handlers — global exception handlers for the Bloglist API.

Invariants:
    - BloglistError → structured JSON with error code, kind, message, severity
    - RequestValidationError → VALIDATION_FAILED kind with field-level details
    - Unknown routes → 404 envelope (UNKNOWN_ENDPOINT)
    - Exception (catch-all) → never leaks internal details
    - PartiallyAppliedMutation logged at CRITICAL for reconciliation

Design Decisions:
    - Three-layer handler: domain (BloglistError), validation (Pydantic), catch-all (Exception)
    - Extracted from main.py (ADR: import fan-out < 10)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import BloglistError, ErrorKind, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_bloglist_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_bloglist_error_handler(app: FastAPI) -> None:
    """Register Bloglist domain/infrastructure error handler."""

    @app.exception_handler(BloglistError)
    async def bloglist_error_handler(request: Request, exc: BloglistError):
        """Handle all Bloglist domain/infrastructure errors."""
        level = (
            logging.CRITICAL if exc.kind is ErrorKind.PARTIALLY_APPLIED_MUTATION
            else logging.ERROR if exc.http_status >= 500
            else logging.WARNING
        )
        logger.log(
            level,
            f"BloglistError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "blog_id": exc.context.blog_id,
                "user_id": exc.context.user_id,
                "operation": exc.context.operation,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_http_error_handler(app: FastAPI) -> None:
    """Register handler for routing-level HTTP errors (unknown endpoint, bad method)."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        code = (
            "UNKNOWN_ENDPOINT" if exc.status_code == status.HTTP_404_NOT_FOUND
            else "HTTP_ERROR"
        )
        message = "Unknown endpoint" if code == "UNKNOWN_ENDPOINT" else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "code": code,
                    "kind": (
                        ErrorKind.NOT_FOUND.value if code == "UNKNOWN_ENDPOINT"
                        else ErrorKind.INTERNAL.value
                    ),
                    "message": message,
                    "category": "routing",
                    "severity": ErrorSeverity.WARNING.value,
                },
            },
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "kind": ErrorKind.INTERNAL.value,
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "kind": ErrorKind.VALIDATION_FAILED.value,
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
