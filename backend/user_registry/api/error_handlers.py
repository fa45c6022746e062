"""Error Handlers: global exception handlers mapping every failure to the envelope.

Invariants:
    - UserRegistryError → exc.http_status with exc.to_response()
    - RequestValidationError (malformed JSON) → 400 "Invalid request body"
    - Unmatched path or method (Starlette 404/405) → 404 "Route not found"
    - Exception (catch-all) → 500, never leaks internal details
    - Every body has success=False and a message

Design Decisions:
    - Four-layer handler: domain, request validation, HTTP, catch-all
    - 405 folded into 404: clients only distinguish "served" from "not served"
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_registry.core.errors import RouteNotFoundError, UserRegistryError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:
    """Register User Registry domain/infrastructure error handler."""

    @app.exception_handler(UserRegistryError)
    async def user_registry_error_handler(request: Request, exc: UserRegistryError):
        """Handle all User Registry domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"{type(exc).__name__}: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "method": request.method,
                "status_code": exc.http_status,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register request parsing error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle unparseable request bodies."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_http_error_handler(app: FastAPI) -> None:
    """Register router-level HTTP error handler."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException,
    ):
        """Unmatched routes become the standard 404 envelope."""
        if exc.status_code in (
            status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED,
        ):
            not_found = RouteNotFoundError(request.url.path)
            logger.info(
                f"Route not found: {request.method} {request.url.path}",
                extra={"error_code": not_found.code},
            )
            return JSONResponse(
                status_code=not_found.http_status,
                content=not_found.to_response(),
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": "Internal server error"},
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build envelope listing each parse failure as 'location: message'."""
    details = ", ".join(
        f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}"
        for e in exc.errors()
    )
    return {
        "success": False,
        "message": "Invalid request body",
        "error": details,
    }
