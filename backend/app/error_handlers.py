"""
Custom exception handlers for FastAPI.

Security:
- Request IDs are logged server-side for tracing but NOT exposed to clients
- Generic error messages for 500 errors to prevent information disclosure
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException

from core.logging import get_logger

logger = get_logger("backend.errors")


def _get_request_id() -> str:
    """Get the current request ID from the logging context."""
    return structlog.contextvars.get_contextvars().get("request_id", "-")


def _response_payload(detail: str, status_code: int) -> dict:
    """Create error response payload."""
    return {
        "detail": detail,
        "status_code": status_code,
    }


def _summarize_errors(errors: list[dict]) -> tuple[str, list[dict]]:
    """Flatten pydantic errors into a one-line message and a JSON-safe list."""
    cleaned = []
    parts = []
    for error in errors:
        loc = [str(p) for p in error.get("loc", ()) if p != "body"]
        msg = error.get("msg", "Invalid value")
        cleaned.append({"loc": loc, "msg": msg, "type": error.get("type", "")})
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return "; ".join(parts) or "Validation error", cleaned


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.warning(
            "http_exception",
            detail=exc.detail,
            status_code=exc.status_code,
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_response_payload(str(exc.detail), exc.status_code),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # Malformed create/update payloads are client errors: 400, not 422
        detail, errors = _summarize_errors(exc.errors())
        logger.warning("request_validation_error", errors=errors, request_id=_get_request_id())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                **_response_payload(detail, status.HTTP_400_BAD_REQUEST),
                "errors": errors,
            },
        )

    @app.exception_handler(ValidationError)
    async def validation_exception_handler(request: Request, exc: ValidationError):
        detail, errors = _summarize_errors(exc.errors())
        logger.warning("validation_error", errors=errors, request_id=_get_request_id())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                **_response_payload(detail, status.HTTP_400_BAD_REQUEST),
                "errors": errors,
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_response_payload("Internal server error", 500),
        )
