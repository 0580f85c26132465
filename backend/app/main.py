"""
FastAPI application entry point.

Uses structured logging from core.logging module.
Includes security validation and request size limiting.
"""

from typing import Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from core.db import db
from core.logging import RequestLoggingMiddleware, configure_logging, get_logger
from core.security import SecurityConfigError, validate_security_config

from .config import get_settings
from .error_handlers import register_exception_handlers
from .middleware.request_id import RequestIDMiddleware
from .middleware.security import SecurityHeadersMiddleware
from .routers import auth as auth_router
from .routers import issues as issues_router


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Middleware to limit request body size."""

    def __init__(self, app, max_size_mb: int = 10):
        super().__init__(app)
        self.max_size = max_size_mb * 1024 * 1024
        self.max_size_mb = max_size_mb

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_size:
            return JSONResponse(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                content={
                    "detail": f"Maximum request size is {self.max_size_mb}MB",
                    "status_code": status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                },
            )

        return await call_next(request)


# Configure structured logging
settings = get_settings()
configure_logging(level="DEBUG" if settings.debug else "INFO")
logger = get_logger("api")


def validate_security_on_startup() -> None:
    """Validate security configuration before serving requests.

    Outside production a failing check is logged and skipped so that a
    developer can run the API with the default secret.
    """
    try:
        result = validate_security_config(
            jwt_secret=settings.jwt_secret_key,
            cors_origins=settings.cors_allowed_origins,
            database_url=settings.database_url,
            is_production=settings.is_production,
        )
        for warning in result.warnings:
            logger.warning("security_warning", message=warning)
    except SecurityConfigError:
        if settings.is_production:
            logger.error(
                "security_validation_failed_fatal",
                message="Security validation failed. Set JWT_SECRET_KEY to a strong value.",
            )
            raise
        logger.warning(
            "security_validation_skipped",
            message="Security validation bypassed (ENV is not production)",
        )
        return

    if settings.is_production:
        config_errors, config_warnings = settings.validate_production_config()
        for warning in config_warnings:
            logger.warning("config_warning", message=warning)
        if config_errors:
            raise SecurityConfigError(config_errors)

    logger.info("security_validation_passed")


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name, debug=settings.debug)

    app.add_middleware(RequestSizeLimitMiddleware, max_size_mb=settings.max_request_size_mb)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "Origin", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    # Added last so it runs first and the logging middleware sees the bound ID
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    @app.on_event("startup")
    async def startup_event():
        logger.info("app_startup", app_name=settings.app_name, env=settings.env)
        validate_security_on_startup()

        db.initialize(settings.database_url)
        db.create_all_tables()
        logger.info("database_initialized")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("app_shutdown")

    @app.get("/health", tags=["health"])
    def health_check():
        """Liveness probe; reports 503 when the store is unreachable."""
        result = db.health_check()
        if not result["healthy"]:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "unavailable"},
            )
        return {"status": "ok"}

    app.include_router(auth_router.router, prefix=settings.api_prefix)
    app.include_router(issues_router.router, prefix=settings.api_prefix)

    return app


app = create_app()
