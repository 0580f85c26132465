"""
structlog setup shared by the gateway and the CLI.

Development runs get coloured console lines; production emits one JSON object
per event. Every entry carries app="issue_tracker" and any bound request_id.
"""

import logging
import sys
import time
import uuid
from collections.abc import Mapping, MutableMapping
from functools import lru_cache
from typing import Any

import structlog
from structlog.types import Processor


def _is_development() -> bool:
    """Check if running in development mode."""
    from .config import get_settings

    settings = get_settings()
    return settings.debug or not settings.is_production


def _add_app_context(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> Mapping[str, Any] | str | bytes | bytearray | tuple[Any, ...]:
    event_dict["app"] = "issue_tracker"
    return event_dict


def get_processors() -> list[Processor]:
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_app_context,
    ]

    return shared_processors + _renderers(_is_development())


def _renderers(development: bool) -> list[Processor]:
    if development:
        return [structlog.dev.ConsoleRenderer(colors=True, exception_formatter=structlog.dev.plain_traceback)]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


@lru_cache(maxsize=1)
def configure_logging(level: str = "INFO", stream: Any = None) -> None:
    """
    Configure structured logging. Call once at application startup.

    The CLI passes stderr so that log lines never mix with command output.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=get_processors(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)  # type: ignore[no-any-return]


def bind_context(**kwargs: Any) -> None:
    """Bind context variables included in all subsequent log entries."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all context variables."""
    structlog.contextvars.clear_contextvars()


class RequestLoggingMiddleware:
    """
    Log request_started and request_complete for every HTTP request.

    The completion line is info below 400, warning for client errors and
    error for server errors. Context bound during the request is cleared after.
    """

    def __init__(self, app):
        self.app = app
        self._logger: structlog.stdlib.BoundLogger | None = None

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        if self._logger is None:
            self._logger = get_logger("http")
        return self._logger

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start_time = time.perf_counter()
        path = scope.get("path", "")
        method = scope.get("method", "")

        if "request_id" not in structlog.contextvars.get_contextvars():
            bind_context(request_id=uuid.uuid4().hex[:8])

        self.logger.info("request_started", method=method, path=path)

        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            log = getattr(self.logger, _level_for(status_code))
            log(
                "request_complete",
                method=method,
                path=path,
                status_code=status_code,
                duration_seconds=round(time.perf_counter() - start_time, 3),
            )

            clear_context()


def _level_for(status_code: int) -> str:
    if status_code >= 500:
        return "error"
    if status_code >= 400:
        return "warning"
    return "info"


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "RequestLoggingMiddleware",
]
