"""Request logging middleware.

One ``request_started`` and one ``request_completed`` (or ``request_failed``)
event per request. Tenant and user ids are read from ``request.state``
after the handler ran, where tenant resolution and the auth dependencies
leave them.
"""

import time
from typing import TYPE_CHECKING

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint


if TYPE_CHECKING:
    from starlette.types import ASGIApp


logger = structlog.get_logger()

DEFAULT_EXCLUDE_PATHS = ("/health/live", "/health/ready", "/docs", "/redoc", "/openapi.json")


def level_for(status_code: int) -> str:
    """Log level for a response status: error for 5xx, warning for 4xx."""
    if status_code >= 500:
        return "error"
    if status_code >= 400:
        return "warning"
    return "info"


def get_client_ip(request: Request) -> str | None:
    """Client address, preferring the proxy headers when present."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",", 1)[0].strip()
    return request.headers.get("X-Real-IP") or (request.client.host if request.client else None)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration for every request.

    Attributes:
        exclude_paths: Path prefixes that are served without logging
    """

    def __init__(
        self,
        app: "ASGIApp",
        exclude_paths: list[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.exclude_paths = tuple(exclude_paths or DEFAULT_EXCLUDE_PATHS)

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path.startswith(self.exclude_paths):
            return await call_next(request)

        log = logger.bind(method=request.method, path=request.url.path)
        log.info(
            "request_started",
            host=request.headers.get("host"),
            client_ip=get_client_ip(request),
            query=request.url.query or None,
        )

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            log.exception("request_failed", duration_ms=_elapsed_ms(started), error=str(exc))
            raise

        identity = {
            key: str(value)
            for key in ("tenant_id", "user_id")
            if (value := getattr(request.state, key, None)) is not None
        }
        getattr(log, level_for(response.status_code))(
            "request_completed",
            status_code=response.status_code,
            duration_ms=_elapsed_ms(started),
            **identity,
        )
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
