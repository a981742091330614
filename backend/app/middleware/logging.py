from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from uuid import uuid4

from fastapi import Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ..metrics import REQUEST_COUNT, REQUEST_ERRORS, REQUEST_LATENCY

logger = logging.getLogger("flowstats.request")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id, log its outcome and record request metrics."""

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)
        if logger.level == logging.NOTSET:
            logger.setLevel(logging.INFO)

    async def dispatch(  # type: ignore[override]
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            self._finish(request, request_id, 500, started, failed=True)
            raise

        self._finish(request, request_id, response.status_code, started)
        response.headers["X-Request-ID"] = request_id
        return response

    @staticmethod
    def _finish(
        request: Request,
        request_id: str,
        status: int,
        started: float,
        *,
        failed: bool = False,
    ) -> None:
        duration_ms = (time.perf_counter() - started) * 1000
        path = _route_path(request)
        _observe(request.method, path, status, duration_ms)
        fields = {
            "request_id": request_id,
            "path": path,
            "method": request.method,
            "status": status,
            "duration_ms": round(duration_ms, 3),
        }
        if failed:
            logger.error("request failed", extra=fields, exc_info=True)
        elif status >= 400:
            logger.warning("request rejected", extra=fields)
        else:
            logger.info("request complete", extra=fields)


def _route_path(request: Request) -> str:
    # Route template, not the raw URL.
    route = request.scope.get("route")
    return str(getattr(route, "path", request.url.path))


def _observe(method: str, path: str, status: int, duration_ms: float) -> None:
    status_label = str(status)
    REQUEST_COUNT.labels(method=method, path=path, status=status_label).inc()
    REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000)
    if status >= 500:
        REQUEST_ERRORS.labels(method=method, path=path, status=status_label).inc()
