from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from portal.core.metrics import request_metrics
from portal.core.request_context import clear_request_context, set_request_context

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Request id propagation, per-route metrics and one access log line per request."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        set_request_context(request_id=request_id)
        started = time.perf_counter()

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            duration_ms = round((time.perf_counter() - started) * 1000, 2)
            endpoint = _route_template(request)
            request_metrics.observe(
                endpoint=endpoint,
                method=request.method,
                status_code=status_code,
                duration_ms=duration_ms,
            )
            _log_request(request, endpoint, status_code, duration_ms)
            clear_request_context()


def _log_request(request: Request, endpoint: str, status_code: int, duration_ms: float) -> None:
    admin = getattr(request.state, "admin", None)
    level = logging.ERROR if status_code >= 500 else logging.INFO
    logger.log(
        level,
        "request completed",
        extra={
            "request_id": request.state.request_id,
            "admin_id": str(admin.id) if admin is not None else None,
            "endpoint": endpoint,
            "method": request.method,
            "status_code": status_code,
            "duration_ms": duration_ms,
        },
    )


def _route_template(request: Request) -> str:
    # Unmatched paths (404) have no route; fall back to the raw path.
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path
