# backend/app/middleware/prometheus_middleware.py
"""
HTTP request metrics.

Paths are recorded with id segments collapsed to ``:id`` so a trainer or
booking id never becomes its own label value.
"""

import re
import time
from typing import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..monitoring.prometheus_metrics import prometheus_metrics

# 26-character Crockford base32 ULIDs
_ULID_SEGMENT = re.compile(r"^[0-9A-HJKMNP-TV-Z]{26}$", re.IGNORECASE)

UNTRACKED_PATHS = frozenset({"/metrics"})


def normalize_path(raw_path: str) -> str:
    """
    Example: /api/v1/bookings/01HX...Z/status -> /api/v1/bookings/:id/status
    """
    return "/".join(
        ":id" if segment.isdigit() or _ULID_SEGMENT.match(segment) else segment
        for segment in raw_path.split("/")
    )


class PrometheusMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.url.path in UNTRACKED_PATHS:
            return await call_next(request)

        method = request.method
        path = normalize_path(request.url.path)
        prometheus_metrics.track_http_request_start(method, path)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            prometheus_metrics.record_http_request(
                method=method,
                endpoint=path,
                duration=time.perf_counter() - started,
                status_code=response.status_code,
            )
            return response
        finally:
            prometheus_metrics.track_http_request_end(method, path)
