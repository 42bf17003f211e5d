"""
Prometheus metrics middleware for HTTP request tracking.

Tracks request duration, status codes and in-progress requests.
"""

import re
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..monitoring.prometheus_metrics import prometheus_metrics

METRICS_PATH = "/metrics/prometheus"

# ULIDs (26 chars, Crockford base32) and plain numbers
_ID_SEGMENT = re.compile(r"^(?:[0-9A-HJKMNP-TV-Z]{26}|\d+)$")


def normalize_path(raw_path: str) -> str:
    """
    Normalize endpoint label to reduce cardinality.

    Example: /trainers/01HV.../slots/01HW... -> /trainers/:id/slots/:id
    Email path parameters are collapsed the same way.
    """
    segments = []
    for segment in raw_path.split("/"):
        if _ID_SEGMENT.match(segment) or "@" in segment:
            segments.append(":id")
        else:
            segments.append(segment)
    return "/".join(segments)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to collect Prometheus metrics for HTTP requests."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Skip metrics collection for the metrics endpoint itself
        if request.url.path == METRICS_PATH:
            return await call_next(request)

        method = request.method
        path = normalize_path(request.url.path)

        prometheus_metrics.track_http_request_start(method, path)
        start_time = time.time()

        try:
            response = await call_next(request)
            duration = time.time() - start_time

            prometheus_metrics.record_http_request(
                method=method, endpoint=path, duration=duration, status_code=response.status_code
            )

            return response

        finally:
            # Always track request end
            prometheus_metrics.track_http_request_end(method, path)
