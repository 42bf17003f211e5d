# fitflow/routes/health.py
"""
Health and monitoring endpoints.

All public: load balancers and Prometheus scrape them without credentials.
"""

import logging

from fastapi import APIRouter, Request, Response
from fastapi.responses import PlainTextResponse

from .. import __version__
from ..core.constants import ROOT_MESSAGE
from ..database import Database
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..schemas.common import HealthResponse

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
def root() -> str:
    return ROOT_MESSAGE


@router.get("/health", response_model=HealthResponse)
def health_check(request: Request, response: Response) -> HealthResponse:
    """Report whether the document store answers a trivial query."""
    database: Database = request.app.state.database
    healthy = database.ping()
    if not healthy:
        logger.error("Health check failed: database unreachable")
        response.status_code = 503

    response.headers["Cache-Control"] = "no-store"
    return HealthResponse(
        status="healthy" if healthy else "degraded",
        database="ok" if healthy else "unreachable",
        version=__version__,
    )


@router.get(
    "/metrics/prometheus", include_in_schema=False, response_class=Response, response_model=None
)
def get_prometheus_metrics() -> Response:
    """Expose Prometheus metrics for scraping."""
    return Response(
        content=prometheus_metrics.get_metrics(),
        media_type=prometheus_metrics.get_content_type(),
        headers={
            "Cache-Control": "no-cache, no-store, must-revalidate",
            "Pragma": "no-cache",
            "Expires": "0",
        },
    )
