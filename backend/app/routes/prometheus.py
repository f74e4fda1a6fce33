# backend/app/routes/prometheus.py
"""
Prometheus scrape endpoint.

Served unauthenticated and outside /api/v1 so scrapers need no token and
survive API version bumps.
"""

from fastapi import APIRouter, Response
from prometheus_client import Counter

from ..monitoring.prometheus_metrics import NAMESPACE, REGISTRY, prometheus_metrics

router = APIRouter()

_scrape_counter = Counter(
    "prometheus_scrapes",
    "Times this endpoint has been scraped",
    namespace=NAMESPACE,
    registry=REGISTRY,
)

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@router.get("/metrics", include_in_schema=False, response_class=Response, response_model=None)
def get_prometheus_metrics() -> Response:
    _scrape_counter.inc()
    return Response(
        content=prometheus_metrics.get_metrics(),
        media_type=prometheus_metrics.get_content_type(),
        headers=NO_CACHE_HEADERS,
    )
