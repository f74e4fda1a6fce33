# backend/app/monitoring/prometheus_metrics.py
"""
Prometheus metric families for TrainerLocator.

Two feeds write here. ``PrometheusMiddleware`` records every HTTP request,
and ``@BaseService.measure_operation`` records every service call. The
booking and session services add domain counters on top. All families
live on ``REGISTRY`` so ``/metrics`` exposes only what this app defines.
"""

from typing import Dict, Optional, cast

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

NAMESPACE = "trainerlocator"

# Separate from the process-wide default registry
REGISTRY = CollectorRegistry()

# Request latencies in this app sit between a few ms and a couple of seconds
_HTTP_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.2, 0.4, 0.8, 1.6, 3.2, 6.4)
_SERVICE_BUCKETS = (0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "Time spent answering an API request",
    ["method", "endpoint", "status_code"],
    namespace=NAMESPACE,
    buckets=_HTTP_BUCKETS,
    registry=REGISTRY,
)

http_requests_total = Counter(
    "http_requests",
    "API requests answered",
    ["method", "endpoint", "status_code"],
    namespace=NAMESPACE,
    registry=REGISTRY,
)

http_requests_in_progress = Gauge(
    "http_requests_in_progress",
    "API requests still being handled",
    ["method", "endpoint"],
    namespace=NAMESPACE,
    registry=REGISTRY,
)

service_operation_duration_seconds = Histogram(
    "service_operation_duration_seconds",
    "Time spent inside a service operation",
    ["service", "operation"],
    namespace=NAMESPACE,
    buckets=_SERVICE_BUCKETS,
    registry=REGISTRY,
)

service_operations_total = Counter(
    "service_operations",
    "Service operations by outcome",
    ["service", "operation", "status"],
    namespace=NAMESPACE,
    registry=REGISTRY,
)

errors_total = Counter(
    "errors",
    "Service operations that raised, by exception class",
    ["service", "operation", "error_type"],
    namespace=NAMESPACE,
    registry=REGISTRY,
)

booking_status_changes_total = Counter(
    "booking_status_changes",
    "Booking status changes by target status",
    ["status"],
    namespace=NAMESPACE,
    registry=REGISTRY,
)

schedule_conflicts_total = Counter(
    "schedule_conflicts",
    "Session requests rejected by the trainer conflict check",
    namespace=NAMESPACE,
    registry=REGISTRY,
)

sessions_created_total = Counter(
    "sessions_created",
    "Training sessions scheduled, directly or from a confirmed booking",
    ["session_type", "source"],
    namespace=NAMESPACE,
    registry=REGISTRY,
)


def _http_labels(method: str, endpoint: str, status_code: int) -> Dict[str, str]:
    return {"method": method, "endpoint": endpoint, "status_code": str(status_code)}


class PrometheusMetrics:
    """Write-side facade so callers never touch metric families directly."""

    # HTTP

    @staticmethod
    def track_http_request_start(method: str, endpoint: str) -> None:
        http_requests_in_progress.labels(method=method, endpoint=endpoint).inc()

    @staticmethod
    def track_http_request_end(method: str, endpoint: str) -> None:
        http_requests_in_progress.labels(method=method, endpoint=endpoint).dec()

    @staticmethod
    def record_http_request(method: str, endpoint: str, duration: float, status_code: int) -> None:
        labels = _http_labels(method, endpoint, status_code)
        http_requests_total.labels(**labels).inc()
        http_request_duration_seconds.labels(**labels).observe(duration)

    # Services

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """
        Args:
            service: Service class name, e.g. 'BookingService'
            operation: Name given to ``measure_operation``
            duration: Wall time in seconds
            status: 'success' or 'error'
            error_type: Exception class name when ``status`` is 'error'
        """
        service_operations_total.labels(service=service, operation=operation, status=status).inc()
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        if error_type is not None:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    # Domain

    @staticmethod
    def inc_booking_status_change(status: str) -> None:
        booking_status_changes_total.labels(status=status).inc()

    @staticmethod
    def inc_schedule_conflict() -> None:
        schedule_conflicts_total.inc()

    @staticmethod
    def inc_session_created(session_type: str, source: str) -> None:
        sessions_created_total.labels(session_type=session_type, source=source).inc()

    # Exposition

    @staticmethod
    def get_metrics() -> bytes:
        return cast(bytes, generate_latest(REGISTRY))

    @staticmethod
    def get_content_type() -> str:
        return cast(str, CONTENT_TYPE_LATEST)


prometheus_metrics = PrometheusMetrics()
