"""
Prometheus metrics for FitFlow.

``PrometheusMiddleware`` feeds the HTTP series and
``@BaseService.measure_operation`` feeds the service series. The capacity
manager reports each reservation attempt by how it ended.
"""

from typing import Optional, cast

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Kept apart from the process-wide default registry so app instances built in
# tests do not register collectors twice.
REGISTRY = CollectorRegistry()

_HTTP_LABELS = ["method", "endpoint", "status_code"]
_SERVICE_LABELS = ["service", "operation"]

http_request_duration_seconds = Histogram(
    "fitflow_http_request_duration_seconds",
    "Wall time spent answering an API request",
    _HTTP_LABELS,
    registry=REGISTRY,
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

http_requests_total = Counter(
    "fitflow_http_requests_total",
    "API requests answered, by route template and status",
    _HTTP_LABELS,
    registry=REGISTRY,
)

http_requests_in_progress = Gauge(
    "fitflow_http_requests_in_progress",
    "API requests currently being handled",
    ["method", "endpoint"],
    registry=REGISTRY,
)

service_operation_duration_seconds = Histogram(
    "fitflow_service_operation_duration_seconds",
    "Time spent inside a measured service method",
    _SERVICE_LABELS,
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "fitflow_service_operations_total",
    "Measured service method calls, by result",
    _SERVICE_LABELS + ["status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "fitflow_errors_total",
    "Exceptions raised out of measured service methods",
    _SERVICE_LABELS + ["error_type"],
    registry=REGISTRY,
)

reservations_total = Counter(
    "fitflow_reservations_total",
    "Seat reservation attempts, by outcome",
    ["outcome"],  # committed | rejected_full | compensated | compensation_failed
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Thin facade over the module-level collectors."""

    @staticmethod
    def record_http_request(method: str, endpoint: str, duration: float, status_code: int) -> None:
        http_request_duration_seconds.labels(method, endpoint, str(status_code)).observe(duration)
        http_requests_total.labels(method, endpoint, str(status_code)).inc()

    @staticmethod
    def track_http_request_start(method: str, endpoint: str) -> None:
        http_requests_in_progress.labels(method, endpoint).inc()

    @staticmethod
    def track_http_request_end(method: str, endpoint: str) -> None:
        http_requests_in_progress.labels(method, endpoint).dec()

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """
        Record one call made through ``measure_operation``.

        ``error_type`` is the exception class name and only counts when
        ``status`` is ``"error"``.
        """
        service_operation_duration_seconds.labels(service, operation).observe(duration)
        service_operations_total.labels(service, operation, status).inc()
        if status == "error" and error_type:
            errors_total.labels(service, operation, error_type).inc()

    @staticmethod
    def inc_reservation(outcome: str) -> None:
        reservations_total.labels(outcome=outcome).inc()

    @staticmethod
    def get_metrics() -> bytes:
        return cast(bytes, generate_latest(REGISTRY))

    @staticmethod
    def get_content_type() -> str:
        return cast(str, CONTENT_TYPE_LATEST)


prometheus_metrics = PrometheusMetrics()
