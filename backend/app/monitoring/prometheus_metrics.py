"""
Prometheus metrics for the studio backend.

Service timings come from the @measure_operation decorator on BaseService;
business counters are bumped by the giftcard and booking services.
"""

from typing import Optional, cast

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Create a custom registry to avoid conflicts with default metrics
REGISTRY = CollectorRegistry()

service_operation_duration_seconds = Histogram(
    "studio_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "studio_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "studio_errors_total",
    "Total number of errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

giftcard_holds_total = Counter(
    "studio_giftcard_holds_total",
    "Giftcard hold lifecycle transitions",
    ["outcome"],
    registry=REGISTRY,
)

bookings_created_total = Counter(
    "studio_bookings_created_total",
    "Bookings created, by product type",
    ["product_type"],
    registry=REGISTRY,
)

maintenance_rows_total = Counter(
    "studio_maintenance_rows_total",
    "Rows touched by maintenance jobs",
    ["job"],
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Manages Prometheus metrics collection and exposure."""

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """
        Record service operation metrics from @measure_operation decorator.

        Args:
            service: Service name (e.g., 'BookingService')
            operation: Operation/method name (e.g., 'create_booking')
            duration: Operation duration in seconds
            status: Operation status ('success' or 'error')
            error_type: Type of error if status is 'error'
        """
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        service_operations_total.labels(service=service, operation=operation, status=status).inc()
        if status == "error" and error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    @staticmethod
    def inc_giftcard_hold(outcome: str) -> None:
        giftcard_holds_total.labels(outcome=outcome).inc()

    @staticmethod
    def inc_booking_created(product_type: Optional[str]) -> None:
        bookings_created_total.labels(product_type=product_type or "unknown").inc()

    @staticmethod
    def inc_maintenance_rows(job: str, count: int) -> None:
        if count > 0:
            maintenance_rows_total.labels(job=job).inc(count)

    @staticmethod
    def get_metrics() -> bytes:
        """Generate Prometheus metrics in exposition format."""
        return cast(bytes, generate_latest(REGISTRY))

    @staticmethod
    def get_content_type() -> str:
        """Get the content type for Prometheus metrics."""
        return cast(str, CONTENT_TYPE_LATEST)


prometheus_metrics = PrometheusMetrics()
