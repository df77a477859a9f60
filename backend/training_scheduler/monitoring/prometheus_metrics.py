"""
Prometheus metrics for the training scheduling engine.

Service timings come from the ``@measure_operation`` decorator; booking
outcomes are recorded by the booking orchestrator. All collectors live in
a private registry so embedding applications can expose or ignore them.
"""

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

# Create a custom registry to avoid conflicts with default metrics
REGISTRY = CollectorRegistry()

service_operation_duration_seconds = Histogram(
    "training_scheduler_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "training_scheduler_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "training_scheduler_errors_total",
    "Total number of service operation errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

training_bookings_total = Counter(
    "training_scheduler_bookings_total",
    "Training slot booking attempts by entry point and outcome",
    ["entry_point", "outcome"],
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Thin facade over the module-level collectors."""

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
            service: Service name (e.g., 'TrainingBookingService')
            operation: Operation/method name (e.g., 'auto_assign_slot')
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
    def record_booking(entry_point: str, outcome: str) -> None:
        """Count a booking attempt ('explicit' / 'auto_assign') by outcome code."""
        training_bookings_total.labels(entry_point=entry_point, outcome=outcome).inc()

    @staticmethod
    def get_metrics() -> bytes:
        """Render the registry in the Prometheus text exposition format."""
        return generate_latest(REGISTRY)


prometheus_metrics = PrometheusMetrics()
