"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Application metrics
applications = Counter(
    'booking_applications_total',
    'Usher applications to events',
    ['result']  # applied, conflict, refused
)

booking_transitions = Counter(
    'booking_transitions_total',
    'Booking status transitions',
    ['to_status']
)

transition_refusals = Counter(
    'booking_transition_refusals_total',
    'Refused booking transitions',
    ['reason']  # unauthorized, invalid, conflict
)

reviews_submitted = Counter(
    'reviews_submitted_total',
    'Reviews submitted by planners'
)

event_transitions = Counter(
    'event_transitions_total',
    'Event status transitions',
    ['to_status']
)

workflow_latency = Histogram(
    'workflow_operation_latency_seconds',
    'Workflow operation latency',
    ['operation'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)

redis_connection_errors = Counter(
    'redis_connection_errors_total',
    'Redis connection errors'
)


def metrics_endpoint() -> Response:
    """Prometheus metrics in text exposition format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_application(result: str):
    """Record an Apply attempt. Result: applied, conflict, refused"""
    applications.labels(result=result).inc()


def record_transition(to_status: str):
    booking_transitions.labels(to_status=to_status).inc()


def record_transition_refusal(reason: str):
    transition_refusals.labels(reason=reason).inc()


def record_event_transition(to_status: str):
    event_transitions.labels(to_status=to_status).inc()


def record_cache_operation(operation: str, hit: bool):
    """Record cache operation."""
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
