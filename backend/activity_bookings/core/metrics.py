"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Gauge, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_attempts = Counter(
    'booking_attempts_total',
    'Total booking attempts',
    ['status']  # success, invalid, not_found, capacity_exceeded, payment_failed
)

# Payment gateway metrics
gateway_charges = Counter(
    'gateway_charges_total',
    'Mock gateway charge decisions',
    ['result']  # success, declined
)

# Store metrics
store_writes = Counter(
    'store_writes_total',
    'Entity store persistence attempts',
    ['family', 'result']  # ok, failed
)

store_degraded = Gauge(
    'store_degraded',
    'Entity store degraded state (1=last write failed, 0=healthy)',
    ['family']
)

entities_loaded = Gauge(
    'store_entities_loaded',
    'Entities held in memory after the last load',
    ['family']
)


def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Usage:
        @app.get("/metrics")
        def metrics():
            return metrics_endpoint()
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


# Convenience functions for instrumentation
def record_booking_attempt(status: str):
    """Record booking attempt outcome."""
    booking_attempts.labels(status=status).inc()


def record_charge(success: bool):
    """Record a gateway charge decision."""
    result = "success" if success else "declined"
    gateway_charges.labels(result=result).inc()


def record_store_write(family: str, ok: bool):
    """Record a store save and flip the degraded gauge accordingly."""
    store_writes.labels(family=family, result="ok" if ok else "failed").inc()
    store_degraded.labels(family=family).set(0 if ok else 1)


def record_store_load(family: str, count: int):
    entities_loaded.labels(family=family).set(count)
