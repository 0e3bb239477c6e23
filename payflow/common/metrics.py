"""Prometheus metric definitions for the payment router."""

from prometheus_client import Counter, Histogram, generate_latest
from starlette.responses import Response


payment_requests_total = Counter("payment_requests_total", "Total payment requests", ["service"])
payment_success_total = Counter("payment_success_total", "Total approved payments", ["service"])
payment_failure_total = Counter("payment_failure_total", "Total payments with every provider exhausted", ["service"])
payment_latency_seconds = Histogram("payment_latency_seconds", "Payment latency seconds", ["service"])
provider_attempts_total = Counter(
    "provider_attempts_total",
    "Provider attempts by outcome (approved/declined/error)",
    ["service", "provider", "outcome"],
)
provider_fallbacks_total = Counter(
    "provider_fallbacks_total",
    "Payments approved by a provider other than the preferred one",
    ["service", "provider"],
)
retries_total = Counter("retries_total", "Retry count", ["service", "dependency"])
circuit_breaker_open_total = Counter(
    "circuit_breaker_open_total",
    "Times a provider circuit breaker opened",
    ["service", "provider"],
)
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "route", "method", "status_code"],
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration seconds",
    ["service", "route", "method"],
)


def metrics_response() -> Response:
    """Expose all registered Prometheus metrics in text format."""

    return Response(content=generate_latest(), media_type="text/plain")
