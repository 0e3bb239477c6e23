"""Public HTTP entrypoint for payment routing.

Validates the payload, hands it to the orchestrator, and reports the routed
outcome. A payment that every provider refused is still a 200 with
`status="failed"`; only an invalid payload (400) or an exceeded deadline
(504) are reported as HTTP errors.
"""

from contextlib import asynccontextmanager
from time import perf_counter
from uuid import uuid4

import httpx
from fastapi import Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from payflow.common.config import settings
from payflow.common.errors import PaymentDeadlineExceeded
from payflow.common.logging import configure_logging, logger, trace_id_ctx
from payflow.common.metrics import (
    http_request_duration_seconds,
    http_requests_total,
    metrics_response,
    payment_latency_seconds,
    payment_requests_total,
)
from payflow.common.startup import log_startup_config
from payflow.common.tracing import instrument_app, setup_tracing
from payflow.services.orchestrator.schemas import PaymentRequest, PaymentResponse
from payflow.services.orchestrator.service import PaymentOrchestrator
from payflow.services.provider_adapter.registry import build_registry

configure_logging()
setup_tracing(settings.service_name)
log_startup_config(
    settings,
    [
        "fastpay_base_url",
        "fastpay_api_key",
        "securepay_base_url",
        "securepay_token",
        "provider_timeout_seconds",
        "provider_retry_attempts",
        "circuit_breaker_enabled",
        "payment_deadline_seconds",
    ],
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the pooled provider HTTP client for the app lifetime."""

    async with httpx.AsyncClient() as client:
        registry = build_registry(client, settings)
        app.state.orchestrator = PaymentOrchestrator(
            registry,
            deadline_seconds=settings.payment_deadline_seconds,
        )
        logger.info(
            "providers registered order=%s simulated=%s",
            ",".join(registry.names),
            ",".join(p.name for p in registry if p.simulated) or "-",
        )
        yield


app = FastAPI(title="PayFlow Payment Router", lifespan=lifespan)
instrument_app(app)


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    """Record request count and latency for every HTTP call."""

    start = perf_counter()
    route = request.url.path
    method = request.method
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        route_obj = request.scope.get("route")
        if route_obj is not None and getattr(route_obj, "path", None):
            route = route_obj.path
        return response
    finally:
        elapsed = max(0.0, perf_counter() - start)
        http_request_duration_seconds.labels(
            service=settings.service_name,
            route=route,
            method=method,
        ).observe(elapsed)
        http_requests_total.labels(
            service=settings.service_name,
            route=route,
            method=method,
            status_code=str(status_code),
        ).inc()


@app.exception_handler(RequestValidationError)
async def invalid_payload(_: Request, exc: RequestValidationError):
    logger.info("invalid payment payload errors=%s", exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid payload"})


def get_orchestrator(request: Request) -> PaymentOrchestrator:
    return request.app.state.orchestrator


@app.post("/payments", response_model=PaymentResponse)
async def create_payment(
    req: PaymentRequest,
    x_correlation_id: str | None = Header(default=None),
    orchestrator: PaymentOrchestrator = Depends(get_orchestrator),
):
    """Route one payment and return the consolidated outcome."""

    trace_id = x_correlation_id or str(uuid4())
    trace_id_ctx.set(trace_id)
    logger.info("payment received amount=%s currency=%s", req.amount, req.currency)
    payment_requests_total.labels(service=settings.service_name).inc()
    with payment_latency_seconds.labels(service=settings.service_name).time():
        try:
            return await orchestrator.process(req)
        except PaymentDeadlineExceeded as exc:
            return JSONResponse(status_code=504, content={"error": str(exc)})


@app.get("/metrics")
def metrics():
    """Prometheus scrape endpoint."""

    return metrics_response()


@app.get("/health")
def health():
    """Container health probe endpoint."""

    return {"ok": True}
