"""Payment routing orchestration.

Picks the preferred provider by amount, walks the fallback order one provider
at a time, and turns the first approval into a priced response. Provider
failures never escape `process`; cancellation and the optional end-to-end
deadline do.
"""

import asyncio
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from payflow.common.config import settings
from payflow.common.errors import PaymentDeadlineExceeded
from payflow.common.logging import logger, preferred_provider_ctx, provider_ctx
from payflow.common.metrics import (
    payment_failure_total,
    payment_success_total,
    provider_attempts_total,
    provider_fallbacks_total,
)
from payflow.common.state_machine import validate_transition
from payflow.common.tracing import tracer
from payflow.services.orchestrator.fees import calculate_fee, round_money
from payflow.services.orchestrator.schemas import PaymentRequest, PaymentResponse
from payflow.services.orchestrator.sequence import SequenceCounter, payment_sequence
from payflow.services.provider_adapter.base import PaymentProvider
from payflow.services.provider_adapter.registry import ProviderRegistry

PREFERRED_THRESHOLD = Decimal("100")
SMALL_PAYMENT_PROVIDER = "FastPay"
LARGE_PAYMENT_PROVIDER = "SecurePay"


def select_preferred_provider(amount: Decimal) -> str:
    """Amounts below 100 go to FastPay, everything else to SecurePay."""

    return SMALL_PAYMENT_PROVIDER if amount < PREFERRED_THRESHOLD else LARGE_PAYMENT_PROVIDER


class AttemptOutcome(str, Enum):
    APPROVED = "approved"
    DECLINED = "declined"
    ERROR = "error"


@dataclass(frozen=True)
class Attempt:
    """Result of calling one provider, with failures folded in."""

    provider: str
    outcome: AttemptOutcome
    external_id: str = ""
    error: Exception | None = None


class PaymentOrchestrator:
    """Routes payments across the registered providers with fallback."""

    def __init__(
        self,
        registry: ProviderRegistry,
        sequence: SequenceCounter = payment_sequence,
        deadline_seconds: float | None = None,
        service_name: str = settings.service_name,
    ) -> None:
        self.registry = registry
        self.sequence = sequence
        self.deadline_seconds = deadline_seconds
        self.service_name = service_name

    async def process(self, request: PaymentRequest) -> PaymentResponse:
        """Route one payment.

        Returns an `approved` response from the first provider that accepts it,
        or a `failed` response once every provider has been tried. Raises
        `PaymentDeadlineExceeded` when a deadline is configured and elapses.
        """

        if self.deadline_seconds is None:
            return await self._route(request)
        try:
            return await asyncio.wait_for(self._route(request), timeout=self.deadline_seconds)
        except asyncio.TimeoutError as exc:
            logger.warning(
                "payment deadline exceeded amount=%s deadline_s=%s",
                request.amount,
                self.deadline_seconds,
            )
            raise PaymentDeadlineExceeded(
                f"no provider answered within {self.deadline_seconds}s"
            ) from exc

    async def _route(self, request: PaymentRequest) -> PaymentResponse:
        preferred = select_preferred_provider(request.amount)
        token = preferred_provider_ctx.set(preferred)
        try:
            return await self._route_from(preferred, request)
        finally:
            preferred_provider_ctx.reset(token)

    async def _route_from(self, preferred: str, request: PaymentRequest) -> PaymentResponse:
        state = "STARTED"
        if preferred not in self.registry:
            logger.warning("preferred provider not registered provider=%s", preferred)
        tried: list[str] = []

        try:
            for provider in self.registry.attempt_order(preferred):
                validate_transition(state, "ATTEMPTING")
                state = "ATTEMPTING"
                tried.append(provider.name)
                attempt = await self._attempt(provider, request)

                if attempt.outcome is AttemptOutcome.APPROVED:
                    validate_transition(state, "APPROVED")
                    return self._approved(request, attempt, preferred)
                if attempt.outcome is AttemptOutcome.DECLINED:
                    logger.warning("provider declined payment provider=%s", provider.name)
                else:
                    logger.error(
                        "provider failed provider=%s error=%s",
                        provider.name,
                        attempt.error,
                        exc_info=attempt.error,
                    )
        except asyncio.CancelledError:
            validate_transition(state, "CANCELLED")
            logger.info("payment cancelled tried=%s", ",".join(tried))
            raise

        validate_transition(state, "FAILED")
        return self._failed(request, tried)

    async def _attempt(self, provider: PaymentProvider, request: PaymentRequest) -> Attempt:
        """Call one provider; provider failures become an ERROR attempt."""

        token = provider_ctx.set(provider.name)
        try:
            with tracer.start_as_current_span("provider.process_payment") as span:
                span.set_attribute("payment.provider", provider.name)
                logger.info("attempting payment provider=%s amount=%s", provider.name, request.amount)
                try:
                    result = await provider.process_payment(request)
                except Exception as exc:
                    attempt = Attempt(provider.name, AttemptOutcome.ERROR, error=exc)
                else:
                    outcome = AttemptOutcome.APPROVED if result.success else AttemptOutcome.DECLINED
                    attempt = Attempt(provider.name, outcome, external_id=result.external_id)
                span.set_attribute("payment.outcome", attempt.outcome.value)
        finally:
            provider_ctx.reset(token)

        provider_attempts_total.labels(
            service=self.service_name,
            provider=provider.name,
            outcome=attempt.outcome.value,
        ).inc()
        return attempt

    def _approved(self, request: PaymentRequest, attempt: Attempt, preferred: str) -> PaymentResponse:
        # Fee follows the provider that actually processed the payment.
        fee = calculate_fee(attempt.provider, request.amount)
        net = round_money(request.amount - fee)
        response = PaymentResponse(
            id=self.sequence.next(),
            external_id=attempt.external_id,
            status="approved",
            provider=attempt.provider,
            gross_amount=request.amount,
            fee=fee,
            net_amount=net,
        )
        if attempt.provider != preferred:
            provider_fallbacks_total.labels(service=self.service_name, provider=attempt.provider).inc()
        payment_success_total.labels(service=self.service_name).inc()
        logger.info(
            "payment approved id=%s provider=%s external_id=%s fee=%s net=%s",
            response.id,
            attempt.provider,
            attempt.external_id,
            fee,
            net,
        )
        return response

    def _failed(self, request: PaymentRequest, tried: list[str]) -> PaymentResponse:
        response = PaymentResponse(
            id=self.sequence.next(),
            external_id="",
            status="failed",
            provider=",".join(tried),
            gross_amount=request.amount,
            fee=Decimal("0"),
            net_amount=Decimal("0"),
        )
        payment_failure_total.labels(service=self.service_name).inc()
        logger.warning("all providers failed id=%s amount=%s tried=%s", response.id, request.amount, response.provider)
        return response
