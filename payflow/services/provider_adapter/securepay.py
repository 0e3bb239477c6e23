"""SecurePay adapter: integer minor units plus a generated client reference."""

import random
from datetime import datetime, timezone
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Any

from payflow.services.orchestrator.schemas import PaymentRequest
from payflow.services.provider_adapter.base import PaymentProvider, ProviderResult


def to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).to_integral_value(rounding=ROUND_HALF_EVEN))


def client_reference(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"ORD-{now:%Y%m%d%H%M%S}"


class SecurePayProvider(PaymentProvider):
    name = "SecurePay"
    success_result = "success"

    def build_payload(self, request: PaymentRequest) -> dict[str, Any]:
        return {
            "amount_cents": to_minor_units(request.amount),
            "currency_code": request.currency,
            "client_reference": client_reference(),
        }

    def parse_response(self, body: dict[str, Any]) -> ProviderResult:
        result = self._read_result_field(body, "result")
        return ProviderResult(
            success=result == self.success_result,
            external_id=self._read_external_id(body, "transaction_id"),
        )

    def simulated_external_id(self) -> str:
        return f"SP-{random.randint(10000, 99999)}"
