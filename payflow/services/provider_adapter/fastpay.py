"""FastPay adapter: decimal major units with a payer sub-object."""

import time
from typing import Any

from payflow.services.orchestrator.schemas import PaymentRequest
from payflow.services.provider_adapter.base import PaymentProvider, ProviderResult
from payflow.services.provider_adapter.transport import ProviderTransport


class FastPayProvider(PaymentProvider):
    name = "FastPay"
    approved_status = "approved"

    def __init__(
        self,
        transport: ProviderTransport | None = None,
        simulated_delay_seconds: float = 0.12,
        payer_email: str = "customer@example.com",
    ) -> None:
        super().__init__(transport, simulated_delay_seconds)
        self.payer_email = payer_email

    def build_payload(self, request: PaymentRequest) -> dict[str, Any]:
        return {
            "transaction_amount": float(request.amount),
            "currency": request.currency,
            "payer": {"email": self.payer_email},
            "installments": 1,
            "description": "Purchase via FastPay",
        }

    def parse_response(self, body: dict[str, Any]) -> ProviderResult:
        status = self._read_result_field(body, "status")
        return ProviderResult(
            success=status == self.approved_status,
            external_id=self._read_external_id(body, "id"),
        )

    def simulated_external_id(self) -> str:
        # 100ns ticks, last six digits
        return f"FP-{(time.time_ns() // 100) % 1_000_000}"
