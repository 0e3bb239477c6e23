"""Provider adapter contract.

An adapter translates a normalized `PaymentRequest` into one provider's wire
shape, performs the call and reports whether the provider approved it. Without
a transport (no base URL configured) the adapter runs in simulation mode and
approves every payment after a short delay.

Adapters hold no per-request state; the transport they share across requests
owns the connection pool and circuit breaker.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from payflow.common.errors import ProviderError
from payflow.common.logging import logger
from payflow.services.orchestrator.schemas import PaymentRequest
from payflow.services.provider_adapter.transport import ProviderTransport


@dataclass(frozen=True)
class ProviderResult:
    """What a reachable provider said about one payment."""

    success: bool
    external_id: str = ""


class PaymentProvider(ABC):
    """Base class for provider adapters."""

    name: str

    def __init__(
        self,
        transport: ProviderTransport | None = None,
        simulated_delay_seconds: float = 0.12,
    ) -> None:
        self.transport = transport
        self.simulated_delay_seconds = simulated_delay_seconds

    @property
    def simulated(self) -> bool:
        return self.transport is None

    @abstractmethod
    def build_payload(self, request: PaymentRequest) -> dict[str, Any]:
        """Provider-specific request body."""

    @abstractmethod
    def parse_response(self, body: dict[str, Any]) -> ProviderResult:
        """Interpret a decoded 2xx response body."""

    @abstractmethod
    def simulated_external_id(self) -> str:
        """Synthetic id returned in simulation mode."""

    def _read_result_field(self, body: dict[str, Any], field: str) -> Any:
        if field not in body:
            raise ProviderError(self.name, f"response is missing {field!r}")
        return body[field]

    @staticmethod
    def _read_external_id(body: dict[str, Any], field: str) -> str:
        value = body.get(field)
        return "" if value is None else str(value)

    async def process_payment(self, request: PaymentRequest) -> ProviderResult:
        """Submit one payment.

        Raises `ProviderUnavailable` on transport failure and `ProviderError`
        on an unusable response. Task cancellation propagates untouched.
        """

        payload = self.build_payload(request)
        if self.transport is None:
            logger.info("provider simulated provider=%s payload=%s", self.name, payload)
            await asyncio.sleep(self.simulated_delay_seconds)
            return ProviderResult(success=True, external_id=self.simulated_external_id())

        logger.info("provider live call provider=%s url=%s", self.name, self.transport.url)
        body = await self.transport.post_json(payload)
        if not isinstance(body, dict):
            raise ProviderError(self.name, "response body is not a JSON object")
        return self.parse_response(body)
