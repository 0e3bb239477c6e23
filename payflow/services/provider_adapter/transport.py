"""Shared HTTP transport for provider adapters.

Wraps a pooled `httpx.AsyncClient` with bounded retry/backoff for transient
failures and an optional per-provider circuit breaker. Every failure that
survives the retries surfaces as `ProviderUnavailable`.
"""

from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from payflow.common.config import settings
from payflow.common.errors import ProviderError, ProviderUnavailable
from payflow.common.logging import logger
from payflow.common.metrics import retries_total
from payflow.common.resilience import CircuitBreaker

# 5xx responses are transient as well.
TRANSIENT_STATUS_CODES = frozenset({408, 429})


class TransientStatusError(Exception):
    """Retryable HTTP status returned by a provider."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"transient HTTP status {status_code}")
        self.status_code = status_code


def is_transient_status(status_code: int) -> bool:
    return status_code >= 500 or status_code in TRANSIENT_STATUS_CODES


class ProviderTransport:
    """POSTs JSON payloads to one provider endpoint."""

    def __init__(
        self,
        provider: str,
        client: httpx.AsyncClient,
        url: str,
        headers: dict[str, str] | None = None,
        timeout_seconds: float = 10.0,
        retry_attempts: int = 3,
        backoff_seconds: float = 0.2,
        breaker: CircuitBreaker | None = None,
        service_name: str = settings.service_name,
    ) -> None:
        self.provider = provider
        self.client = client
        self.url = url
        self.headers = headers or {}
        self.timeout_seconds = timeout_seconds
        self.retry_attempts = max(1, retry_attempts)
        self.backoff_seconds = backoff_seconds
        self.breaker = breaker
        self.service_name = service_name

    def _log_retry(self, retry_state: RetryCallState) -> None:
        retries_total.labels(service=self.service_name, dependency=self.provider).inc()
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "provider call retry provider=%s attempt=%s backoff_s=%.3f error=%s",
            self.provider,
            retry_state.attempt_number,
            retry_state.next_action.sleep if retry_state.next_action else 0.0,
            exc,
        )

    async def _post_with_retry(self, payload: dict[str, Any]) -> httpx.Response:
        retrying = AsyncRetrying(
            retry=retry_if_exception_type((httpx.TransportError, TransientStatusError)),
            stop=stop_after_attempt(self.retry_attempts),
            # backoff, 2*backoff, 4*backoff, ...
            wait=wait_exponential(multiplier=self.backoff_seconds),
            before_sleep=self._log_retry,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                response = await self.client.post(
                    self.url,
                    json=payload,
                    headers=self.headers,
                    timeout=self.timeout_seconds,
                )
                if is_transient_status(response.status_code):
                    raise TransientStatusError(response.status_code)
        return response

    def _record_failure(self) -> None:
        if self.breaker is not None:
            self.breaker.record_failure()

    async def post_json(self, payload: dict[str, Any]) -> Any:
        """Send `payload` and return the decoded JSON body of a 2xx response."""

        if self.breaker is not None and not self.breaker.allow_request():
            raise ProviderUnavailable(self.provider, "circuit breaker open")

        try:
            response = await self._post_with_retry(payload)
        except (httpx.TransportError, TransientStatusError) as exc:
            self._record_failure()
            raise ProviderUnavailable(self.provider, f"transport failure: {exc}") from exc

        if not response.is_success:
            self._record_failure()
            logger.warning(
                "provider returned non-success status provider=%s status=%s",
                self.provider,
                response.status_code,
            )
            raise ProviderUnavailable(self.provider, f"HTTP {response.status_code}")

        if self.breaker is not None:
            self.breaker.record_success()
        try:
            return response.json()
        except ValueError as exc:
            raise ProviderError(self.provider, "response body is not valid JSON") from exc
