"""Fixed, ordered provider registry and its startup wiring."""

from typing import Iterable, Iterator

import httpx

from payflow.common.config import CommonSettings, settings
from payflow.common.errors import ProviderConfigurationError, UnknownProviderError
from payflow.common.metrics import circuit_breaker_open_total
from payflow.common.resilience import CircuitBreaker
from payflow.services.orchestrator.fees import FEE_RULES
from payflow.services.provider_adapter.base import PaymentProvider
from payflow.services.provider_adapter.fastpay import FastPayProvider
from payflow.services.provider_adapter.securepay import SecurePayProvider
from payflow.services.provider_adapter.transport import ProviderTransport


class ProviderRegistry:
    """Immutable ordered collection of adapters, one per name.

    Every adapter must have a fee rule, so an unpriceable provider fails at
    startup rather than after it has approved a charge.
    """

    def __init__(self, providers: Iterable[PaymentProvider]) -> None:
        providers = tuple(providers)
        if not providers:
            raise ProviderConfigurationError("no payment providers registered")
        names = [provider.name for provider in providers]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ProviderConfigurationError(f"duplicate provider names: {', '.join(duplicates)}")
        unpriced = [name for name in names if name not in FEE_RULES]
        if unpriced:
            raise ProviderConfigurationError(f"providers without a fee rule: {', '.join(unpriced)}")
        self._providers = providers
        self._by_name = {provider.name: provider for provider in providers}

    def __iter__(self) -> Iterator[PaymentProvider]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(provider.name for provider in self._providers)

    def get(self, name: str) -> PaymentProvider:
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownProviderError(f"provider {name!r} is not registered") from None

    def attempt_order(self, preferred: str) -> tuple[PaymentProvider, ...]:
        """Preferred provider first (when registered), then registration order."""

        head = [self._by_name[preferred]] if preferred in self._by_name else []
        return tuple(head + [p for p in self._providers if p.name != preferred])


def _build_transport(
    name: str,
    base_url: str | None,
    headers: dict[str, str],
    client: httpx.AsyncClient,
    config: CommonSettings,
) -> ProviderTransport | None:
    """Return None (simulation mode) when no base URL is configured."""

    if not base_url:
        return None
    breaker = None
    if config.circuit_breaker_enabled:
        breaker = CircuitBreaker(
            name,
            failure_threshold=config.circuit_breaker_failure_threshold,
            window_seconds=config.circuit_breaker_window_seconds,
            cooldown_seconds=config.circuit_breaker_cooldown_seconds,
            on_open=lambda provider: circuit_breaker_open_total.labels(
                service=config.service_name, provider=provider
            ).inc(),
        )
    return ProviderTransport(
        name,
        client,
        base_url,
        headers=headers,
        timeout_seconds=config.provider_timeout_seconds,
        retry_attempts=config.provider_retry_attempts,
        backoff_seconds=config.provider_retry_backoff_seconds,
        breaker=breaker,
        service_name=config.service_name,
    )


def build_registry(client: httpx.AsyncClient, config: CommonSettings = settings) -> ProviderRegistry:
    """Build FastPay and SecurePay adapters over one shared HTTP client."""

    fastpay_headers = {}
    if config.fastpay_api_key:
        fastpay_headers["Authorization"] = f"Bearer {config.fastpay_api_key}"
    securepay_headers = {}
    if config.securepay_token:
        securepay_headers["X-API-TOKEN"] = config.securepay_token

    return ProviderRegistry(
        [
            FastPayProvider(
                _build_transport("FastPay", config.fastpay_base_url, fastpay_headers, client, config),
                simulated_delay_seconds=config.simulated_delay_seconds,
                payer_email=config.fastpay_payer_email,
            ),
            SecurePayProvider(
                _build_transport("SecurePay", config.securepay_base_url, securepay_headers, client, config),
                simulated_delay_seconds=config.simulated_delay_seconds,
            ),
        ]
    )
