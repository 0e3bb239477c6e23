"""Exception hierarchy shared by the orchestrator and provider adapters."""


class PaymentRoutingError(Exception):
    """Base class for payment routing failures."""


class ProviderError(PaymentRoutingError):
    """A provider call failed or answered with something unusable."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class ProviderUnavailable(ProviderError):
    """Transport failure, non-success HTTP status, or an open circuit."""


class UnknownProviderError(PaymentRoutingError, LookupError):
    """No rule or adapter exists for the given provider name."""


class ProviderConfigurationError(PaymentRoutingError):
    """The provider set is unusable (empty or with duplicate names)."""


class PaymentDeadlineExceeded(PaymentRoutingError, TimeoutError):
    """The end-to-end deadline elapsed before any provider answered."""
