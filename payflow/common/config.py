"""Central environment-driven settings for the payment router.

The process loads this once at startup. Provider endpoints, credentials and
resilience knobs are controlled by environment variables (see `.env.example`).
A provider without a base URL runs in simulation mode.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class CommonSettings(BaseSettings):
    """Typed view of runtime configuration from environment variables."""

    service_name: str = "payflow"
    log_level: str = "INFO"
    otel_exporter_otlp_endpoint: str | None = None

    fastpay_base_url: str | None = None
    fastpay_api_key: str | None = None
    fastpay_payer_email: str = "customer@example.com"
    securepay_base_url: str | None = None
    securepay_token: str | None = None

    provider_timeout_seconds: float = 10.0
    provider_retry_attempts: int = 3
    provider_retry_backoff_seconds: float = 0.2
    circuit_breaker_enabled: bool = True
    circuit_breaker_failure_threshold: int = 5
    circuit_breaker_window_seconds: float = 30.0
    circuit_breaker_cooldown_seconds: float = 30.0
    simulated_delay_seconds: float = 0.12
    payment_deadline_seconds: float | None = None
    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore")


settings = CommonSettings()
