"""Startup-time helpers for safe config logging."""

from payflow.common.config import CommonSettings
from payflow.common.logging import logger

SECRET_MARKERS = ("key", "secret", "password", "token")


def redacted_config(config: CommonSettings, fields: list[str]) -> dict[str, object]:
    """Selected settings with secret-like values masked and unset ones marked."""

    summary: dict[str, object] = {}
    for field in fields:
        value = getattr(config, field)
        if value is None:
            summary[field] = "<unset>"
        elif any(marker in field for marker in SECRET_MARKERS):
            summary[field] = "<redacted>"
        else:
            summary[field] = value
    return summary


def provider_modes(config: CommonSettings) -> dict[str, str]:
    """`live` when a provider has a base URL, `simulated` otherwise."""

    return {
        "FastPay": "live" if config.fastpay_base_url else "simulated",
        "SecurePay": "live" if config.securepay_base_url else "simulated",
    }


def log_startup_config(config: CommonSettings, fields: list[str]) -> None:
    """Log selected startup config keys for quick troubleshooting."""

    logger.info(
        "startup_config service=%s providers=%s config=%s",
        config.service_name,
        provider_modes(config),
        redacted_config(config, fields),
    )
