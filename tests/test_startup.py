"""Startup config summary never leaks credentials."""

from payflow.common.config import CommonSettings
from payflow.common.startup import provider_modes, redacted_config


def test_secrets_are_redacted_and_unset_marked():
    config = CommonSettings(
        fastpay_base_url="https://fastpay.test",
        fastpay_api_key="fp-secret",
        securepay_base_url=None,
        securepay_token="sp-secret",
    )

    summary = redacted_config(
        config,
        ["fastpay_base_url", "fastpay_api_key", "securepay_base_url", "securepay_token"],
    )

    assert summary == {
        "fastpay_base_url": "https://fastpay.test",
        "fastpay_api_key": "<redacted>",
        "securepay_base_url": "<unset>",
        "securepay_token": "<redacted>",
    }
    assert provider_modes(config) == {"FastPay": "live", "SecurePay": "simulated"}
