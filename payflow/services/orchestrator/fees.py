"""Provider fee rules.

fee = round(gross * rate + fixed, 2) with banker's rounding (half-to-even).
"""

from decimal import ROUND_HALF_EVEN, Decimal

from payflow.common.errors import UnknownProviderError

CENTS = Decimal("0.01")

# provider name -> (percentage rate, fixed fee)
FEE_RULES: dict[str, tuple[Decimal, Decimal]] = {
    "FastPay": (Decimal("0.0349"), Decimal("0")),
    "SecurePay": (Decimal("0.0299"), Decimal("0.40")),
}


def round_money(value: Decimal) -> Decimal:
    """Quantize to cents using half-to-even rounding."""

    return value.quantize(CENTS, rounding=ROUND_HALF_EVEN)


def calculate_fee(provider_name: str, gross_amount: Decimal) -> Decimal:
    """Return the fee charged by `provider_name` on `gross_amount`."""

    try:
        rate, fixed = FEE_RULES[provider_name]
    except KeyError:
        raise UnknownProviderError(f"no fee rule for provider {provider_name!r}") from None
    return round_money(gross_amount * rate + fixed)
