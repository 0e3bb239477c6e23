"""Request/response models for payment routing."""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class PaymentRequest(BaseModel):
    """Normalized payment accepted by the orchestrator."""

    model_config = ConfigDict(frozen=True)

    # Whole cents, at most 13 integer digits: fee maths stay inside decimal
    # precision and every amount is exact as a JSON float.
    amount: Decimal = Field(gt=0, max_digits=15, decimal_places=2)
    currency: str = Field(min_length=1)

    @field_validator("currency")
    @classmethod
    def _currency_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("currency must not be blank")
        return value


class PaymentResponse(BaseModel):
    """Outcome of routing one payment; camelCase on the wire."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    external_id: str = Field(alias="externalId")
    status: Literal["approved", "failed"]
    provider: str
    gross_amount: Decimal = Field(alias="grossAmount")
    fee: Decimal
    net_amount: Decimal = Field(alias="netAmount")

    @field_serializer("gross_amount", "fee", "net_amount", when_used="json")
    def _decimal_as_number(self, value: Decimal) -> float:
        return float(value)
