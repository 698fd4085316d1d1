from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from learnhub.core.constants import ActivationStatus, DEFAULT_CURRENCY, InvoiceItemType

Money = Annotated[Decimal, Field(ge=0)]


def _normalize_currency(value: str) -> str:
    code = (value or "").strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise ValueError(f"currency must be a 3-letter code, got {value!r}")
    return code


class CoursePricingTier(BaseModel):
    """Global default pricing for one course"""
    model_config = ConfigDict(frozen=True, from_attributes=True)

    course_id: UUID
    setup_fee: Money
    reactivation_fee: Money
    seat_fee: Money
    currency: str = DEFAULT_CURRENCY

    @field_validator("currency")
    @classmethod
    def check_currency(cls, v: str) -> str:
        return _normalize_currency(v)


class PricingOverrideTier(BaseModel):
    """
    A company's override row. ``course_id`` of None means the override applies
    to every course for that company. A None fee means "no override for this
    field" and must fall through to the next tier.
    """
    model_config = ConfigDict(frozen=True, from_attributes=True)

    company_id: UUID
    course_id: Optional[UUID] = None
    setup_fee_override: Optional[Money] = None
    reactivation_fee_override: Optional[Money] = None
    seat_fee_override: Optional[Money] = None

    @property
    def is_company_wide(self) -> bool:
        return self.course_id is None


class EffectivePricing(BaseModel):
    model_config = ConfigDict(frozen=True)

    setup_fee: Money
    reactivation_fee: Money
    seat_fee: Money
    currency: str = DEFAULT_CURRENCY

    @field_validator("currency")
    @classmethod
    def check_currency(cls, v: str) -> str:
        return _normalize_currency(v)


class PricingCalculation(BaseModel):
    """Money breakdown for one activation"""
    model_config = ConfigDict(frozen=True)

    setup_or_reactivation_fee: Money
    seat_total: Money
    subtotal: Money
    tax_amount: Money
    total: Money

    @model_validator(mode="after")
    def check_identities(self):
        if self.subtotal != self.setup_or_reactivation_fee + self.seat_total:
            raise ValueError("subtotal must equal setup_or_reactivation_fee + seat_total")
        if self.total != self.subtotal + self.tax_amount:
            raise ValueError("total must equal subtotal + tax_amount")
        return self


class ActivationRecord(BaseModel):
    """Read-only snapshot of a stored course activation"""
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: UUID
    company_id: UUID
    course_id: UUID
    activated_at: datetime
    expires_at: datetime
    is_renewal: bool
    status: ActivationStatus
    seat_count: int = Field(ge=1)
    setup_fee_paid: Money
    seat_fee_paid: Money
    total_paid: Money


class ActivationClassification(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_renewal: bool
    previous_activation: Optional[ActivationRecord] = None
    is_expired: bool = False


class InvoiceLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str
    quantity: int = Field(ge=1)
    unit_price: Money
    total: Money
    item_type: InvoiceItemType
