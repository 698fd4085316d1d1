# backend/learnhub/schemas/pricing.py
from pydantic import BaseModel, Field
from typing import Optional
from decimal import Decimal
from uuid import UUID
from datetime import datetime


class EffectivePricingResponse(BaseModel):
    course_id: UUID
    company_id: UUID
    setup_fee: Decimal
    reactivation_fee: Decimal
    seat_fee: Decimal
    currency: str


class CoursePricingUpdate(BaseModel):
    setup_fee: Decimal = Field(ge=0)
    reactivation_fee: Decimal = Field(ge=0)
    seat_fee: Decimal = Field(ge=0)
    currency: str = "USD"


class CoursePricingListItem(BaseModel):
    course_id: UUID
    course_title: str
    pricing_id: Optional[UUID] = None
    setup_fee: Decimal
    reactivation_fee: Decimal
    seat_fee: Decimal
    currency: str


class CoursePricingInDB(BaseModel):
    id: UUID
    course_id: UUID
    setup_fee: Decimal
    reactivation_fee: Decimal
    seat_fee: Decimal
    currency: str
    updated_at: datetime

    class Config:
        from_attributes = True


class PricingOverrideUpdate(BaseModel):
    """course_id None targets the company-wide override"""
    course_id: Optional[UUID] = None
    setup_fee_override: Optional[Decimal] = Field(default=None, ge=0)
    reactivation_fee_override: Optional[Decimal] = Field(default=None, ge=0)
    seat_fee_override: Optional[Decimal] = Field(default=None, ge=0)


class PricingOverrideInDB(BaseModel):
    id: UUID
    company_id: UUID
    course_id: Optional[UUID]
    setup_fee_override: Optional[Decimal]
    reactivation_fee_override: Optional[Decimal]
    seat_fee_override: Optional[Decimal]
    updated_at: datetime

    class Config:
        from_attributes = True
