# backend/learnhub/schemas/activation.py
from pydantic import BaseModel
from typing import List, Optional
from decimal import Decimal
from uuid import UUID
from datetime import date, datetime

from learnhub.core.constants import ActivationStatus


class ActivateCourseRequest(BaseModel):
    course_id: UUID
    seat_count: int


class ActivationStatusResponse(BaseModel):
    course_id: UUID
    company_id: UUID
    is_renewal: bool
    is_expired: bool
    has_access: bool
    previous_activation_id: Optional[UUID] = None
    previous_status: Optional[ActivationStatus] = None
    expires_at: Optional[datetime] = None


class CourseActivationInDB(BaseModel):
    id: UUID
    company_id: UUID
    course_id: UUID
    activated_at: datetime
    expires_at: datetime
    is_renewal: bool
    status: str
    seat_count: int
    setup_fee_paid: Decimal
    seat_fee_paid: Decimal
    total_paid: Decimal

    class Config:
        from_attributes = True


class InvoiceItemInDB(BaseModel):
    description: str
    quantity: int
    unit_price: Decimal
    total: Decimal
    item_type: str

    class Config:
        from_attributes = True


class InvoiceInDB(BaseModel):
    id: UUID
    invoice_number: str
    company_id: UUID
    course_activation_id: UUID
    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total: Decimal
    currency: str
    status: str
    due_date: date
    paid_at: Optional[datetime] = None
    items: List[InvoiceItemInDB] = []

    class Config:
        from_attributes = True


class PricingBreakdown(BaseModel):
    setup_or_reactivation_fee: Decimal
    seat_fee: Decimal
    seat_count: int
    seat_total: Decimal
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal
    currency: str


class ActivateCourseResponse(BaseModel):
    activation: CourseActivationInDB
    invoice: InvoiceInDB
    pricing: PricingBreakdown
    is_renewal: bool
