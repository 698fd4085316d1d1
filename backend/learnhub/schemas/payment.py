# backend/learnhub/schemas/payment.py
from pydantic import BaseModel
from typing import Dict, Optional
from decimal import Decimal
from uuid import UUID
from datetime import datetime


class CreateActivationPaymentRequest(BaseModel):
    course_activation_id: UUID


class CheckoutResponse(BaseModel):
    success: bool = True
    payment_id: UUID
    course_activation_id: UUID
    payment_url: str
    form_data: Dict[str, str]


class PaymentInDB(BaseModel):
    id: UUID
    company_id: UUID
    course_activation_id: Optional[UUID]
    payment_type: str
    amount: Decimal
    currency: str
    user_count: Optional[int]
    status: str
    order_id: str
    gateway_transaction_id: Optional[str]
    gateway_response_description: Optional[str]
    processed_at: Optional[datetime]
    paid_at: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True
