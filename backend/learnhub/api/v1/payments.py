# backend/learnhub/api/v1/payments.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from learnhub.db.database import get_db
from learnhub.db.models.profile import Profile
from learnhub.api.dependencies import get_current_profile, get_payment_gateway
from learnhub.services.ezee_payments_service import EzeePaymentsService
from learnhub.services.payment_service import PaymentService
from learnhub.schemas.payment import CheckoutResponse, CreateActivationPaymentRequest, PaymentInDB

router = APIRouter()


@router.post("/course-activation", response_model=CheckoutResponse)
async def create_course_activation_payment(
    body: CreateActivationPaymentRequest,
    current_profile: Profile = Depends(get_current_profile),
    gateway: EzeePaymentsService = Depends(get_payment_gateway),
    db: AsyncSession = Depends(get_db)
):
    """Create an eZeePayments checkout for a pending course activation"""
    checkout = await PaymentService(db, gateway).create_course_activation_payment(
        body.course_activation_id, current_profile
    )
    return CheckoutResponse(
        payment_id=checkout.payment.id,
        course_activation_id=checkout.course_activation_id,
        payment_url=checkout.payment_url,
        form_data=checkout.form_data,
    )


@router.get("/{payment_id}", response_model=PaymentInDB)
async def get_payment_status(
    payment_id: UUID,
    current_profile: Profile = Depends(get_current_profile),
    gateway: EzeePaymentsService = Depends(get_payment_gateway),
    db: AsyncSession = Depends(get_db)
):
    """Get payment status"""
    return await PaymentService(db, gateway).get_payment(payment_id, current_profile)
