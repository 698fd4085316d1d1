# backend/learnhub/api/v1/activations.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from learnhub.db.database import get_db
from learnhub.db.models.profile import Profile
from learnhub.api.dependencies import get_company_admin
from learnhub.pricing import effective_status
from learnhub.services.activation_service import ActivationService
from learnhub.schemas.activation import (
    ActivateCourseRequest,
    ActivateCourseResponse,
    ActivationStatusResponse,
    CourseActivationInDB,
    InvoiceInDB,
    PricingBreakdown,
)

router = APIRouter()


@router.get("/courses/{course_id}/activation", response_model=ActivationStatusResponse)
async def get_activation_status(
    course_id: UUID,
    current_profile: Profile = Depends(get_company_admin),
    db: AsyncSession = Depends(get_db)
):
    """Whether activating now is a renewal, and whether the company has access"""
    service = ActivationService(db)
    classification = await service.classify_activation(current_profile.company_id, course_id)
    has_access = await service.can_access_course(current_profile.company_id, course_id)

    previous = classification.previous_activation
    return ActivationStatusResponse(
        course_id=course_id,
        company_id=current_profile.company_id,
        is_renewal=classification.is_renewal,
        is_expired=classification.is_expired,
        has_access=has_access,
        previous_activation_id=previous.id if previous else None,
        previous_status=effective_status(previous) if previous else None,
        expires_at=previous.expires_at if previous else None,
    )


@router.post("/courses/activate", response_model=ActivateCourseResponse, status_code=status.HTTP_201_CREATED)
async def activate_course(
    body: ActivateCourseRequest,
    current_profile: Profile = Depends(get_company_admin),
    db: AsyncSession = Depends(get_db)
):
    """Activate a course for the caller's company and raise its invoice"""
    result = await ActivationService(db).create_activation_and_invoice(
        company_id=current_profile.company_id,
        course_id=body.course_id,
        seat_count=body.seat_count,
        created_by=current_profile.id,
    )

    calculation = result.calculation
    return ActivateCourseResponse(
        activation=CourseActivationInDB.model_validate(result.activation),
        invoice=InvoiceInDB.model_validate(result.invoice),
        is_renewal=result.is_renewal,
        pricing=PricingBreakdown(
            setup_or_reactivation_fee=calculation.setup_or_reactivation_fee,
            seat_fee=result.pricing.seat_fee,
            seat_count=body.seat_count,
            seat_total=calculation.seat_total,
            subtotal=calculation.subtotal,
            tax_amount=calculation.tax_amount,
            total=calculation.total,
            currency=result.pricing.currency,
        ),
    )
