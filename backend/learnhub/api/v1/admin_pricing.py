# backend/learnhub/api/v1/admin_pricing.py
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID

from learnhub.db.database import get_db
from learnhub.db.models.profile import Profile
from learnhub.api.dependencies import require_role
from learnhub.core.constants import UserRole
from learnhub.services.pricing_service import PricingService
from learnhub.schemas.pricing import (
    CoursePricingInDB,
    CoursePricingListItem,
    CoursePricingUpdate,
    PricingOverrideInDB,
    PricingOverrideUpdate,
)

router = APIRouter()

require_super_admin = require_role(UserRole.SUPER_ADMIN)


@router.get("/courses", response_model=List[CoursePricingListItem])
async def list_course_pricing(
    current_profile: Profile = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
):
    """All courses with their default pricing"""
    return await PricingService(db).list_course_pricing()


@router.put("/courses/{course_id}", response_model=CoursePricingInDB)
async def set_course_pricing(
    course_id: UUID,
    body: CoursePricingUpdate,
    current_profile: Profile = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
):
    return await PricingService(db).set_course_pricing(
        course_id,
        setup_fee=body.setup_fee,
        reactivation_fee=body.reactivation_fee,
        seat_fee=body.seat_fee,
        currency=body.currency,
    )


@router.put("/companies/{company_id}/overrides", response_model=PricingOverrideInDB)
async def set_pricing_override(
    company_id: UUID,
    body: PricingOverrideUpdate,
    current_profile: Profile = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
):
    """Create or replace a course-specific or company-wide override"""
    return await PricingService(db).set_override(
        company_id,
        body.course_id,
        setup_fee_override=body.setup_fee_override,
        reactivation_fee_override=body.reactivation_fee_override,
        seat_fee_override=body.seat_fee_override,
    )


@router.delete("/companies/{company_id}/overrides", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pricing_override(
    company_id: UUID,
    course_id: Optional[UUID] = None,
    current_profile: Profile = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db)
):
    await PricingService(db).remove_override(company_id, course_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
