# backend/learnhub/api/v1/pricing.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from uuid import UUID

from learnhub.db.database import get_db
from learnhub.db.models.profile import Profile
from learnhub.api.dependencies import get_current_profile
from learnhub.core.exceptions import ValidationError
from learnhub.services.access import ensure_company_access
from learnhub.services.pricing_service import PricingService
from learnhub.schemas.pricing import EffectivePricingResponse

router = APIRouter()


@router.get("/courses/{course_id}", response_model=EffectivePricingResponse)
async def get_course_pricing(
    course_id: UUID,
    company_id: Optional[UUID] = None,
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    """Effective pricing of a course for a company (the caller's by default)"""
    company_id = company_id or current_profile.company_id
    if company_id is None:
        raise ValidationError("company_id is required")
    ensure_company_access(current_profile, company_id)

    pricing = await PricingService(db).resolve_effective_price(course_id, company_id)
    return EffectivePricingResponse(
        course_id=course_id,
        company_id=company_id,
        **pricing.model_dump(),
    )
