# backend/learnhub/db/repositories/pricing_repository.py
from typing import Any, Dict, Optional
from uuid import UUID
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.db.models.pricing import CoursePricing, CompanyPricingOverride
from learnhub.db.repositories.base import BaseRepository


class PricingRepository(BaseRepository[CoursePricing]):
    """Repository for course default pricing and company overrides"""

    def __init__(self, session: AsyncSession):
        super().__init__(CoursePricing, session)

    async def get_course_pricing(self, course_id: UUID) -> Optional[CoursePricing]:
        """Get the global default pricing row for a course"""
        result = await self.session.execute(
            select(CoursePricing).where(CoursePricing.course_id == course_id)
        )
        return result.scalar_one_or_none()

    async def get_override(self, company_id: UUID, course_id: Optional[UUID]) -> Optional[CompanyPricingOverride]:
        """
        Get a company override. course_id None selects the company-wide row,
        otherwise the row scoped to that course.
        """
        query = select(CompanyPricingOverride).where(CompanyPricingOverride.company_id == company_id)
        if course_id is None:
            query = query.where(CompanyPricingOverride.course_id.is_(None))
        else:
            query = query.where(CompanyPricingOverride.course_id == course_id)

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def upsert_course_pricing(self, course_id: UUID, values: Dict[str, Any]) -> CoursePricing:
        """Create or replace the default pricing for a course"""
        pricing = await self.get_course_pricing(course_id)
        if pricing is None:
            return await self.create({"course_id": course_id, **values})

        for key, value in values.items():
            setattr(pricing, key, value)
        await self.session.flush()
        return pricing

    async def upsert_override(
        self,
        company_id: UUID,
        course_id: Optional[UUID],
        values: Dict[str, Any],
    ) -> CompanyPricingOverride:
        """Create or replace a company override; None fee values clear that field"""
        override = await self.get_override(company_id, course_id)
        if override is None:
            override = CompanyPricingOverride(company_id=company_id, course_id=course_id, **values)
            self.session.add(override)
        else:
            for key, value in values.items():
                setattr(override, key, value)

        await self.session.flush()
        return override

    async def delete_override(self, company_id: UUID, course_id: Optional[UUID]) -> bool:
        query = delete(CompanyPricingOverride).where(CompanyPricingOverride.company_id == company_id)
        if course_id is None:
            query = query.where(CompanyPricingOverride.course_id.is_(None))
        else:
            query = query.where(CompanyPricingOverride.course_id == course_id)

        result = await self.session.execute(query)
        await self.session.flush()
        return result.rowcount > 0
