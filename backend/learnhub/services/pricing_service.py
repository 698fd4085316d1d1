# backend/learnhub/services/pricing_service.py
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.core.constants import DEFAULT_CURRENCY, DEFAULT_FEE
from learnhub.core.exceptions import NotFoundError, ValidationError
from learnhub.core.logging import logger
from learnhub.db.database import database_errors
from learnhub.db.models.pricing import CoursePricing, CompanyPricingOverride
from learnhub.db.repositories.company_repository import CompanyRepository
from learnhub.db.repositories.course_repository import CourseRepository
from learnhub.db.repositories.pricing_repository import PricingRepository
from learnhub.pricing import (
    CoursePricingTier,
    EffectivePricing,
    PricingOverrideTier,
    resolve_effective_pricing,
)

OVERRIDE_FIELDS = ("setup_fee_override", "reactivation_fee_override", "seat_fee_override")


def _first_error(error: PydanticValidationError) -> str:
    first = error.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    return f"{field}: {first.get('msg')}" if field else str(first.get("msg"))


class PricingService:
    """Loads pricing tiers and manages course pricing and company overrides"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.pricing_repo = PricingRepository(db)
        self.course_repo = CourseRepository(db)
        self.company_repo = CompanyRepository(db)

    async def get_tiers(
        self, course_id: UUID, company_id: UUID
    ) -> Tuple[Optional[CoursePricingTier], Optional[PricingOverrideTier], Optional[PricingOverrideTier]]:
        """Fetch (course default, company-wide override, course-specific override)"""
        course_default = await self.pricing_repo.get_course_pricing(course_id)
        company_wide = await self.pricing_repo.get_override(company_id, None)
        course_specific = await self.pricing_repo.get_override(company_id, course_id)

        return (
            CoursePricingTier.model_validate(course_default) if course_default else None,
            PricingOverrideTier.model_validate(company_wide) if company_wide else None,
            PricingOverrideTier.model_validate(course_specific) if course_specific else None,
        )

    async def resolve_effective_price(self, course_id: UUID, company_id: UUID) -> EffectivePricing:
        """
        Effective pricing for a course and company.

        Existence of the course or company is not checked: with no rows the
        result is zero fees in USD.
        """
        async with database_errors(self.db, "resolving pricing"):
            course_default, company_wide, course_specific = await self.get_tiers(course_id, company_id)

        return resolve_effective_pricing(
            course_default=course_default,
            company_wide=company_wide,
            course_specific=course_specific,
        )

    async def list_course_pricing(self) -> List[Dict[str, Any]]:
        """Every course with its default pricing, zero-filled when unset"""
        async with database_errors(self.db, "listing course pricing"):
            rows = await self.course_repo.list_with_pricing()

        return [
            {
                "course_id": course.id,
                "course_title": course.title,
                "pricing_id": pricing.id if pricing else None,
                "setup_fee": pricing.setup_fee if pricing else DEFAULT_FEE,
                "reactivation_fee": pricing.reactivation_fee if pricing else DEFAULT_FEE,
                "seat_fee": pricing.seat_fee if pricing else DEFAULT_FEE,
                "currency": pricing.currency if pricing else DEFAULT_CURRENCY,
            }
            for course, pricing in rows
        ]

    async def set_course_pricing(
        self,
        course_id: UUID,
        setup_fee: Decimal,
        reactivation_fee: Decimal,
        seat_fee: Decimal,
        currency: str = DEFAULT_CURRENCY,
    ) -> CoursePricing:
        """Create or replace a course's default pricing"""
        # Validates fees and currency before touching the database
        try:
            tier = CoursePricingTier(
                course_id=course_id,
                setup_fee=setup_fee,
                reactivation_fee=reactivation_fee,
                seat_fee=seat_fee,
                currency=currency,
            )
        except PydanticValidationError as e:
            raise ValidationError(_first_error(e)) from e

        async with database_errors(self.db, "saving course pricing"):
            if not await self.course_repo.get(course_id):
                raise NotFoundError("Course not found")

            pricing = await self.pricing_repo.upsert_course_pricing(
                course_id, tier.model_dump(exclude={"course_id"})
            )
            await self.db.commit()

        logger.info(f"Course pricing updated for course {course_id}")
        return pricing

    async def set_override(
        self,
        company_id: UUID,
        course_id: Optional[UUID],
        setup_fee_override: Optional[Decimal] = None,
        reactivation_fee_override: Optional[Decimal] = None,
        seat_fee_override: Optional[Decimal] = None,
    ) -> CompanyPricingOverride:
        """
        Create or replace a company override. course_id None makes it
        company-wide; a None fee leaves that field to the lower tiers.
        """
        try:
            tier = PricingOverrideTier(
                company_id=company_id,
                course_id=course_id,
                setup_fee_override=setup_fee_override,
                reactivation_fee_override=reactivation_fee_override,
                seat_fee_override=seat_fee_override,
            )
        except PydanticValidationError as e:
            raise ValidationError(_first_error(e)) from e

        async with database_errors(self.db, "saving pricing override"):
            if not await self.company_repo.get(company_id):
                raise NotFoundError("Company not found")
            if course_id is not None and not await self.course_repo.get(course_id):
                raise NotFoundError("Course not found")

            override = await self.pricing_repo.upsert_override(
                company_id, course_id, tier.model_dump(include=set(OVERRIDE_FIELDS))
            )
            await self.db.commit()

        logger.info(
            f"Pricing override saved ({'company-wide' if course_id is None else f'course {course_id}'})",
            extra={"company_id": company_id},
        )
        return override

    async def remove_override(self, company_id: UUID, course_id: Optional[UUID]) -> None:
        async with database_errors(self.db, "removing pricing override"):
            removed = await self.pricing_repo.delete_override(company_id, course_id)
            if not removed:
                raise NotFoundError("Pricing override not found")
            await self.db.commit()

        logger.info("Pricing override removed", extra={"company_id": company_id})
