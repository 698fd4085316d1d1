from decimal import Decimal
from typing import Optional

from learnhub.core.constants import DEFAULT_CURRENCY, DEFAULT_FEE
from .models import CoursePricingTier, EffectivePricing, PricingOverrideTier


def _first_present(*candidates: Optional[Decimal]) -> Decimal:
    """Return the first candidate that is not None; zero is a real value."""
    for value in candidates:
        if value is not None:
            return value
    return DEFAULT_FEE


def resolve_effective_pricing(
    course_default: Optional[CoursePricingTier] = None,
    company_wide: Optional[PricingOverrideTier] = None,
    course_specific: Optional[PricingOverrideTier] = None,
) -> EffectivePricing:
    """
    Resolve the pricing a company pays for a course.

    Each fee walks the override hierarchy on its own:
        course-specific override -> company-wide override -> course default -> 0

    so a company may override only the seat fee while setup and reactivation
    fees still come from the course default. Overrides carry no currency;
    currency always comes from the course default, else USD.

    Args:
        course_default: The course's global pricing row, if any
        company_wide: The company's override row with no course, if any
        course_specific: The company's override row for this course, if any

    Returns:
        EffectivePricing with every field populated
    """
    if company_wide is not None and not company_wide.is_company_wide:
        raise ValueError("company_wide override must not be scoped to a course")
    if course_specific is not None and course_specific.is_company_wide:
        raise ValueError("course_specific override must be scoped to a course")

    def pick(override_field: str, default_field: str) -> Decimal:
        return _first_present(
            getattr(course_specific, override_field, None),
            getattr(company_wide, override_field, None),
            getattr(course_default, default_field, None),
        )

    return EffectivePricing(
        setup_fee=pick("setup_fee_override", "setup_fee"),
        reactivation_fee=pick("reactivation_fee_override", "reactivation_fee"),
        seat_fee=pick("seat_fee_override", "seat_fee"),
        currency=course_default.currency if course_default is not None else DEFAULT_CURRENCY,
    )
