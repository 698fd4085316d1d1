# backend/learnhub/db/models/pricing.py
from sqlalchemy import Column, String, ForeignKey, Numeric, CheckConstraint, UniqueConstraint, Index, Uuid, text
import uuid
from learnhub.db.base import BaseModel


class CoursePricing(BaseModel):
    """Global default pricing for a course; one row per course"""
    __tablename__ = "course_pricing"
    __table_args__ = (
        CheckConstraint(
            "setup_fee >= 0 AND reactivation_fee >= 0 AND seat_fee >= 0",
            name="course_pricing_non_negative",
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    course_id = Column(Uuid, ForeignKey("courses.id", ondelete="CASCADE"), unique=True, nullable=False)

    setup_fee = Column(Numeric(12, 2), nullable=False, default=0)
    reactivation_fee = Column(Numeric(12, 2), nullable=False, default=0)
    seat_fee = Column(Numeric(12, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="USD")


class CompanyPricingOverride(BaseModel):
    """
    Per-company pricing override.

    course_id NULL means the override applies to all of the company's
    courses. A NULL fee column means "not overridden" and falls through to
    the next tier; it never means zero.
    """
    __tablename__ = "company_pricing_overrides"
    __table_args__ = (
        UniqueConstraint("company_id", "course_id", name="uq_company_course_override"),
        # NULLs are distinct in the unique constraint above
        Index(
            "uq_company_wide_override",
            "company_id",
            unique=True,
            postgresql_where=text("course_id IS NULL"),
            sqlite_where=text("course_id IS NULL"),
        ),
        CheckConstraint(
            "(setup_fee_override IS NULL OR setup_fee_override >= 0) AND "
            "(reactivation_fee_override IS NULL OR reactivation_fee_override >= 0) AND "
            "(seat_fee_override IS NULL OR seat_fee_override >= 0)",
            name="company_pricing_overrides_non_negative",
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    company_id = Column(Uuid, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(Uuid, ForeignKey("courses.id", ondelete="CASCADE"), nullable=True, index=True)

    setup_fee_override = Column(Numeric(12, 2), nullable=True)
    reactivation_fee_override = Column(Numeric(12, 2), nullable=True)
    seat_fee_override = Column(Numeric(12, 2), nullable=True)
