# backend/learnhub/db/models/activation.py
from sqlalchemy import Column, String, ForeignKey, Integer, Boolean, Numeric, DateTime, CheckConstraint, Index, Uuid
import uuid
from learnhub.db.base import BaseModel


class CourseActivation(BaseModel):
    """
    A company's paid right to assign a course for one year.

    Created as pending_payment; only the payment webhook moves it to active.
    Expiry is computed at read time from expires_at, no background job
    rewrites the status.
    """
    __tablename__ = "course_activations"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending_payment', 'active', 'expired', 'cancelled')",
            name="course_activations_status_check",
        ),
        CheckConstraint("seat_count >= 1", name="course_activations_seat_count_check"),
        Index("ix_course_activations_company_course_expiry", "company_id", "course_id", "expires_at"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    company_id = Column(Uuid, ForeignKey("companies.id"), nullable=False, index=True)
    course_id = Column(Uuid, ForeignKey("courses.id"), nullable=False, index=True)

    activated_at = Column(DateTime, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    is_renewal = Column(Boolean, default=False, nullable=False)
    status = Column(String(32), default="pending_payment", nullable=False, index=True)

    # Money snapshot at activation time
    seat_count = Column(Integer, nullable=False)
    setup_fee_paid = Column(Numeric(12, 2), nullable=False)
    seat_fee_paid = Column(Numeric(12, 2), nullable=False)
    total_paid = Column(Numeric(12, 2), nullable=False)
