# backend/learnhub/db/models/payment.py
from sqlalchemy import Column, String, ForeignKey, Integer, Numeric, DateTime, JSON, CheckConstraint, Uuid
import uuid
from learnhub.db.base import BaseModel


class Payment(BaseModel):
    """
    One checkout attempt through eZeePayments.

    order_id is the opaque token handed to the gateway; the webhook uses it
    to find this row again.
    """
    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'completed', 'failed')",
            name="payments_status_check",
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    company_id = Column(Uuid, ForeignKey("companies.id"), nullable=False, index=True)
    course_activation_id = Column(Uuid, ForeignKey("course_activations.id"), nullable=True, index=True)

    payment_type = Column(String(50), nullable=False, default="course_activation")
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    user_count = Column(Integer, nullable=True)
    status = Column(String(32), default="pending", nullable=False, index=True)
    order_id = Column(String(64), unique=True, nullable=False, index=True)

    # Gateway fields
    gateway_transaction_id = Column(String(255), nullable=True)
    gateway_response_description = Column(String(500), nullable=True)
    processed_at = Column(DateTime, nullable=True)
    paid_at = Column(DateTime, nullable=True)

    details = Column(JSON, default=dict)
