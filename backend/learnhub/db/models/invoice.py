# backend/learnhub/db/models/invoice.py
from sqlalchemy import Column, String, ForeignKey, Integer, Numeric, Date, DateTime, CheckConstraint, Uuid
from sqlalchemy.orm import relationship
import uuid
from learnhub.db.base import Base, BaseModel


class Invoice(BaseModel):
    """Invoice for one course activation; items always sum to total"""
    __tablename__ = "invoices"
    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'sent', 'paid', 'cancelled')",
            name="invoices_status_check",
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    invoice_number = Column(String(32), unique=True, nullable=False, index=True)  # INV-2025-0007
    company_id = Column(Uuid, ForeignKey("companies.id"), nullable=False, index=True)
    course_activation_id = Column(Uuid, ForeignKey("course_activations.id"), nullable=False, index=True)

    subtotal = Column(Numeric(12, 2), nullable=False)
    tax_rate = Column(Numeric(5, 2), nullable=False, default=0)
    tax_amount = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")

    status = Column(String(32), default="sent", nullable=False, index=True)
    due_date = Column(Date, nullable=False)
    created_by = Column(Uuid, ForeignKey("profiles.id"), nullable=True)

    # Settlement
    paid_at = Column(DateTime, nullable=True)
    payment_method = Column(String(50), nullable=True)
    payment_reference = Column(String(255), nullable=True)

    # Relationships
    items = relationship("InvoiceItem", back_populates="invoice", cascade="all, delete-orphan", lazy="selectin")


class InvoiceItem(BaseModel):
    __tablename__ = "invoice_items"
    __table_args__ = (
        CheckConstraint(
            "item_type IN ('setup_fee', 'reactivation_fee', 'seat_fee', 'tax')",
            name="invoice_items_type_check",
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    invoice_id = Column(Uuid, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(String(500), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(12, 2), nullable=False)
    total = Column(Numeric(12, 2), nullable=False)
    item_type = Column(String(32), nullable=False)

    invoice = relationship("Invoice", back_populates="items")


class InvoiceSequence(Base):
    """Per-year invoice counter, incremented atomically inside the invoice transaction"""
    __tablename__ = "invoice_sequences"

    year = Column(Integer, primary_key=True, autoincrement=False)
    last_value = Column(Integer, nullable=False, default=0)
