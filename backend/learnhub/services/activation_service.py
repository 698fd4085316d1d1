# backend/learnhub/services/activation_service.py
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Union
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.core.config import settings
from learnhub.core.constants import ActivationStatus, InvoiceStatus
from learnhub.core.exceptions import NotFoundError
from learnhub.core.logging import logger
from learnhub.db.database import database_errors
from learnhub.db.models.activation import CourseActivation
from learnhub.db.models.invoice import Invoice, InvoiceItem
from learnhub.db.repositories.activation_repository import ActivationRepository
from learnhub.db.repositories.company_repository import CompanyRepository
from learnhub.db.repositories.course_repository import CourseRepository
from learnhub.db.repositories.invoice_repository import InvoiceRepository
from learnhub.pricing import (
    ActivationClassification,
    ActivationRecord,
    EffectivePricing,
    PricingCalculation,
    activation_expiry,
    build_invoice_items,
    classify_activation,
    compute_activation,
    ensure_can_activate,
    format_invoice_number,
    invoice_due_date,
    normalize_tax_rate,
    validate_seat_count,
)
from learnhub.services.pricing_service import PricingService


@dataclass
class ActivationResult:
    """Everything the caller needs to hand off to the payment gateway"""
    activation: CourseActivation
    invoice: Invoice
    pricing: EffectivePricing
    calculation: PricingCalculation
    is_renewal: bool
    items: List[InvoiceItem] = field(default_factory=list)


class ActivationService:
    """Course activation lifecycle: classification, access, activation + invoice"""

    def __init__(self, db: AsyncSession, pricing_service: Optional[PricingService] = None):
        self.db = db
        self.pricing_service = pricing_service or PricingService(db)
        self.activation_repo = ActivationRepository(db)
        self.invoice_repo = InvoiceRepository(db)
        self.course_repo = CourseRepository(db)
        self.company_repo = CompanyRepository(db)

    async def classify_activation(
        self,
        company_id: UUID,
        course_id: UUID,
        now: Optional[datetime] = None,
    ) -> ActivationClassification:
        """Classify against the company's most recently expiring activation of the course"""
        async with database_errors(self.db, "loading previous activation"):
            previous = await self.activation_repo.get_latest(company_id, course_id)

        record = ActivationRecord.model_validate(previous) if previous else None
        return classify_activation(record, now)

    async def can_access_course(
        self,
        company_id: Optional[UUID],
        course_id: UUID,
        now: Optional[datetime] = None,
    ) -> bool:
        """True when the company holds an active, unexpired activation"""
        if company_id is None:
            return False

        async with database_errors(self.db, "checking course access"):
            live = await self.activation_repo.get_live(company_id, course_id, now or datetime.utcnow())
        return live is not None

    async def create_activation_and_invoice(
        self,
        company_id: UUID,
        course_id: UUID,
        seat_count: int,
        created_by: Optional[UUID] = None,
        tax_rate_percent: Optional[Union[int, Decimal]] = None,
        now: Optional[datetime] = None,
    ) -> ActivationResult:
        """
        Activate a course for a company and raise its invoice.

        Validation, existence checks and the double-activation guard all run
        before any write. The activation, the invoice number allocation, the
        invoice and its items are then written in one transaction: on any
        failure nothing is kept and the whole call can be retried.

        Args:
            company_id: Buying company
            course_id: Course to activate
            seat_count: Seats to buy, at least 1
            created_by: Profile raising the invoice
            tax_rate_percent: Defaults to INVOICE_TAX_RATE_PERCENT
            now: Clock override for tests

        Returns:
            ActivationResult

        Raises:
            ValidationError: seat_count < 1, or tax rate outside 0-100 or finer than 0.01
            NotFoundError: unknown course or company
            ConflictError: an active, unexpired activation already exists
            InfrastructureError: database failure
        """
        validate_seat_count(seat_count)
        now = now or datetime.utcnow()
        rate = normalize_tax_rate(
            settings.INVOICE_TAX_RATE_PERCENT if tax_rate_percent is None else tax_rate_percent
        )

        async with database_errors(self.db, "creating course activation"):
            course = await self.course_repo.get(course_id)
            if not course:
                raise NotFoundError("Course not found")
            if not await self.company_repo.get(company_id):
                raise NotFoundError("Company not found")

            previous = await self.activation_repo.get_latest(company_id, course_id)
            classification = classify_activation(
                ActivationRecord.model_validate(previous) if previous else None, now
            )
            ensure_can_activate(classification)

            pricing = await self.pricing_service.resolve_effective_price(course_id, company_id)
            calculation = compute_activation(classification.is_renewal, seat_count, pricing, rate)

            activation = await self.activation_repo.create({
                "company_id": company_id,
                "course_id": course_id,
                "activated_at": now,
                "expires_at": activation_expiry(now),
                "is_renewal": classification.is_renewal,
                "status": ActivationStatus.PENDING_PAYMENT.value,
                "seat_count": seat_count,
                "setup_fee_paid": calculation.setup_or_reactivation_fee,
                "seat_fee_paid": calculation.seat_total,
                "total_paid": calculation.total,
                "created_at": now,
                "updated_at": now,
            })

            sequence = await self.invoice_repo.next_sequence(now.year)
            lines = build_invoice_items(
                course.title, classification.is_renewal, seat_count, pricing, calculation
            )
            invoice = await self.invoice_repo.create_with_items(
                {
                    "invoice_number": format_invoice_number(now.year, sequence),
                    "company_id": company_id,
                    "course_activation_id": activation.id,
                    "subtotal": calculation.subtotal,
                    "tax_rate": rate,
                    "tax_amount": calculation.tax_amount,
                    "total": calculation.total,
                    "currency": pricing.currency,
                    "status": InvoiceStatus.SENT.value,
                    "due_date": invoice_due_date(now),
                    "created_by": created_by,
                    "created_at": now,
                    "updated_at": now,
                },
                [
                    {
                        "description": line.description,
                        "quantity": line.quantity,
                        "unit_price": line.unit_price,
                        "total": line.total,
                        "item_type": line.item_type.value,
                    }
                    for line in lines
                ],
            )

            await self.db.commit()

        logger.info(
            f"Course activation {activation.id} created with invoice {invoice.invoice_number} "
            f"({'renewal' if classification.is_renewal else 'new'}, {seat_count} seats, "
            f"{calculation.total} {pricing.currency})",
            extra={"company_id": company_id, "user_id": created_by},
        )

        return ActivationResult(
            activation=activation,
            invoice=invoice,
            pricing=pricing,
            calculation=calculation,
            is_renewal=classification.is_renewal,
            items=list(invoice.items),
        )
