# backend/learnhub/services/payment_service.py
import secrets
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Mapping, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.core.config import settings
from learnhub.core.constants import (
    DEFAULT_CURRENCY,
    EZEE_PAYMENT_METHOD,
    EZEE_SUCCESS_CODE,
    ORDER_ID_PREFIX,
    ActivationStatus,
    InvoiceStatus,
    PaymentStatus,
    PaymentType,
)
from learnhub.core.exceptions import ConflictError, GatewayError, NotFoundError
from learnhub.core.logging import logger
from learnhub.db.database import database_errors
from learnhub.db.models.payment import Payment
from learnhub.db.models.profile import Profile
from learnhub.db.repositories.activation_repository import ActivationRepository
from learnhub.db.repositories.course_repository import CourseRepository
from learnhub.db.repositories.invoice_repository import InvoiceRepository
from learnhub.db.repositories.payment_repository import PaymentRepository
from learnhub.services.access import ensure_company_access
from learnhub.services.ezee_payments_service import EzeePaymentsService

WEBHOOK_PATH = "/api/v1/webhooks/ezee-payments"


def generate_order_id() -> str:
    """Opaque gateway order id, e.g. ACT-1735689600000-3F9A1C0B7"""
    return f"{ORDER_ID_PREFIX}-{int(time.time() * 1000)}-{secrets.token_hex(5)[:9].upper()}"


@dataclass
class CheckoutSession:
    """What the browser needs to post the shopper to the payment page"""
    payment: Payment
    course_activation_id: UUID
    payment_url: str
    form_data: Dict[str, str] = field(default_factory=dict)


class PaymentService:
    """Course activation checkout and eZeePayments webhook processing"""

    def __init__(self, db: AsyncSession, gateway: Optional[EzeePaymentsService] = None):
        self.db = db
        self.gateway = gateway or EzeePaymentsService()
        self.payment_repo = PaymentRepository(db)
        self.activation_repo = ActivationRepository(db)
        self.invoice_repo = InvoiceRepository(db)
        self.course_repo = CourseRepository(db)

    async def create_course_activation_payment(
        self,
        activation_id: UUID,
        profile: Profile,
    ) -> CheckoutSession:
        """
        Start checkout for a pending course activation.

        The pending Payment is committed before the gateway is called, so a
        gateway failure leaves a ``failed`` Payment behind and the
        activation stays ``pending_payment`` for another attempt.

        Raises:
            NotFoundError: unknown activation
            PermissionDeniedError: caller is not in the owning company
            ConflictError: activation is already active
            GatewayError: token request failed
        """
        async with database_errors(self.db, "creating activation payment"):
            activation = await self.activation_repo.get(activation_id)
            if not activation:
                raise NotFoundError("Course activation not found")

            ensure_company_access(profile, activation.company_id)

            if activation.status == ActivationStatus.ACTIVE.value:
                raise ConflictError("Course activation is already paid and active")

            invoice = await self.invoice_repo.get_by_activation(activation.id)
            course = await self.course_repo.get(activation.course_id)
            currency = invoice.currency if invoice else DEFAULT_CURRENCY

            order_id = generate_order_id()
            payment = await self.payment_repo.create({
                "company_id": activation.company_id,
                "course_activation_id": activation.id,
                "payment_type": PaymentType.COURSE_ACTIVATION.value,
                "amount": activation.total_paid,
                "currency": currency,
                "user_count": activation.seat_count,
                "status": PaymentStatus.PENDING.value,
                "order_id": order_id,
                "details": {
                    "course_activation_id": str(activation.id),
                    "course_id": str(activation.course_id),
                    "is_renewal": activation.is_renewal,
                    "invoice_number": invoice.invoice_number if invoice else None,
                },
            })
            await self.db.commit()

        logger.info(
            f"Payment {payment.id} created for activation {activation.id}",
            extra={"company_id": activation.company_id, "user_id": profile.id, "order_id": order_id},
        )

        site_url = settings.SITE_URL.rstrip("/")
        try:
            token = await self.gateway.get_token(
                amount=payment.amount,
                currency=currency,
                order_id=order_id,
                post_back_url=f"{site_url}{WEBHOOK_PATH}",
                return_url=f"{site_url}/payments/success?payment_id={payment.id}",
                cancel_url=f"{site_url}/payments/cancel?payment_id={payment.id}",
            )
        except GatewayError:
            async with database_errors(self.db, "marking payment failed"):
                await self.payment_repo.update(payment.id, {"status": PaymentStatus.FAILED.value})
                await self.db.commit()
            logger.error(
                f"Gateway token request failed for payment {payment.id}",
                extra={"company_id": activation.company_id, "order_id": order_id},
            )
            raise

        course_title = course.title if course else "Course"
        kind = "Reactivation" if activation.is_renewal else "Setup"
        form_data = self.gateway.build_payment_form(
            token=token,
            amount=payment.amount,
            currency=currency,
            order_id=order_id,
            email_address=profile.email,
            customer_name=profile.full_name,
            description=f"{kind} Fee - {course_title} ({activation.seat_count} seats)",
        )

        return CheckoutSession(
            payment=payment,
            course_activation_id=activation.id,
            payment_url=self.gateway.payment_page_url(),
            form_data=form_data,
        )

    async def get_payment(self, payment_id: UUID, profile: Profile) -> Payment:
        async with database_errors(self.db, "loading payment"):
            payment = await self.payment_repo.get(payment_id)

        if not payment:
            raise NotFoundError("Payment not found")
        ensure_company_access(profile, payment.company_id)
        return payment

    async def handle_webhook(self, fields: Mapping[str, str]) -> Optional[Payment]:
        """
        Apply a gateway notification.

        Returns the Payment, or None when the notification cannot be matched
        (missing fields, unknown order id). A completed Payment is returned
        untouched; a failed one still accepts a later approval. Payment,
        activation and invoice change in one transaction.
        """
        response_code = (fields.get("ResponseCode") or "").strip()
        transaction_number = (fields.get("TransactionNumber") or "").strip()
        order_id = (fields.get("order_id") or "").strip()
        description = fields.get("ResponseDescription") or None

        if not response_code or not transaction_number:
            logger.warning("Webhook missing ResponseCode or TransactionNumber", extra={"order_id": order_id})
            return None
        if not order_id:
            logger.warning("Webhook received without order_id, cannot match payment")
            return None

        now = datetime.utcnow()
        is_success = response_code == EZEE_SUCCESS_CODE

        async with database_errors(self.db, "processing payment webhook"):
            payment = await self.payment_repo.get_by_order_id(order_id)
            if not payment:
                logger.error("Payment not found for webhook", extra={"order_id": order_id})
                return None

            # A decline can be followed by an approval on the same order; only completion is final
            if payment.status == PaymentStatus.COMPLETED.value:
                logger.info(
                    f"Payment {payment.id} already completed, webhook ignored",
                    extra={"order_id": order_id},
                )
                return payment

            changes = {
                "status": (PaymentStatus.COMPLETED if is_success else PaymentStatus.FAILED).value,
                "gateway_transaction_id": transaction_number,
                "gateway_response_description": description,
                "processed_at": now,
            }
            if is_success:
                changes["paid_at"] = now
            payment = await self.payment_repo.update(payment.id, changes)

            if is_success and payment.course_activation_id:
                await self.activation_repo.update(
                    payment.course_activation_id,
                    {"status": ActivationStatus.ACTIVE.value, "updated_at": now},
                )
                invoice = await self.invoice_repo.get_by_activation(payment.course_activation_id)
                if invoice:
                    await self.invoice_repo.update(invoice.id, {
                        "status": InvoiceStatus.PAID.value,
                        "paid_at": now,
                        "payment_method": EZEE_PAYMENT_METHOD,
                        "payment_reference": transaction_number,
                        "updated_at": now,
                    })
                else:
                    logger.warning(
                        f"No invoice for activation {payment.course_activation_id}",
                        extra={"order_id": order_id},
                    )

            await self.db.commit()

        if is_success:
            logger.info(
                f"Payment {payment.id} completed ({transaction_number})",
                extra={"company_id": payment.company_id, "order_id": order_id},
            )
        else:
            logger.warning(
                f"Payment {payment.id} failed: {description or response_code}",
                extra={"company_id": payment.company_id, "order_id": order_id},
            )
        return payment
