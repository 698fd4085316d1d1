"""
Tests for the eZeePayments client, checkout handoff and webhook
"""
import pytest
from decimal import Decimal
from urllib.parse import urlencode
from uuid import uuid4
from unittest.mock import AsyncMock, patch

import httpx

from learnhub.core.exceptions import ConflictError, GatewayError, NotFoundError, PermissionDeniedError
from learnhub.services.activation_service import ActivationService
from learnhub.services.ezee_payments_service import EzeePaymentsService
from learnhub.services.payment_service import PaymentService, generate_order_id


async def _pending_activation(db_session, company, course):
    return await ActivationService(db_session).create_activation_and_invoice(
        company_id=company.id, course_id=course.id, seat_count=20,
    )


@pytest.mark.asyncio
class TestEzeePaymentsClient:

    async def test_get_token_posts_form_with_credentials(self, gateway, gateway_recorder):
        token = await gateway.get_token(
            amount=Decimal("700"),
            currency="USD",
            order_id="ACT-1-ABC",
            post_back_url="https://learnhub.test/hook",
            return_url="https://learnhub.test/ok",
            cancel_url="https://learnhub.test/cancel",
        )

        assert token == "tok_test_123"
        sent = gateway_recorder.requests[0]
        assert sent["path"] == "/v1/custom_token/"
        assert sent["headers"]["licence_key"] == "test-licence"
        assert sent["headers"]["site"] == "learnhub.test"
        assert sent["form"]["amount"] == "700.00"
        assert sent["form"]["order_id"] == "ACT-1-ABC"

    async def test_gateway_rejection_raises(self, gateway, gateway_recorder):
        gateway_recorder.token_response = {"result": {"status": 0, "message": {"amount": "invalid"}}}

        with pytest.raises(GatewayError) as exc_info:
            await gateway.get_token(Decimal("1"), "USD", "ACT-1", "a", "b", "c")
        assert "amount: invalid" in exc_info.value.message

    async def test_http_error_status_raises(self, gateway, gateway_recorder):
        gateway_recorder.status_code = 500

        with pytest.raises(GatewayError):
            await gateway.get_token(Decimal("1"), "USD", "ACT-1", "a", "b", "c")

    async def test_transport_failure_raises(self):
        def fail(request):
            raise httpx.ConnectError("connection refused")

        gateway = EzeePaymentsService(transport=httpx.MockTransport(fail))
        with pytest.raises(GatewayError):
            await gateway.get_token(Decimal("1"), "USD", "ACT-1", "a", "b", "c")

    async def test_payment_form(self, gateway):
        form = gateway.build_payment_form(
            token="tok", amount=Decimal("410"), currency="USD", order_id="ACT-1", email_address="a@b.test",
        )

        assert form == {
            "platform": "custom",
            "token": "tok",
            "amount": "410.00",
            "currency": "USD",
            "order_id": "ACT-1",
            "email_address": "a@b.test",
            "recurring": "false",
        }


@pytest.mark.asyncio
class TestCheckout:

    async def test_creates_pending_payment_and_form(
        self, db_session, gateway, gateway_recorder, company, course, course_pricing, company_admin
    ):
        created = await _pending_activation(db_session, company, course)

        checkout = await PaymentService(db_session, gateway).create_course_activation_payment(
            created.activation.id, company_admin
        )

        payment = checkout.payment
        assert payment.status == "pending"
        assert payment.amount == Decimal("700")
        assert payment.currency == "USD"
        assert payment.user_count == 20
        assert payment.order_id.startswith("ACT-")
        assert payment.order_id != created.invoice.invoice_number
        assert payment.details["invoice_number"] == created.invoice.invoice_number

        assert checkout.payment_url == gateway.payment_page_url()
        assert checkout.form_data["token"] == "tok_test_123"
        assert checkout.form_data["description"] == "Setup Fee - Workplace Safety (20 seats)"
        assert checkout.form_data["email_address"] == company_admin.email

        sent = gateway_recorder.requests[0]["form"]
        assert sent["post_back_url"] == "https://learnhub.test/api/v1/webhooks/ezee-payments"
        assert sent["return_url"] == f"https://learnhub.test/payments/success?payment_id={payment.id}"

    async def test_gateway_failure_marks_payment_failed(
        self, db_session, gateway, company, course, course_pricing, company_admin
    ):
        created = await _pending_activation(db_session, company, course)
        service = PaymentService(db_session, gateway)

        with patch.object(gateway, "get_token", AsyncMock(side_effect=GatewayError("down"))):
            with pytest.raises(GatewayError):
                await service.create_course_activation_payment(created.activation.id, company_admin)

        payments = await service.payment_repo.get_multi()
        assert [p.status for p in payments] == ["failed"]
        activation = await service.activation_repo.get(created.activation.id)
        assert activation.status == "pending_payment"

    async def test_unknown_activation(self, db_session, gateway, company_admin):
        with pytest.raises(NotFoundError):
            await PaymentService(db_session, gateway).create_course_activation_payment(uuid4(), company_admin)

    async def test_other_company_forbidden_super_admin_allowed(
        self, db_session, gateway, company, course, course_pricing, outsider_admin, super_admin
    ):
        created = await _pending_activation(db_session, company, course)
        service = PaymentService(db_session, gateway)

        with pytest.raises(PermissionDeniedError):
            await service.create_course_activation_payment(created.activation.id, outsider_admin)

        checkout = await service.create_course_activation_payment(created.activation.id, super_admin)
        assert checkout.payment.company_id == company.id

    async def test_already_active_conflicts(
        self, db_session, gateway, company, course, course_pricing, company_admin
    ):
        created = await _pending_activation(db_session, company, course)
        service = PaymentService(db_session, gateway)
        await service.activation_repo.update(created.activation.id, {"status": "active"})
        await db_session.commit()

        with pytest.raises(ConflictError):
            await service.create_course_activation_payment(created.activation.id, company_admin)


def test_order_ids_are_unique():
    ids = {generate_order_id() for _ in range(50)}

    assert len(ids) == 50
    assert all(order_id.startswith("ACT-") for order_id in ids)


@pytest.mark.asyncio
class TestWebhook:

    @pytest.fixture
    async def checkout(self, db_session, gateway, company, course, course_pricing, company_admin):
        created = await _pending_activation(db_session, company, course)
        return await PaymentService(db_session, gateway).create_course_activation_payment(
            created.activation.id, company_admin
        )

    async def _post(self, client, **fields):
        return await client.post(
            "/api/v1/webhooks/ezee-payments",
            content=urlencode(fields),
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

    async def test_success_completes_payment_activation_and_invoice(self, client, db_session, gateway, checkout):
        response = await self._post(
            client,
            ResponseCode="1",
            ResponseDescription="Approved",
            TransactionNumber="TX-1001",
            order_id=checkout.payment.order_id,
        )

        assert response.status_code == 200
        assert response.text == "OK"

        service = PaymentService(db_session, gateway)
        payment = await service.payment_repo.get(checkout.payment.id)
        assert payment.status == "completed"
        assert payment.gateway_transaction_id == "TX-1001"
        assert payment.paid_at is not None

        activation = await service.activation_repo.get(checkout.course_activation_id)
        assert activation.status == "active"

        invoice = await service.invoice_repo.get_by_activation(checkout.course_activation_id)
        assert invoice.status == "paid"
        assert invoice.payment_method == "ezee_payments"
        assert invoice.payment_reference == "TX-1001"
        assert invoice.paid_at is not None

    async def test_failure_marks_payment_failed_only(self, client, db_session, gateway, checkout):
        response = await self._post(
            client,
            ResponseCode="0",
            ResponseDescription="Declined",
            TransactionNumber="TX-1002",
            order_id=checkout.payment.order_id,
        )

        assert response.status_code == 200
        service = PaymentService(db_session, gateway)
        payment = await service.payment_repo.get(checkout.payment.id)
        assert payment.status == "failed"
        assert payment.gateway_response_description == "Declined"
        assert payment.paid_at is None

        activation = await service.activation_repo.get(checkout.course_activation_id)
        assert activation.status == "pending_payment"

    async def test_replayed_notification_is_ignored(self, db_session, gateway, checkout):
        service = PaymentService(db_session, gateway)
        fields = {"ResponseCode": "1", "TransactionNumber": "TX-1", "order_id": checkout.payment.order_id}

        first = await service.handle_webhook(fields)
        paid_at = first.paid_at

        replay = await service.handle_webhook({**fields, "ResponseCode": "0", "TransactionNumber": "TX-2"})

        assert replay.status == "completed"
        assert replay.gateway_transaction_id == "TX-1"
        assert replay.paid_at == paid_at

    async def test_approval_after_decline_activates(self, client, db_session, gateway, checkout):
        order_id = checkout.payment.order_id
        await self._post(client, ResponseCode="2", ResponseDescription="Declined", TransactionNumber="T1", order_id=order_id)
        response = await self._post(
            client, ResponseCode="1", ResponseDescription="Approved", TransactionNumber="T2", order_id=order_id
        )

        assert response.text == "OK"
        service = PaymentService(db_session, gateway)
        payment = await service.payment_repo.get(checkout.payment.id)
        assert payment.status == "completed"
        assert payment.gateway_transaction_id == "T2"
        assert payment.paid_at is not None

        activation = await service.activation_repo.get(checkout.course_activation_id)
        assert activation.status == "active"
        invoice = await service.invoice_repo.get_by_activation(checkout.course_activation_id)
        assert invoice.status == "paid"
        assert invoice.payment_reference == "T2"

    async def test_unmatched_notifications_still_acknowledged(self, client, checkout):
        missing_code = await self._post(client, TransactionNumber="TX-1", order_id=checkout.payment.order_id)
        missing_order = await self._post(client, ResponseCode="1", TransactionNumber="TX-1")
        unknown_order = await self._post(client, ResponseCode="1", TransactionNumber="TX-1", order_id="ACT-NOPE")

        for response in (missing_code, missing_order, unknown_order):
            assert response.status_code == 200
            assert response.text == "OK"

    async def test_internal_error_still_acknowledged(self, client, checkout):
        with patch.object(PaymentService, "handle_webhook", AsyncMock(side_effect=RuntimeError("boom"))):
            response = await self._post(
                client, ResponseCode="1", TransactionNumber="TX-1", order_id=checkout.payment.order_id
            )

        assert response.status_code == 200
        assert response.text == "OK"
