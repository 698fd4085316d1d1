"""
End-to-end tests through the HTTP API

Authentication, role checks and the JSON shape of every billing route.
"""
import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from uuid import uuid4

from learnhub.core.security import create_access_token
from learnhub.db.models import CourseActivation


@pytest.mark.asyncio
class TestAuthentication:

    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Request-ID" in response.headers

    async def test_missing_token(self, client, course):
        response = await client.get(f"/api/v1/pricing/courses/{course.id}")

        assert response.status_code == 401

    async def test_garbage_token(self, client, course):
        response = await client.get(
            f"/api/v1/pricing/courses/{course.id}",
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == 401

    async def test_expired_token(self, client, course, company_admin):
        token = create_access_token({"sub": str(company_admin.id)}, expires_delta=timedelta(minutes=-5))
        response = await client.get(
            f"/api/v1/pricing/courses/{course.id}",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 401

    async def test_unknown_profile(self, client, course):
        token = create_access_token({"sub": str(uuid4())})
        response = await client.get(
            f"/api/v1/pricing/courses/{course.id}",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 401


@pytest.mark.asyncio
class TestPricingAPI:

    async def test_own_company_pricing(self, client, auth_headers, company, course, course_pricing, company_user):
        response = await client.get(f"/api/v1/pricing/courses/{course.id}", headers=auth_headers(company_user))

        assert response.status_code == 200
        data = response.json()
        assert data["company_id"] == str(company.id)
        assert Decimal(data["setup_fee"]) == Decimal("500")
        assert Decimal(data["reactivation_fee"]) == Decimal("250")
        assert Decimal(data["seat_fee"]) == Decimal("10")
        assert data["currency"] == "USD"

    async def test_other_company_forbidden(self, client, auth_headers, company, course, outsider_admin):
        response = await client.get(
            f"/api/v1/pricing/courses/{course.id}",
            params={"company_id": str(company.id)},
            headers=auth_headers(outsider_admin),
        )

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    async def test_super_admin_needs_company_id(self, client, auth_headers, company, course, course_pricing, super_admin):
        missing = await client.get(f"/api/v1/pricing/courses/{course.id}", headers=auth_headers(super_admin))
        scoped = await client.get(
            f"/api/v1/pricing/courses/{course.id}",
            params={"company_id": str(company.id)},
            headers=auth_headers(super_admin),
        )

        assert missing.status_code == 400
        assert scoped.status_code == 200


@pytest.mark.asyncio
class TestActivationAPI:

    async def test_activate_course(self, client, auth_headers, company, course, course_pricing, company_admin):
        response = await client.post(
            "/api/v1/company-admin/courses/activate",
            json={"course_id": str(course.id), "seat_count": 20},
            headers=auth_headers(company_admin),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["is_renewal"] is False
        assert data["activation"]["status"] == "pending_payment"
        assert data["invoice"]["invoice_number"].startswith(f"INV-{datetime.utcnow().year}-")
        assert Decimal(data["invoice"]["total"]) == Decimal("700")
        assert Decimal(data["pricing"]["seat_total"]) == Decimal("200")
        assert len(data["invoice"]["items"]) == 2

    async def test_double_activation_conflict(self, client, auth_headers, db_session, company, course, course_pricing, company_admin):
        db_session.add(CourseActivation(
            company_id=company.id,
            course_id=course.id,
            activated_at=datetime.utcnow() - timedelta(days=30),
            expires_at=datetime.utcnow() + timedelta(days=335),
            status="active",
            seat_count=5,
            setup_fee_paid=Decimal("500"),
            seat_fee_paid=Decimal("50"),
            total_paid=Decimal("550"),
        ))
        await db_session.commit()

        response = await client.post(
            "/api/v1/company-admin/courses/activate",
            json={"course_id": str(course.id), "seat_count": 20},
            headers=auth_headers(company_admin),
        )

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "conflict"
        assert "existing_activation_id" in body

    async def test_invalid_seat_count(self, client, auth_headers, course, course_pricing, company_admin):
        response = await client.post(
            "/api/v1/company-admin/courses/activate",
            json={"course_id": str(course.id), "seat_count": 0},
            headers=auth_headers(company_admin),
        )

        assert response.status_code == 400

    async def test_unknown_course(self, client, auth_headers, company_admin):
        response = await client.post(
            "/api/v1/company-admin/courses/activate",
            json={"course_id": str(uuid4()), "seat_count": 1},
            headers=auth_headers(company_admin),
        )

        assert response.status_code == 404

    async def test_requires_company_admin(self, client, auth_headers, course, company_user):
        response = await client.post(
            "/api/v1/company-admin/courses/activate",
            json={"course_id": str(course.id), "seat_count": 1},
            headers=auth_headers(company_user),
        )

        assert response.status_code == 403

    async def test_activation_status(self, client, auth_headers, course, course_pricing, company_admin):
        before = await client.get(
            f"/api/v1/company-admin/courses/{course.id}/activation", headers=auth_headers(company_admin)
        )
        await client.post(
            "/api/v1/company-admin/courses/activate",
            json={"course_id": str(course.id), "seat_count": 3},
            headers=auth_headers(company_admin),
        )
        after = await client.get(
            f"/api/v1/company-admin/courses/{course.id}/activation", headers=auth_headers(company_admin)
        )

        assert before.json()["is_renewal"] is False
        assert before.json()["previous_status"] is None
        assert after.json()["is_renewal"] is True
        assert after.json()["previous_status"] == "pending_payment"
        # Not paid yet
        assert after.json()["has_access"] is False

    async def test_lapsed_activation_reported_expired(
        self, client, auth_headers, db_session, company, course, company_admin
    ):
        db_session.add(CourseActivation(
            company_id=company.id,
            course_id=course.id,
            activated_at=datetime.utcnow() - timedelta(days=400),
            expires_at=datetime.utcnow() - timedelta(days=35),
            status="active",
            seat_count=5,
            setup_fee_paid=Decimal("500"),
            seat_fee_paid=Decimal("50"),
            total_paid=Decimal("550"),
        ))
        await db_session.commit()

        response = await client.get(
            f"/api/v1/company-admin/courses/{course.id}/activation", headers=auth_headers(company_admin)
        )

        data = response.json()
        assert data["previous_status"] == "expired"
        assert data["is_expired"] is True
        assert data["has_access"] is False


@pytest.mark.asyncio
class TestPaymentAPI:

    async def _activate(self, client, auth_headers, course, profile) -> str:
        response = await client.post(
            "/api/v1/company-admin/courses/activate",
            json={"course_id": str(course.id), "seat_count": 20},
            headers=auth_headers(profile),
        )
        return response.json()["activation"]["id"]

    async def test_checkout_and_webhook_flow(self, client, auth_headers, course, course_pricing, company_admin):
        activation_id = await self._activate(client, auth_headers, course, company_admin)

        checkout = await client.post(
            "/api/v1/payments/course-activation",
            json={"course_activation_id": activation_id},
            headers=auth_headers(company_admin),
        )
        assert checkout.status_code == 200
        data = checkout.json()
        assert data["success"] is True
        assert data["form_data"]["amount"] == "700.00"

        order_id = data["form_data"]["order_id"]
        webhook = await client.post(
            "/api/v1/webhooks/ezee-payments",
            content=f"ResponseCode=1&TransactionNumber=TX-77&order_id={order_id}",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        assert webhook.text == "OK"

        payment = await client.get(f"/api/v1/payments/{data['payment_id']}", headers=auth_headers(company_admin))
        assert payment.status_code == 200
        assert payment.json()["status"] == "completed"
        assert payment.json()["gateway_transaction_id"] == "TX-77"

        status = await client.get(
            f"/api/v1/company-admin/courses/{course.id}/activation", headers=auth_headers(company_admin)
        )
        assert status.json()["has_access"] is True

        again = await client.post(
            "/api/v1/payments/course-activation",
            json={"course_activation_id": activation_id},
            headers=auth_headers(company_admin),
        )
        assert again.status_code == 409

    async def test_gateway_down_returns_502(
        self, client, auth_headers, gateway_recorder, course, course_pricing, company_admin
    ):
        activation_id = await self._activate(client, auth_headers, course, company_admin)
        gateway_recorder.status_code = 503

        response = await client.post(
            "/api/v1/payments/course-activation",
            json={"course_activation_id": activation_id},
            headers=auth_headers(company_admin),
        )

        assert response.status_code == 502
        assert response.json()["error"] == "gateway_error"

    async def test_payment_hidden_from_other_company(
        self, client, auth_headers, course, course_pricing, company_admin, outsider_admin
    ):
        activation_id = await self._activate(client, auth_headers, course, company_admin)
        checkout = await client.post(
            "/api/v1/payments/course-activation",
            json={"course_activation_id": activation_id},
            headers=auth_headers(company_admin),
        )
        payment_id = checkout.json()["payment_id"]

        response = await client.get(f"/api/v1/payments/{payment_id}", headers=auth_headers(outsider_admin))

        assert response.status_code == 403

    async def test_unknown_payment(self, client, auth_headers, company_admin):
        response = await client.get(f"/api/v1/payments/{uuid4()}", headers=auth_headers(company_admin))

        assert response.status_code == 404


@pytest.mark.asyncio
class TestAdminPricingAPI:

    async def test_requires_super_admin(self, client, auth_headers, company_admin):
        response = await client.get("/api/v1/admin/pricing/courses", headers=auth_headers(company_admin))

        assert response.status_code == 403

    async def test_set_and_list_course_pricing(self, client, auth_headers, course, super_admin):
        put = await client.put(
            f"/api/v1/admin/pricing/courses/{course.id}",
            json={"setup_fee": "300", "reactivation_fee": "150", "seat_fee": "12.50", "currency": "eur"},
            headers=auth_headers(super_admin),
        )
        assert put.status_code == 200
        assert put.json()["currency"] == "EUR"

        listing = await client.get("/api/v1/admin/pricing/courses", headers=auth_headers(super_admin))
        rows = listing.json()
        assert len(rows) == 1
        assert Decimal(rows[0]["seat_fee"]) == Decimal("12.50")

    async def test_negative_fee_rejected(self, client, auth_headers, course, super_admin):
        response = await client.put(
            f"/api/v1/admin/pricing/courses/{course.id}",
            json={"setup_fee": "-1", "reactivation_fee": "0", "seat_fee": "0"},
            headers=auth_headers(super_admin),
        )

        assert response.status_code == 422

    async def test_override_lifecycle(self, client, auth_headers, company, course, course_pricing, super_admin):
        headers = auth_headers(super_admin)
        base = f"/api/v1/admin/pricing/companies/{company.id}/overrides"

        put = await client.put(base, json={"seat_fee_override": "8"}, headers=headers)
        assert put.status_code == 200
        assert put.json()["course_id"] is None

        pricing = await client.get(
            f"/api/v1/pricing/courses/{course.id}", params={"company_id": str(company.id)}, headers=headers
        )
        assert Decimal(pricing.json()["seat_fee"]) == Decimal("8")

        deleted = await client.delete(base, headers=headers)
        assert deleted.status_code == 204

        missing = await client.delete(base, headers=headers)
        assert missing.status_code == 404

    async def test_override_unknown_company(self, client, auth_headers, super_admin):
        response = await client.put(
            f"/api/v1/admin/pricing/companies/{uuid4()}/overrides",
            json={"seat_fee_override": "8"},
            headers=auth_headers(super_admin),
        )

        assert response.status_code == 404
