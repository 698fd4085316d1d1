# backend/learnhub/services/ezee_payments_service.py
import httpx
from decimal import Decimal
from typing import Dict, Any, Optional

from learnhub.core.config import settings
from learnhub.core.exceptions import GatewayError
from learnhub.core.logging import logger


def _format_amount(amount: Decimal) -> str:
    return f"{amount:.2f}"


class EzeePaymentsService:
    """Service for eZeePayments integration"""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.licence_key = settings.EZEE_LICENCE_KEY or ""
        self.site = settings.EZEE_SITE or ""
        self.base_url = settings.EZEE_API_URL.rstrip("/")
        self.secure_url = settings.EZEE_SECURE_URL
        self.timeout = settings.EZEE_TIMEOUT_SECONDS
        self._transport = transport

        if not self.licence_key or not self.site:
            logger.warning("eZeePayments credentials not configured (EZEE_LICENCE_KEY, EZEE_SITE)")

    @property
    def headers(self) -> Dict[str, str]:
        # Every request authenticates with these two headers
        return {
            "licence_key": self.licence_key,
            "site": self.site,
            "Content-Type": "application/x-www-form-urlencoded",
        }

    async def _post(self, endpoint: str, data: Dict[str, Any]) -> Dict[str, Any]:
        form = {key: str(value) for key, value in data.items() if value is not None}

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}{endpoint}",
                    data=form,
                    headers=self.headers,
                )
        except httpx.HTTPError as e:
            logger.error(f"eZeePayments request to {endpoint} failed: {str(e)}")
            raise GatewayError("Payment gateway is unreachable") from e

        if response.status_code >= 400:
            logger.error(f"eZeePayments error {response.status_code} on {endpoint}")
            raise GatewayError(f"eZeePayments API error: {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise GatewayError("Payment gateway returned an invalid response") from e

    @staticmethod
    def _result(payload: Dict[str, Any], action: str) -> Dict[str, Any]:
        """Unwrap the ``result`` envelope, raising when status is not 1"""
        result = payload.get("result") or {}
        if str(result.get("status")) != "1":
            message = result.get("message") or f"Failed to {action}"
            if isinstance(message, dict):
                message = "; ".join(f"{k}: {v}" for k, v in message.items())
            raise GatewayError(str(message))
        return result

    async def get_token(
        self,
        amount: Decimal,
        currency: str,
        order_id: str,
        post_back_url: str,
        return_url: str,
        cancel_url: str,
    ) -> str:
        """
        Get a one-time payment token. Required before every payment.

        Args:
            amount: Amount in major currency units (e.g. 700.00)
            currency: Currency code
            order_id: Our opaque order id; echoed back by the webhook
            post_back_url: Webhook URL
            return_url: Where the shopper lands after paying
            cancel_url: Where the shopper lands after cancelling

        Returns:
            Payment token
        """
        payload = await self._post("/v1/custom_token/", {
            "amount": _format_amount(amount),
            "currency": currency,
            "order_id": order_id,
            "post_back_url": post_back_url,
            "return_url": return_url,
            "cancel_url": cancel_url,
        })
        result = self._result(payload, "get payment token")

        token = result.get("token")
        if not token:
            raise GatewayError("No token received from payment gateway")

        logger.info("Received eZeePayments token", extra={"order_id": order_id})
        return token

    def payment_page_url(self) -> str:
        """Secure page the browser posts the payment form to"""
        return self.secure_url

    def build_payment_form(
        self,
        token: str,
        amount: Decimal,
        currency: str,
        order_id: str,
        email_address: str,
        customer_name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Dict[str, str]:
        """Form fields for the browser redirect to the secure payment page"""
        fields = {
            "platform": "custom",
            "token": token,
            "amount": _format_amount(amount),
            "currency": currency,
            "order_id": order_id,
            "email_address": email_address,
            "customer_name": customer_name,
            "description": description,
            "recurring": "false",
        }
        return {key: str(value) for key, value in fields.items() if value is not None}
