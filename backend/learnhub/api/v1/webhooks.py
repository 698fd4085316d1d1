# backend/learnhub/api/v1/webhooks.py
from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession
from urllib.parse import parse_qsl

from learnhub.db.database import get_db
from learnhub.api.dependencies import get_payment_gateway
from learnhub.services.ezee_payments_service import EzeePaymentsService
from learnhub.services.payment_service import PaymentService
from learnhub.core.logging import logger

router = APIRouter()


@router.post("/ezee-payments", response_class=PlainTextResponse)
async def ezee_payments_webhook(
    request: Request,
    gateway: EzeePaymentsService = Depends(get_payment_gateway),
    db: AsyncSession = Depends(get_db)
):
    """
    Handle eZeePayments notifications.

    The gateway retries anything but a 200, so every outcome is
    acknowledged with OK and problems are only logged.
    """
    body = await request.body()

    try:
        fields = dict(parse_qsl(body.decode("utf-8"), keep_blank_values=True))
        logger.info(
            f"eZeePayments webhook received (ResponseCode={fields.get('ResponseCode')})",
            extra={"order_id": fields.get("order_id")},
        )
        await PaymentService(db, gateway).handle_webhook(fields)
    except Exception:
        logger.exception("Error processing eZeePayments webhook")

    return PlainTextResponse("OK")
