from fastapi import APIRouter
from learnhub.api.v1 import pricing, activations, payments, webhooks, admin_pricing

api_router = APIRouter()

api_router.include_router(pricing.router, prefix="/pricing", tags=["pricing"])
api_router.include_router(activations.router, prefix="/company-admin", tags=["activations"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
api_router.include_router(webhooks.router, prefix="/webhooks", tags=["webhooks"])
api_router.include_router(admin_pricing.router, prefix="/admin/pricing", tags=["admin"])
