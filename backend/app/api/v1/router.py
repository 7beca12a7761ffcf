"""
API v1 router that aggregates all endpoint routers.
Webhook routes are guarded by the shared webhook secret.
"""

from fastapi import APIRouter, Depends
from app.api.v1.middleware import require_webhook_secret

from app.api.v1.endpoints import (
    health,
    webhooks,
    deliveries,
    inventory,
    sites,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])

# Inbound automation webhooks
api_router.include_router(
    webhooks.router,
    prefix="/webhook",
    tags=["webhooks"],
    dependencies=[Depends(require_webhook_secret)],
)

api_router.include_router(deliveries.router, prefix="/deliveries", tags=["deliveries"])
api_router.include_router(inventory.items_router, prefix="/items", tags=["items"])
api_router.include_router(inventory.site_inventory_router, prefix="/sites", tags=["inventory"])
api_router.include_router(sites.router, prefix="/sites", tags=["sites"])
