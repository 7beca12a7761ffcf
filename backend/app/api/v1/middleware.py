"""
API middleware for common concerns.
Centralized shared-secret enforcement for inbound webhook routes.
"""

from typing import Optional
from fastapi import Depends, Header, HTTPException, status

from app.core.security import WebhookSecret
from app.deps.di_container import get_webhook_secret


async def require_webhook_secret(
    x_webhook_secret: Optional[str] = Header(None),
    secret: WebhookSecret = Depends(get_webhook_secret),
) -> None:
    """
    Reject webhook calls whose X-Webhook-Secret header does not match.

    Applied at the router level to every webhook route. A deployment without a
    configured secret accepts all calls.

    Raises:
        HTTPException: 401 if the secret is configured and does not match
    """
    if not secret.is_valid(x_webhook_secret):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid webhook secret",
        )
