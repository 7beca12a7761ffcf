"""
Shared-secret check for inbound automation webhooks.
"""

import hmac
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class WebhookSecret:
    """
    Secret that inbound webhook callers present in the X-Webhook-Secret header.

    Constructed once from settings. An empty secret disables the check so that
    local and test deployments accept unsigned calls.
    """

    def __init__(self, secret: str = ""):
        self._secret = secret or ""

    @property
    def enabled(self) -> bool:
        return bool(self._secret)

    def is_valid(self, value: Optional[str]) -> bool:
        if not self.enabled:
            return True
        if value is not None and hmac.compare_digest(self._secret.encode(), value.encode()):
            return True
        logger.warning("Invalid webhook secret was attempted")
        return False
