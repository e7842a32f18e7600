from __future__ import annotations

import base64
import hashlib
import hmac
import logging

from fastapi import Header, HTTPException, status

from influencer_admin.config import settings

logger = logging.getLogger(__name__)


def verify_webhook_hmac(*, body: bytes, supplied_hmac: str | None, secret: str | None = None) -> bool:
    """Check Shopify's base64 HMAC-SHA256 of the raw webhook body.

    With no shared secret configured verification is skipped and the webhook
    is trusted; this is logged on every call.
    """
    secret = secret if secret is not None else settings.SHOPIFY_WEBHOOK_SECRET
    if not secret:
        logger.warning("SHOPIFY_WEBHOOK_SECRET is not set; accepting webhook without verification")
        return True
    if not supplied_hmac:
        return False
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    encoded = base64.b64encode(digest).decode("utf-8")
    return hmac.compare_digest(encoded, supplied_hmac)


def require_admin_token(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> None:
    expected = settings.ADMIN_API_TOKEN
    if not expected:
        return
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Bearer authorization header",
        )
    token = authorization[7:].strip()
    if not hmac.compare_digest(token, expected):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin API token",
        )
