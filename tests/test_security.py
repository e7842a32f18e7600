from __future__ import annotations

import base64
import hashlib
import hmac

from influencer_admin.security import verify_webhook_hmac


def _webhook_hmac(body: bytes, secret: str) -> str:
    return base64.b64encode(hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()).decode("utf-8")


def test_verify_webhook_hmac_accepts_valid_signature():
    body = b'{"order_id": 123}'

    assert verify_webhook_hmac(body=body, supplied_hmac=_webhook_hmac(body, "shared"), secret="shared")


def test_verify_webhook_hmac_rejects_signature_for_other_body():
    signature = _webhook_hmac(b'{"order_id": 123}', "shared")

    assert not verify_webhook_hmac(body=b'{"order_id": 999}', supplied_hmac=signature, secret="shared")


def test_verify_webhook_hmac_rejects_missing_header_when_secret_set():
    assert not verify_webhook_hmac(body=b"{}", supplied_hmac=None, secret="shared")


def test_verify_webhook_hmac_trusts_everything_without_secret(caplog):
    assert verify_webhook_hmac(body=b"{}", supplied_hmac=None, secret="")
    assert "SHOPIFY_WEBHOOK_SECRET is not set" in caplog.text


def test_verify_webhook_hmac_uses_configured_secret():
    body = b'{"id": 1}'

    assert verify_webhook_hmac(body=body, supplied_hmac=_webhook_hmac(body, "webhook_secret"))
