from __future__ import annotations

import hashlib
import hmac
import logging


logger = logging.getLogger(__name__)

SIGNATURE_PREFIX = "sha256="


def verify_subscription(mode: str | None, token: str | None, challenge: str | None, expected_token: str) -> str | None:
    """Meta webhook handshake: echo the challenge only for a matching verify token."""
    if mode == "subscribe" and token and expected_token and hmac.compare_digest(token, expected_token):
        return challenge or ""
    return None


def compute_signature(body: bytes, app_secret: str) -> str:
    """Value Meta sends in X-Hub-Signature-256 for this body."""
    digest = hmac.new(app_secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def is_signature_valid(body: bytes, signature_header: str | None, app_secret: str | None, allow_unsigned: bool) -> bool:
    """
    Check the HMAC-SHA256 signature of a webhook POST.

    Unsigned requests pass only when allow_unsigned is set (local development).
    A signed request is always checked, and fails if no app secret is configured.
    """
    if not signature_header:
        if allow_unsigned:
            logger.warning("Unsigned webhook accepted (development mode)")
        return allow_unsigned

    if not app_secret:
        logger.error("META_APP_SECRET missing; cannot verify webhook signature")
        return False

    if not signature_header.lower().startswith(SIGNATURE_PREFIX):
        logger.warning("Unsupported webhook signature scheme", extra={"reason": signature_header.split("=", 1)[0]})
        return False

    expected = compute_signature(body, app_secret)
    return hmac.compare_digest(expected, SIGNATURE_PREFIX + signature_header[len(SIGNATURE_PREFIX):])
