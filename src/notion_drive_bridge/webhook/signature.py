"""HMAC-SHA256 verification of Notion webhook bodies."""

import hashlib
import hmac

from notion_drive_bridge.errors import SignatureError

SIGNATURE_PREFIX = "sha256="


def compute_signature(body: bytes, secret: str | bytes) -> str:
    """Return the lowercase hex HMAC-SHA256 of ``body`` keyed by ``secret``."""
    if isinstance(secret, str):
        secret = secret.encode()
    return hmac.new(secret, body, hashlib.sha256).hexdigest()


def verify_signature(body: bytes, signature: str | None, secret: str | bytes) -> None:
    """Verify a Notion webhook signature, raising SignatureError on failure.

    Notion sends the digest as ``sha256=<hex>``; a bare hex digest is accepted
    too. The hex part must match exactly, so uppercase digests are rejected.
    """
    if not signature:
        raise SignatureError("Missing signature header")

    presented = signature.strip()
    if presented.startswith(SIGNATURE_PREFIX):
        presented = presented[len(SIGNATURE_PREFIX):]

    expected = compute_signature(body, secret)
    if not hmac.compare_digest(expected.encode(), presented.encode()):
        raise SignatureError("Signature mismatch")
