import hashlib
import hmac
import logging

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Tripletex-Signature"


class WebhookSignatureError(Exception):
    pass


def compute(raw_body: bytes, secret: str) -> str:
    """Hex HMAC-SHA256 of the raw request body."""
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()


def verify(raw_body: bytes, header: str | None, secret: str) -> None:
    """
    Raise WebhookSignatureError if signature invalid.

    The digest is taken over the bytes exactly as received. Re-encoding the
    parsed JSON would change key order and whitespace.
    """
    if not header:
        raise WebhookSignatureError(f"Missing {SIGNATURE_HEADER} header")
    if not secret:
        raise WebhookSignatureError("Webhook secret is not configured")

    expected = compute(raw_body, secret)
    received = header.strip().lower().encode("utf-8")
    if not hmac.compare_digest(expected.encode("ascii"), received):
        logger.warning(f"Signature mismatch for {len(raw_body)} byte body")
        raise WebhookSignatureError("Invalid signature")
