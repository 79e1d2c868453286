import hmac
import hashlib


def compute_signature(payload: bytes, secret: str) -> str:
    """
    Hex encoded HMAC-SHA256 of the payload, as Razorpay sends it in
    X-Razorpay-Signature.
    """
    return hmac.new(
        secret.encode(),
        payload,
        hashlib.sha256
    ).hexdigest()


def verify_signature(payload: bytes, signature: str, secret: str) -> bool:
    """
    Verify a webhook signature over the exact bytes that were received.

    The comparison is case-sensitive against the lower-case hex digest and
    runs in constant time. Never pass a re-serialized body here: any change
    in key order, whitespace or number formatting changes the digest.
    """
    expected = compute_signature(payload, secret)
    return hmac.compare_digest(expected.encode(), signature.strip().encode())
