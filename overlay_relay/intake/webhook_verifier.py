"""HMAC-SHA256 verification of provider webhook bodies."""

import hashlib
import hmac
from typing import Optional

_SIGNATURE_PREFIX = "sha256="


def compute_signature(raw_body: bytes, shared_secret: str) -> str:
    """
    Compute the hex HMAC-SHA256 of a raw request body.

    Args:
        raw_body: Exact bytes received on the wire
        shared_secret: Webhook secret shared with the provider

    Returns:
        Lowercase hex digest
    """
    return hmac.new(shared_secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()


def verify_signature(
    raw_body: bytes,
    provided_signature: Optional[str],
    shared_secret: Optional[str],
) -> bool:
    """
    Check that a webhook body was signed with the shared secret.

    The digest is computed over the unparsed body; re-serializing a parsed
    JSON document changes the bytes and breaks the signature.

    Args:
        raw_body: Exact bytes received on the wire
        provided_signature: Hex signature sent by the provider
        shared_secret: Webhook secret; verification fails when unset

    Returns:
        True only if the signature matches
    """
    if not shared_secret or not provided_signature:
        return False

    signature = provided_signature.strip()
    if signature.startswith(_SIGNATURE_PREFIX):
        signature = signature[len(_SIGNATURE_PREFIX):]

    try:
        signature_bytes = signature.encode("ascii")
    except UnicodeEncodeError:
        return False

    expected = compute_signature(raw_body, shared_secret).encode("ascii")
    return hmac.compare_digest(expected, signature_bytes)
