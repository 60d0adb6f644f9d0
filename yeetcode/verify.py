"""Verify that incoming HTTP requests are signed by Discord (Ed25519)."""

import binascii
import time
from typing import Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from . import config

SIGNATURE_LENGTH = 64


class VerificationError(Exception):
    """Request could not be authenticated. Every subclass maps to the same 401."""


class MissingHeader(VerificationError):
    pass


class MalformedSignature(VerificationError):
    pass


class InvalidKey(VerificationError):
    pass


class SignatureMismatch(VerificationError):
    pass


class StaleTimestamp(VerificationError):
    pass


def verify_signature(public_key: bytes, signature_hex: str, timestamp: bytes, body: bytes) -> None:
    """
    Check an Ed25519 signature over timestamp + body (raw bytes, no separator).
    Returns None on success, raises a VerificationError subclass otherwise.
    """
    try:
        signature = binascii.unhexlify(signature_hex)
    except (binascii.Error, ValueError):
        raise MalformedSignature("signature is not valid hex") from None
    if len(signature) != SIGNATURE_LENGTH:
        raise MalformedSignature(f"signature must be {SIGNATURE_LENGTH} bytes, got {len(signature)}")
    try:
        key = Ed25519PublicKey.from_public_bytes(public_key)
    except ValueError:
        raise InvalidKey("public key is not a valid Ed25519 key") from None
    try:
        key.verify(signature, timestamp + body)
    except InvalidSignature:
        raise SignatureMismatch("signature does not match") from None


def _check_timestamp_age(timestamp: str, max_age_seconds: int) -> None:
    try:
        ts = int(timestamp)
    except ValueError:
        raise StaleTimestamp("timestamp is not an integer") from None
    if abs(time.time() - ts) > max_age_seconds:
        raise StaleTimestamp("timestamp outside of allowed window")


def verify_interaction_request(
    public_key: bytes,
    body: bytes,
    signature: Optional[str],
    timestamp: Optional[str],
    max_age_seconds: Optional[int] = None,
) -> None:
    """
    Verify the request using X-Signature-Ed25519 and X-Signature-Timestamp.
    The timestamp header is signed as-is; only the optional replay window parses it.
    """
    if not signature or not timestamp:
        raise MissingHeader("signature or timestamp header missing")
    max_age = max_age_seconds if max_age_seconds is not None else config.SIGNATURE_MAX_AGE_SECONDS
    # Starlette decodes header values as latin-1, so this restores the wire bytes
    try:
        timestamp_bytes = timestamp.encode("latin-1")
    except UnicodeEncodeError:
        raise MalformedSignature("timestamp is not a latin-1 header value") from None
    verify_signature(public_key, signature, timestamp_bytes, body)
    if max_age > 0:
        _check_timestamp_age(timestamp, max_age)
