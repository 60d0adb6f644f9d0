"""Shared fixtures: a real Ed25519 keypair and helpers that build requests the way Discord does."""

import json

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

TIMESTAMP = "1728695487"
INTERACTION_ID = "1294467436514381885"
INTERACTION_TOKEN = "aW50ZXJhY3Rpb246c2VjcmV0LXRva2Vu"


@pytest.fixture(scope="session")
def private_key():
    return Ed25519PrivateKey.generate()


@pytest.fixture(scope="session")
def public_key(private_key):
    return private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)


@pytest.fixture
def sign(private_key):
    """Return a function (body, timestamp) -> headers carrying a valid signature."""
    def _sign(body: bytes, timestamp: str = TIMESTAMP) -> dict:
        signature = private_key.sign(timestamp.encode() + body)
        return {
            "Content-Type": "application/json",
            "X-Signature-Ed25519": signature.hex(),
            "X-Signature-Timestamp": timestamp,
        }
    return _sign


@pytest.fixture
def make_body():
    """Return a function (type, **extra) -> raw JSON body of an interaction."""
    def _make(type_: int = 1, **extra) -> bytes:
        payload = {
            "app_permissions": "562949953601536",
            "application_id": "1293749125078188085",
            "entitlements": [],
            "id": INTERACTION_ID,
            "token": INTERACTION_TOKEN,
            "type": type_,
            "version": 1,
        }
        payload.update(extra)
        return json.dumps(payload).encode()
    return _make
