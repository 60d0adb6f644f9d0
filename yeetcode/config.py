"""Load configuration from environment. Do not commit .env (use .env.example as template)."""

import binascii
import ipaddress
import logging
import os
from pathlib import Path

import dotenv
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey


class ConfigError(Exception):
    """Startup configuration is missing or malformed; the server must not start."""


# Bad values found while reading the environment; reported by validate()
_problems: list[str] = []


def _load_dotenv() -> None:
    """Load .env from project root (cwd) or package directory."""
    for base in (Path.cwd(), Path(__file__).resolve().parent):
        env_file = base / ".env"
        if env_file.is_file():
            dotenv.load_dotenv(env_file)
            break


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        _problems.append(f"{name} must be an integer, got {raw!r}")
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        _problems.append(f"{name} must be a number, got {raw!r}")
        return default


def _log_level_env(name: str, default: str) -> str:
    raw = os.environ.get(name, "").strip().upper()
    if not raw:
        return default
    if not isinstance(logging.getLevelName(raw), int):
        _problems.append(f"{name} must be a logging level name, got {raw!r}")
        return default
    return raw


_load_dotenv()


# Required: hex-encoded Ed25519 public key of the Discord application (32 bytes)
DISCORD_PUBLIC_KEY: str = os.environ.get("DISCORD_PUBLIC_KEY", "")

# Callback URL is {DISCORD_API_BASE}/interactions/{id}/{token}/callback
DISCORD_API_BASE: str = os.environ.get("DISCORD_API_BASE", "https://discord.com/api/v10").strip().rstrip("/")
CALLBACK_TIMEOUT_SECONDS: float = _float_env("CALLBACK_TIMEOUT_SECONDS", 10.0)

# Interaction payloads are small; anything bigger is refused before verification
REQUEST_BODY_MAX_BYTES: int = _int_env("REQUEST_BODY_MAX_BYTES", 8192)

# Replay window for X-Signature-Timestamp (seconds). 0 disables the check.
SIGNATURE_MAX_AGE_SECONDS: int = _int_env("SIGNATURE_MAX_AGE_SECONDS", 0)

# Source of the random question posted back for commands
LEETCODE_GRAPHQL_URL: str = os.environ.get("LEETCODE_GRAPHQL_URL", "https://leetcode.com/graphql").strip()
LEETCODE_TIMEOUT_SECONDS: float = _float_env("LEETCODE_TIMEOUT_SECONDS", 15.0)

HOST: str = os.environ.get("HOST", "0.0.0.0").strip() or "0.0.0.0"
PORT: int = _int_env("PORT", 3000)
LOG_LEVEL: str = _log_level_env("LOG_LEVEL", "INFO")


def load_public_key(value: str | None = None) -> bytes:
    """
    Decode the verification key from DISCORD_PUBLIC_KEY (or the given hex string).
    Returns the raw 32 key bytes; raises ConfigError if absent or not a usable Ed25519 key.
    """
    raw = (DISCORD_PUBLIC_KEY if value is None else value).strip()
    if not raw:
        raise ConfigError("DISCORD_PUBLIC_KEY is required")
    try:
        key = binascii.unhexlify(raw)
    except (binascii.Error, ValueError) as e:
        raise ConfigError(f"DISCORD_PUBLIC_KEY is not valid hex: {e}") from None
    if len(key) != 32:
        raise ConfigError(f"DISCORD_PUBLIC_KEY must be 32 bytes, got {len(key)}")
    try:
        Ed25519PublicKey.from_public_bytes(key)
    except ValueError as e:
        raise ConfigError(f"DISCORD_PUBLIC_KEY is not an Ed25519 public key: {e}") from None
    return key


def bind_address() -> tuple[str, int]:
    """Validated (host, port) for the HTTP server."""
    try:
        ipaddress.ip_address(HOST)
    except ValueError:
        if HOST != "localhost":
            raise ConfigError(f"HOST must be an IP address or 'localhost', got {HOST!r}") from None
    if not 0 < PORT < 65536:
        raise ConfigError(f"PORT must be between 1 and 65535, got {PORT}")
    return HOST, PORT


def validate() -> None:
    """Raise ConfigError listing every malformed setting read from the environment."""
    if _problems:
        raise ConfigError("; ".join(_problems))
