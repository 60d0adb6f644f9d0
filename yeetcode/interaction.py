"""Decode the parts of a Discord interaction payload needed for routing, and build callback messages."""

import json
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Mapping

# Interaction response type for "respond with a channel message"
CHANNEL_MESSAGE_WITH_SOURCE = 4


class InteractionType(IntEnum):
    PING = 1
    APPLICATION_COMMAND = 2
    MESSAGE_COMPONENT = 3
    APPLICATION_COMMAND_AUTOCOMPLETE = 4
    MODAL_SUBMIT = 5


class DecodeError(Exception):
    """Payload is not JSON or lacks a required field of the right type."""


@dataclass(frozen=True)
class InteractionRequest:
    id: str
    application_id: str
    type: int
    # Addresses the follow-up callback; kept out of repr so it never lands in logs
    token: str = field(repr=False)
    options: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_ping(self) -> bool:
        return self.type == InteractionType.PING


@dataclass(frozen=True)
class CallbackMessage:
    content: str
    type: int = CHANNEL_MESSAGE_WITH_SOURCE

    def to_dict(self) -> dict:
        return {"type": self.type, "data": {"content": self.content}}


def _require(payload: dict, name: str, kind: type) -> Any:
    if name not in payload:
        raise DecodeError(f"missing field {name!r}")
    value = payload[name]
    # bool is an int subclass; reject it for the integer type field
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise DecodeError(f"field {name!r} must be {kind.__name__}, got {type(value).__name__}")
    return value


def _extract_options(payload: dict) -> dict[str, Any]:
    """Collect data.options as {name: value}. Anything unexpected yields no options."""
    data = payload.get("data")
    if not isinstance(data, dict):
        return {}
    raw_options = data.get("options")
    if not isinstance(raw_options, list):
        return {}
    options: dict[str, Any] = {}
    for opt in raw_options:
        if isinstance(opt, dict) and isinstance(opt.get("name"), str):
            options[opt["name"]] = opt.get("value")
    return options


def decode_interaction(body: bytes) -> InteractionRequest:
    """
    Parse an already-verified request body. Unknown fields are ignored.
    Raises DecodeError on malformed JSON or a missing/mistyped required field.
    """
    try:
        payload = json.loads(body)
    except (UnicodeDecodeError, ValueError) as e:
        raise DecodeError(f"invalid JSON: {e}") from None
    if not isinstance(payload, dict):
        raise DecodeError("payload must be a JSON object")
    return InteractionRequest(
        id=_require(payload, "id", str),
        application_id=_require(payload, "application_id", str),
        type=_require(payload, "type", int),
        token=_require(payload, "token", str),
        options=_extract_options(payload),
    )
