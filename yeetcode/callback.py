"""Post the follow-up message for a command interaction (at most once, never retried)."""

import logging
from typing import Callable

import httpx

from . import config
from .interaction import CallbackMessage, InteractionRequest

logger = logging.getLogger(__name__)

ContentProvider = Callable[[InteractionRequest], str]


class DispatchError(Exception):
    """The callback POST failed in transport or was answered with a non-2xx status."""


def callback_url(interaction_id: str, token: str) -> str:
    return f"{config.DISCORD_API_BASE}/interactions/{interaction_id}/{token}/callback"


def dispatch_callback(interaction_id: str, token: str, message: CallbackMessage) -> None:
    """
    Send one POST with the JSON-encoded message to the interaction's callback URL.
    Raises DispatchError on failure. Error messages never include the token.
    """
    try:
        r = httpx.post(
            callback_url(interaction_id, token),
            headers={"Content-Type": "application/json"},
            json=message.to_dict(),
            timeout=config.CALLBACK_TIMEOUT_SECONDS,
        )
    except httpx.HTTPError as e:
        raise DispatchError(f"callback transport error: {type(e).__name__}") from e
    if not 200 <= r.status_code < 300:
        raise DispatchError(f"callback rejected with status {r.status_code}")


def respond_to_command(interaction: InteractionRequest, content_provider: ContentProvider) -> None:
    """
    Background half of a command: build the content, then deliver it.
    Failures are logged only; the webhook response has already been sent.
    """
    try:
        content = content_provider(interaction)
    except Exception as e:
        logger.exception("Content provider failed for interaction=%s: %s", interaction.id, e)
        return
    if not content:
        logger.error("Content provider returned nothing for interaction=%s; no callback sent", interaction.id)
        return
    message = CallbackMessage(content=content)
    try:
        dispatch_callback(interaction.id, interaction.token, message)
    except DispatchError as e:
        logger.error("Failed to post callback for interaction=%s: %s", interaction.id, e)
        return
    logger.info("Posted callback for interaction=%s", interaction.id)
