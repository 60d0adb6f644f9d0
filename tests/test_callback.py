"""
Tests for the follow-up callback: URL, body, and best-effort failure handling.
"""

import logging
from unittest.mock import MagicMock, patch

import httpx
import pytest

import yeetcode.main  # noqa: F401  (applies the application's logging setup)
from yeetcode.callback import DispatchError, callback_url, dispatch_callback, respond_to_command
from yeetcode.interaction import CallbackMessage, InteractionRequest

INTERACTION = InteractionRequest(id="123", application_id="456", type=2, token="tok-secret")


@patch("yeetcode.callback.config")
def test_callback_url(mock_config):
    """Interaction id and token are substituted into the callback URL template."""
    mock_config.DISCORD_API_BASE = "https://discord.com/api/v10"
    assert callback_url("123", "tok") == "https://discord.com/api/v10/interactions/123/tok/callback"


@patch("httpx.post")
def test_dispatch_posts_json_once(mock_post):
    """One POST with the channel-message body and a JSON content type."""
    mock_post.return_value.status_code = 204
    dispatch_callback("123", "tok-secret", CallbackMessage(content="hello"))
    mock_post.assert_called_once()
    call = mock_post.call_args
    assert call.args[0].endswith("/interactions/123/tok-secret/callback")
    assert call.kwargs["json"] == {"type": 4, "data": {"content": "hello"}}
    assert call.kwargs["headers"]["Content-Type"] == "application/json"


@patch("httpx.post")
def test_dispatch_non_success_status(mock_post):
    """A non-2xx answer raises DispatchError and is not retried."""
    mock_post.return_value.status_code = 404
    with pytest.raises(DispatchError):
        dispatch_callback("123", "tok-secret", CallbackMessage(content="hello"))
    assert mock_post.call_count == 1


@patch("httpx.post", side_effect=httpx.ConnectError("connect to .../tok-secret/callback failed"))
def test_dispatch_transport_error_hides_token(mock_post):
    """Transport errors raise DispatchError whose message leaves out the token."""
    with pytest.raises(DispatchError) as exc_info:
        dispatch_callback("123", "tok-secret", CallbackMessage(content="hello"))
    assert "tok-secret" not in str(exc_info.value)
    assert mock_post.call_count == 1


@patch.object(httpx.HTTPTransport, "handle_request", return_value=httpx.Response(204))
def test_successful_callback_does_not_log_token(_mock_transport, caplog):
    """Real httpx request path: no log record at INFO or above contains the token."""
    with caplog.at_level(logging.INFO):
        respond_to_command(INTERACTION, lambda _: "hello")
    assert "Posted callback for interaction=123" in caplog.text
    assert not [r for r in caplog.records if "tok-secret" in r.getMessage()]


@patch("yeetcode.callback.dispatch_callback")
def test_respond_to_command_uses_provider_content(mock_dispatch):
    """The content provider's text becomes the callback message."""
    respond_to_command(INTERACTION, lambda interaction: f"content for {interaction.id}")
    mock_dispatch.assert_called_once_with("123", "tok-secret", CallbackMessage(content="content for 123"))


@patch("yeetcode.callback.dispatch_callback", side_effect=DispatchError("callback rejected with status 500"))
def test_respond_to_command_logs_dispatch_failure(mock_dispatch, caplog):
    """Dispatch failures are logged without the token and not raised."""
    with caplog.at_level(logging.ERROR, logger="yeetcode.callback"):
        respond_to_command(INTERACTION, lambda _: "hello")
    assert mock_dispatch.call_count == 1
    assert "Failed to post callback" in caplog.text
    assert "tok-secret" not in caplog.text


@patch("yeetcode.callback.dispatch_callback")
def test_respond_to_command_provider_failure_skips_dispatch(mock_dispatch):
    """If the provider raises, nothing is posted."""
    provider = MagicMock(side_effect=RuntimeError("provider down"))
    respond_to_command(INTERACTION, provider)
    mock_dispatch.assert_not_called()


@patch("yeetcode.callback.dispatch_callback")
def test_respond_to_command_empty_content_skips_dispatch(mock_dispatch):
    """Empty content is never posted."""
    respond_to_command(INTERACTION, lambda _: "")
    mock_dispatch.assert_not_called()
