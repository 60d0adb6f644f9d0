"""
Discord Interactions endpoint: verify the Ed25519 signature, answer PING handshakes,
and acknowledge commands immediately while the follow-up message is posted in the background.
"""

import logging
import sys
from typing import Optional

from fastapi import BackgroundTasks, FastAPI, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from . import config
from .callback import ContentProvider, respond_to_command
from .interaction import DecodeError, decode_interaction
from .leetcode import question_content
from .verify import VerificationError, verify_interaction_request

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
# httpx logs each request URL at INFO, and callback URLs carry the interaction token
for _name in ("httpx", "httpcore"):
    logging.getLogger(_name).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

# Exact handshake body expected by Discord for a PING
_PONG_BODY = '{"type": 1}'


def _error(status_code: int, error_code: str, message: str) -> JSONResponse:
    return JSONResponse({"error_code": error_code, "message": message}, status_code=status_code)


async def _read_body(request: Request, limit: int) -> Optional[bytes]:
    """
    Read the raw body, giving up as soon as it exceeds limit bytes.
    Returns None when the body is too large (declared or actual).
    """
    declared = request.headers.get("content-length", "").strip()
    if declared.isdigit() and int(declared) > limit:
        return None
    chunks: list[bytes] = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if size > limit:
            return None
        chunks.append(chunk)
    return b"".join(chunks)


def create_app(
    public_key: Optional[bytes] = None,
    content_provider: Optional[ContentProvider] = None,
) -> FastAPI:
    """
    Build the application. The verification key is loaded once here (from
    DISCORD_PUBLIC_KEY unless given) and shared read-only by every request.
    """
    app = FastAPI(title="yeetcode")
    app.state.public_key = public_key if public_key is not None else config.load_public_key()
    app.state.content_provider = content_provider or question_content

    @app.post("/")
    async def interactions(request: Request, background_tasks: BackgroundTasks) -> Response:
        """
        Interactions endpoint. Verifies the signature over the raw body before
        anything is parsed, then branches on the interaction type.
        """
        # Raw wire bytes: the signature covers these exactly, not a re-serialized form
        body = await _read_body(request, config.REQUEST_BODY_MAX_BYTES)
        if body is None:
            logger.warning("Rejected request body over %d bytes", config.REQUEST_BODY_MAX_BYTES)
            return _error(413, "payload_too_large", "request body too large")

        try:
            verify_interaction_request(
                request.app.state.public_key,
                body,
                request.headers.get("x-signature-ed25519"),
                request.headers.get("x-signature-timestamp"),
            )
        except VerificationError as e:
            # Reason is for operators only; the client always sees the same 401
            logger.warning("Interaction verification failed (%s): %s", type(e).__name__, e)
            return _error(401, "verify_interaction", "failed to verify interaction")

        try:
            interaction = decode_interaction(body)
        except DecodeError as e:
            logger.warning("Invalid interaction payload: %s", e)
            return _error(400, "decode_interaction", "invalid interaction payload")

        if interaction.is_ping:
            logger.info("Acknowledging PING interaction=%s", interaction.id)
            return Response(content=_PONG_BODY, media_type="application/json")

        logger.info("Received interaction=%s type=%s", interaction.id, interaction.type)
        # Runs after the response is sent; its outcome never reaches this request
        background_tasks.add_task(respond_to_command, interaction, request.app.state.content_provider)
        return PlainTextResponse("OK", status_code=200)

    @app.get("/health")
    async def health() -> dict:
        """Health check for hosting platforms."""
        return {"status": "ok"}

    return app


def run() -> None:
    """Run the server. Exits non-zero when configuration is missing or invalid."""
    import uvicorn
    try:
        config.validate()
        host, port = config.bind_address()
        app = create_app()
    except config.ConfigError as e:
        logger.error("Configuration error: %s", e)
        sys.exit(1)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run()
