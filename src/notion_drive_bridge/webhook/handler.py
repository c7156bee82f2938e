"""Webhook endpoint for receiving Notion events."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from notion_drive_bridge.errors import MalformedRequest, SignatureError
from notion_drive_bridge.webhook.models import VerificationChallenge, parse_payload
from notion_drive_bridge.webhook.signature import verify_signature

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/webhook/notion", response_class=PlainTextResponse)
async def handle_webhook(request: Request) -> PlainTextResponse:
    """Handle incoming Notion webhook events.

    Status mapping:
    - 200 challenge text for a verification handshake (no signature needed)
    - 400 for unparseable bodies and missing/invalid signatures
    - 500 if any event in the batch fails; nothing after it is processed
    - 200 "OK" once every event has been handled
    """
    settings = request.app.state.settings
    dispatcher = request.app.state.dispatcher
    body = await request.body()

    try:
        payload = parse_payload(body)
    except MalformedRequest as exc:
        logger.warning("Rejected webhook body: %s", exc)
        return PlainTextResponse(str(exc), status_code=400)

    if isinstance(payload, VerificationChallenge):
        logger.info("Received webhook verification challenge")
        return PlainTextResponse(payload.challenge)

    try:
        verify_signature(
            body,
            request.headers.get(settings.signature_header),
            settings.notion_webhook_secret,
        )
    except SignatureError as exc:
        logger.warning("Signature verification failed: %s", exc)
        return PlainTextResponse("Invalid signature", status_code=400)

    try:
        await dispatcher.dispatch(payload.events)
    except Exception:
        logger.exception("Error processing %d webhook events", len(payload.events))
        return PlainTextResponse("Error processing events", status_code=500)

    return PlainTextResponse("OK")
