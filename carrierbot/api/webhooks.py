from __future__ import annotations

import json
import logging

from fastapi import APIRouter, BackgroundTasks, HTTPException, Query, Request, Response
from fastapi.responses import PlainTextResponse

from carrierbot.application.dto.webhook_event import WebhookEventDTO
from carrierbot.core.config import settings
from carrierbot.domain.entities.message import Message
from carrierbot.infrastructure.whatsapp.webhook_verify import is_signature_valid, verify_subscription
from carrierbot.wiring.dependencies import get_handle_incoming_message_use_case


router = APIRouter(prefix="/webhooks/whatsapp")
logger = logging.getLogger(__name__)


def _parse_messages(body: bytes) -> list[Message]:
    """Raises ValueError for a body that is not a WhatsApp notification."""
    payload = json.loads(body.decode("utf-8")) if body else {}
    return WebhookEventDTO.model_validate(payload).extract_messages()


@router.get("")
def verify_webhook(
    hub_mode: str | None = Query(None, alias="hub.mode"),
    hub_verify_token: str | None = Query(None, alias="hub.verify_token"),
    hub_challenge: str | None = Query(None, alias="hub.challenge"),
):
    challenge = verify_subscription(hub_mode, hub_verify_token, hub_challenge, settings.META_VERIFY_TOKEN)
    if challenge is None:
        logger.warning("Webhook subscription rejected", extra={"reason": hub_mode})
        raise HTTPException(status_code=403, detail="Verification failed")
    return PlainTextResponse(challenge)


@router.post("")
async def receive_notification(request: Request, background_tasks: BackgroundTasks) -> Response:
    """
    Acknowledge a WhatsApp notification and hand its text messages to the dialogue engine.

    Processing happens after the 200 is sent, so Meta never retries because of
    a slow model or calendar call.
    """
    body = await request.body()
    allow_unsigned = settings.ENV.lower() in {"dev", "local"}
    if not is_signature_valid(body, request.headers.get("X-Hub-Signature-256"), settings.META_APP_SECRET, allow_unsigned):
        return Response(status_code=403)

    try:
        messages = _parse_messages(body)
    except ValueError as e:
        logger.warning("Malformed webhook body", extra={"error": str(e)})
        return Response(status_code=400)

    if not messages:
        return Response(status_code=200)

    try:
        use_case = get_handle_incoming_message_use_case()
    except Exception as e:
        logger.exception("Dialogue engine unavailable", extra={"error": str(e)})
        return Response(status_code=500)

    for message in messages:
        logger.info("Inbound message queued", extra={"message_id": message.id, "conversation_id": message.conversation_id})
        background_tasks.add_task(use_case.handle, message)

    return Response(status_code=200)
