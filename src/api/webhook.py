"""Facebook webhook endpoints.

GET handles the subscription handshake, POST receives event envelopes.
Envelope processing (registry writes, auto-reply) is delegated to the
EventIngestor; this module only deals with HTTP concerns.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import PlainTextResponse

from src.api.dependencies import get_event_ingestor
from src.config import Settings, get_settings
from src.constants import WEBHOOK_EVENT_RECEIVED
from src.exceptions import UnsupportedWebhookObjectError
from src.models.messenger import MessengerWebhookPayload
from src.services.event_ingestor import EventIngestor
from src.services.webhook_verifier import verify_subscription

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def verify_webhook(
    request: Request,
    settings: Settings = Depends(get_settings),
):
    """Facebook webhook verification endpoint."""
    challenge = verify_subscription(
        mode=request.query_params.get("hub.mode"),
        token=request.query_params.get("hub.verify_token"),
        challenge=request.query_params.get("hub.challenge"),
        expected_token=settings.verify_token,
    )

    if challenge is not None:
        logger.info("Webhook verified successfully")
        return PlainTextResponse(challenge)

    logger.warning("Webhook verification failed")
    return Response(status_code=403)


@router.post("")
async def handle_webhook(
    request: Request,
    ingestor: EventIngestor = Depends(get_event_ingestor),
):
    """Handle incoming Facebook Messenger webhook events."""
    try:
        body = await request.json()
    except ValueError:
        logger.warning("Webhook body is not valid JSON")
        body = None

    payload = MessengerWebhookPayload.from_payload(body)

    try:
        await ingestor.ingest(payload)
    except UnsupportedWebhookObjectError:
        return Response(status_code=404)
    except Exception as e:
        logger.error("Error processing webhook: %s", e, exc_info=True)
        return Response(status_code=500)

    return PlainTextResponse(WEBHOOK_EVENT_RECEIVED)
