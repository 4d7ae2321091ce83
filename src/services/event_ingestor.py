"""Webhook event ingestion.

Turns a Messenger event envelope into registry writes and (optionally)
an acknowledgment reply to every sender. Each messaging event is
processed in isolation: a failure while handling one event is logged
and the remaining events are still processed, because the platform
redelivers the whole envelope on a non-2xx answer.
"""

import logging
from dataclasses import dataclass, field

import logfire

from src.constants import DEFAULT_AUTO_REPLY_TEXT, WEBHOOK_OBJECT_PAGE
from src.db.recipient_registry import RecipientStore
from src.exceptions import UnsupportedWebhookObjectError
from src.models.messenger import MessengerWebhookPayload
from src.services.messaging_protocol import MessageSender

logger = logging.getLogger(__name__)


@dataclass
class IngestResult:
    """Summary of one processed envelope."""

    events_seen: int = 0
    senders_captured: list[str] = field(default_factory=list)
    new_recipients: int = 0
    replies_sent: int = 0
    failed_events: int = 0


class EventIngestor:
    """Register senders from webhook envelopes and send the auto-reply.

    Example:
        >>> ingestor = EventIngestor(registry, sender)
        >>> result = await ingestor.ingest(MessengerWebhookPayload.from_payload(body))
        >>> result.new_recipients
        1
    """

    def __init__(
        self,
        registry: RecipientStore,
        sender: MessageSender,
        auto_reply_text: str = DEFAULT_AUTO_REPLY_TEXT,
        auto_reply_enabled: bool = True,
    ):
        self._registry = registry
        self._sender = sender
        self._auto_reply_text = auto_reply_text
        self._auto_reply_enabled = auto_reply_enabled

    async def ingest(self, payload: MessengerWebhookPayload) -> IngestResult:
        """
        Process every messaging event of an envelope in received order.

        Args:
            payload: Parsed webhook envelope

        Returns:
            IngestResult with counters for the envelope

        Raises:
            UnsupportedWebhookObjectError: If the envelope is not a page
                subscription. Nothing is registered or sent in that case.
        """
        if payload.object != WEBHOOK_OBJECT_PAGE:
            logfire.warning(
                "Ignoring webhook for unsupported object",
                object_type=payload.object,
            )
            raise UnsupportedWebhookObjectError(payload.object)

        result = IngestResult()

        for position, event in enumerate(payload.iter_events()):
            result.events_seen += 1
            sender_id = event.sender_id
            if not sender_id:
                continue

            try:
                if self._registry.add(sender_id):
                    result.new_recipients += 1
                result.senders_captured.append(sender_id)
                logger.info("Captured PSID: %s", sender_id)

                if self._auto_reply_enabled:
                    # The inbound event opens the 24h window: never tagged
                    await self._sender.send_text(sender_id, self._auto_reply_text)
                    result.replies_sent += 1
            except Exception as e:
                result.failed_events += 1
                logger.error(
                    "Error processing messaging event %d from %s: %s",
                    position,
                    sender_id,
                    e,
                    exc_info=True,
                )

        logfire.info(
            "Webhook envelope processed",
            events_seen=result.events_seen,
            senders_captured=len(result.senders_captured),
            new_recipients=result.new_recipients,
            replies_sent=result.replies_sent,
            failed_events=result.failed_events,
        )
        return result
