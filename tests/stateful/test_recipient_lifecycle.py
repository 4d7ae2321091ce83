"""Stateful tests for the recipient lifecycle: capture via webhook, then notify."""

import pytest
from hypothesis import given, settings, strategies as st

from src.db.recipient_registry import InMemoryRecipientRegistry
from src.exceptions import NoRecipientsError, UnsupportedWebhookObjectError
from src.models.messenger import MessengerWebhookPayload
from src.services.event_ingestor import EventIngestor
from src.services.messaging_protocol import RecordingMessageSender
from src.services.notifier import Notifier

psids = st.text(alphabet="0123456789", min_size=1, max_size=6)


def envelope_for(sender_ids):
    events = [{"sender": {"id": psid}, "message": {"text": "hi"}} for psid in sender_ids]
    return MessengerWebhookPayload.from_payload(
        {"object": "page", "entry": [{"id": "page-123", "messaging": events}]}
    )


def build_relay():
    registry = InMemoryRecipientRegistry()
    sender = RecordingMessageSender()
    ingestor = EventIngestor(
        registry=registry,
        sender=sender,
        auto_reply_text="ack",
        auto_reply_enabled=True,
    )
    notifier = Notifier(registry=registry, sender=sender)
    return registry, sender, ingestor, notifier


class TestRecipientLifecycle:
    """Test registry state across webhook and notify operations."""

    @pytest.mark.asyncio
    async def test_capture_then_broadcast(self, mock_logfire, make_envelope):
        """Basic lifecycle: empty, capture two senders, broadcast."""
        registry, sender, ingestor, notifier = build_relay()

        # Nobody has messaged the Page yet
        with pytest.raises(NoRecipientsError):
            await notifier.notify("alert")
        assert sender.sent_messages == []

        await ingestor.ingest(MessengerWebhookPayload.from_payload(make_envelope("A")))
        await ingestor.ingest(
            MessengerWebhookPayload.from_payload(make_envelope("B", "A"))
        )
        assert registry.all() == ["A", "B"]

        sender.sent_messages.clear()
        outcome = await notifier.notify("alert")

        assert outcome.sent == 2
        assert sender.sent_messages == [("A", "alert", None), ("B", "alert", None)]
        # Notifying never changes the registry
        assert registry.all() == ["A", "B"]

    @pytest.mark.asyncio
    async def test_rejected_envelope_keeps_state(self, mock_logfire, make_envelope):
        registry, sender, ingestor, _ = build_relay()
        await ingestor.ingest(MessengerWebhookPayload.from_payload(make_envelope("A")))
        before = (registry.all(), list(sender.sent_messages))

        with pytest.raises(UnsupportedWebhookObjectError):
            await ingestor.ingest(
                MessengerWebhookPayload.from_payload(
                    make_envelope("B", object_type="user")
                )
            )

        assert (registry.all(), sender.sent_messages) == before

    @pytest.mark.asyncio
    @settings(max_examples=50, deadline=None)
    @given(batches=st.lists(st.lists(psids, max_size=5), max_size=8))
    async def test_registry_is_union_of_senders(self, batches):
        """After any sequence of envelopes the registry holds each sender once,
        in first-seen order, and a broadcast reaches exactly those senders."""
        registry, sender, ingestor, notifier = build_relay()
        expected: list[str] = []

        for batch in batches:
            await ingestor.ingest(envelope_for(batch))
            for psid in batch:
                if psid not in expected:
                    expected.append(psid)

            assert registry.all() == expected
            assert registry.size() == len(set(expected))

        if not expected:
            return

        sender.sent_messages.clear()
        outcome = await notifier.notify("alert")

        assert [result.psid for result in outcome.results] == expected
        assert [message[0] for message in sender.sent_messages] == expected
