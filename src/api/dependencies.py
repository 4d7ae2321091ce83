"""FastAPI dependencies wiring the relay services into request handlers.

Tests override these through ``app.dependency_overrides`` to inject a
fresh registry or a recording sender.
"""

from fastapi import Depends, Request

from src.config import Settings, get_settings
from src.db.recipient_registry import InMemoryRecipientRegistry, RecipientStore
from src.services.event_ingestor import EventIngestor
from src.services.messaging_protocol import MessageSender, get_messaging_service
from src.services.notifier import Notifier


def get_recipient_registry(request: Request) -> RecipientStore:
    """Return the registry owned by the running application."""
    registry = getattr(request.app.state, "recipient_registry", None)
    if registry is None:
        registry = InMemoryRecipientRegistry()
        request.app.state.recipient_registry = registry
    return registry


def get_message_sender(settings: Settings = Depends(get_settings)) -> MessageSender:
    return get_messaging_service(settings)


def get_event_ingestor(
    registry: RecipientStore = Depends(get_recipient_registry),
    sender: MessageSender = Depends(get_message_sender),
    settings: Settings = Depends(get_settings),
) -> EventIngestor:
    return EventIngestor(
        registry=registry,
        sender=sender,
        auto_reply_text=settings.auto_reply_text,
        auto_reply_enabled=settings.auto_reply_enabled,
    )


def get_notifier(
    registry: RecipientStore = Depends(get_recipient_registry),
    sender: MessageSender = Depends(get_message_sender),
    settings: Settings = Depends(get_settings),
) -> Notifier:
    return Notifier(
        registry=registry,
        sender=sender,
        max_concurrency=settings.notify_max_concurrency,
    )
