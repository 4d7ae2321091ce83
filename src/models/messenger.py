"""Incoming Facebook Messenger webhook models.

The platform payload is deeply nested and loosely specified, so every
model here is built through a ``from_payload`` classmethod that treats
missing or malformed fields as absent instead of raising.
"""

from typing import Any

from pydantic import BaseModel, Field


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _as_str(value: Any) -> str | None:
    """Identifiers arrive as strings; numeric ids are normalised to str."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (str, int)):
        text = str(value)
        return text or None
    return None


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    return value if isinstance(value, int) else None


class MessengerParticipant(BaseModel):
    """Sender or recipient of a messaging event."""

    id: str

    @classmethod
    def from_payload(cls, payload: Any) -> "MessengerParticipant | None":
        participant_id = _as_str(_as_dict(payload).get("id"))
        if participant_id is None:
            return None
        return cls(id=participant_id)


class MessengerMessage(BaseModel):
    """Message body of a messaging event (text only is consumed)."""

    mid: str | None = None
    text: str | None = None
    is_echo: bool = False

    @classmethod
    def from_payload(cls, payload: Any) -> "MessengerMessage | None":
        if not isinstance(payload, dict):
            return None
        text = payload.get("text")
        return cls(
            mid=_as_str(payload.get("mid")),
            text=text if isinstance(text, str) else None,
            is_echo=payload.get("is_echo") is True,
        )


class MessagingEvent(BaseModel):
    """One entry of ``entry[].messaging[]``."""

    sender: MessengerParticipant | None = None
    recipient: MessengerParticipant | None = None
    timestamp: int | None = None
    message: MessengerMessage | None = None

    @property
    def sender_id(self) -> str | None:
        return self.sender.id if self.sender else None

    @classmethod
    def from_payload(cls, payload: Any) -> "MessagingEvent":
        data = _as_dict(payload)
        return cls(
            sender=MessengerParticipant.from_payload(data.get("sender")),
            recipient=MessengerParticipant.from_payload(data.get("recipient")),
            timestamp=_as_int(data.get("timestamp")),
            message=MessengerMessage.from_payload(data.get("message")),
        )


class MessengerEntry(BaseModel):
    """Facebook webhook entry."""

    id: str | None = None
    time: int | None = None
    messaging: list[MessagingEvent] = Field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "MessengerEntry":
        data = _as_dict(payload)
        return cls(
            id=_as_str(data.get("id")),
            time=_as_int(data.get("time")),
            messaging=[
                MessagingEvent.from_payload(event)
                for event in _as_list(data.get("messaging"))
            ],
        )


class MessengerWebhookPayload(BaseModel):
    """Facebook webhook payload (event envelope)."""

    object: str | None = None
    entry: list[MessengerEntry] = Field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "MessengerWebhookPayload":
        """Build an envelope from arbitrary decoded JSON.

        Anything that is not a JSON object yields an envelope with no
        ``object`` discriminator, which callers reject as non-page.
        """
        data = _as_dict(payload)
        object_type = data.get("object")
        return cls(
            object=object_type if isinstance(object_type, str) else None,
            entry=[MessengerEntry.from_payload(e) for e in _as_list(data.get("entry"))],
        )

    def iter_events(self):
        """Yield messaging events in received order across all entries."""
        for entry in self.entry:
            yield from entry.messaging
