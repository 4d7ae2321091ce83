"""Messaging abstraction protocols for decoupling from Facebook API.

This module provides a Protocol-based abstraction for outbound messaging,
allowing the application to:
- Mock messaging in tests without complex httpx mocking
- Support dependency injection for the ingestor and notifier
"""

from typing import Any, Protocol

from src.config import Settings
from src.constants import FACEBOOK_API_TIMEOUT_SECONDS
from src.exceptions import SenderNotConfiguredError
from src.services import facebook_service


class MessageSender(Protocol):
    """Protocol for sending a text message to one recipient."""

    async def send_text(
        self,
        recipient_id: str,
        text: str,
        tag: str | None = None,
    ) -> dict[str, Any]:
        """Send text to recipient.

        Args:
            recipient_id: Platform-specific user identifier
            text: Message text to send
            tag: Message tag (tagged addressing) or None (response addressing)

        Returns:
            Raw platform response body
        """
        ...


class FacebookMessageSender:
    """Facebook Messenger implementation of MessageSender.

    Example:
        >>> sender = FacebookMessageSender(page_access_token="...")
        >>> await sender.send_text("psid-123", "CO2 at 800 ppm")
        {'recipient_id': 'psid-123', 'message_id': 'm_...'}
    """

    def __init__(
        self,
        page_access_token: str | None,
        timeout_seconds: float = FACEBOOK_API_TIMEOUT_SECONDS,
    ):
        """Initialize with Facebook Page access token.

        A missing token is accepted here so the app can still serve
        /status and the verification handshake; sends fail instead.
        """
        self._token = page_access_token
        self._timeout = timeout_seconds

    @property
    def is_configured(self) -> bool:
        return bool(self._token)

    async def send_text(
        self,
        recipient_id: str,
        text: str,
        tag: str | None = None,
    ) -> dict[str, Any]:
        if not self._token:
            raise SenderNotConfiguredError("PAGE_ACCESS_TOKEN is not configured")

        return await facebook_service.send_text(
            page_access_token=self._token,
            recipient_id=recipient_id,
            text=text,
            tag=tag,
            timeout_seconds=self._timeout,
        )


class RecordingMessageSender:
    """In-memory sender for tests and dry runs.

    Example:
        >>> sender = RecordingMessageSender()
        >>> await sender.send_text("user123", "Test message")
        {'recipient_id': 'user123', 'message_id': 'mid.1'}
        >>> sender.sent_messages
        [('user123', 'Test message', None)]
    """

    def __init__(
        self,
        response: dict[str, Any] | None = None,
        fail_for: set[str] | None = None,
    ):
        """Initialize recording sender.

        Args:
            response: Body to return for every send (a fake message id otherwise)
            fail_for: Recipient ids whose send raises RuntimeError
        """
        self._response = response
        self._fail_for = fail_for or set()
        self.sent_messages: list[tuple[str, str, str | None]] = []

    async def send_text(
        self,
        recipient_id: str,
        text: str,
        tag: str | None = None,
    ) -> dict[str, Any]:
        self.sent_messages.append((recipient_id, text, tag))
        if recipient_id in self._fail_for:
            raise RuntimeError(f"simulated send failure for {recipient_id}")
        if self._response is not None:
            return dict(self._response)
        return {
            "recipient_id": recipient_id,
            "message_id": f"mid.{len(self.sent_messages)}",
        }


def get_messaging_service(settings: Settings) -> FacebookMessageSender:
    """Factory function to get a MessageSender implementation.

    Args:
        settings: Application settings (token and timeout)

    Returns:
        MessageSender implementation (currently Facebook)
    """
    return FacebookMessageSender(
        page_access_token=settings.page_access_token,
        timeout_seconds=settings.facebook_api_timeout_seconds,
    )
