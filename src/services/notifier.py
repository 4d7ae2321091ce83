"""Alert fan-out for the /notify endpoint.

Resolves the target recipients (one explicit PSID, or every registered
one) and sends the alert text to each of them through a MessageSender.
Sends run one after another by default; a concurrency limit above 1
dispatches them in parallel behind a semaphore, still reporting results
in target order.
"""

import asyncio
import time
from dataclasses import dataclass

import logfire

from src.constants import DEFAULT_NOTIFY_MAX_CONCURRENCY
from src.db.recipient_registry import RecipientStore
from src.exceptions import NoRecipientsError, TextRequiredError
from src.models.notify_models import NotifyResult
from src.services.messaging_protocol import MessageSender


@dataclass
class NotifyOutcome:
    """Per-recipient results of one fan-out."""

    results: list[NotifyResult]

    @property
    def sent(self) -> int:
        return len(self.results)


class Notifier:
    """Send an alert to one or all recipients.

    Example:
        >>> notifier = Notifier(registry, sender)
        >>> outcome = await notifier.notify("CO2 at 800 ppm")
        >>> outcome.sent
        3
    """

    def __init__(
        self,
        registry: RecipientStore,
        sender: MessageSender,
        max_concurrency: int = DEFAULT_NOTIFY_MAX_CONCURRENCY,
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self._registry = registry
        self._sender = sender
        self._max_concurrency = max_concurrency

    def resolve_recipients(self, psid: str | None = None) -> list[str]:
        """Explicit PSID wins and is not checked against the registry."""
        if psid:
            return [psid]
        return self._registry.all()

    async def notify(
        self,
        text: str | None,
        psid: str | None = None,
        tag: str | None = None,
    ) -> NotifyOutcome:
        """
        Fan an alert out to the resolved recipients.

        Args:
            text: Alert text (required)
            psid: Single explicit recipient, bypassing the registry
            tag: Message tag for sends outside the 24h window

        Returns:
            NotifyOutcome with one result per recipient, in target order

        Raises:
            TextRequiredError: If text is missing or empty
            NoRecipientsError: If no recipient could be resolved
        """
        if not text:
            raise TextRequiredError()

        recipients = self.resolve_recipients(psid)
        if not recipients:
            raise NoRecipientsError()

        start_time = time.time()
        logfire.info(
            "Notify fan-out started",
            recipient_count=len(recipients),
            explicit_recipient=bool(psid),
            tagged=bool(tag),
            max_concurrency=self._max_concurrency,
        )

        if self._max_concurrency == 1:
            results = []
            for recipient in recipients:
                results.append(await self._send_one(recipient, text, tag))
        else:
            results = await self._send_bounded(recipients, text, tag)

        logfire.info(
            "Notify fan-out completed",
            sent=len(results),
            total_time_ms=(time.time() - start_time) * 1000,
        )
        return NotifyOutcome(results=results)

    async def _send_one(
        self, recipient: str, text: str, tag: str | None
    ) -> NotifyResult:
        response = await self._sender.send_text(recipient, text, tag)
        return NotifyResult(psid=recipient, result=response)

    async def _send_bounded(
        self, recipients: list[str], text: str, tag: str | None
    ) -> list[NotifyResult]:
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _guarded(recipient: str) -> NotifyResult:
            async with semaphore:
                return await self._send_one(recipient, text, tag)

        tasks = [asyncio.create_task(_guarded(r)) for r in recipients]
        try:
            # gather preserves argument order regardless of completion order
            return list(await asyncio.gather(*tasks))
        except BaseException:
            # First failure aborts the fan-out; no send may outlive the request
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
