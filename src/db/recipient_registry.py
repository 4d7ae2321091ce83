"""Recipient registry: the set of PSIDs captured from inbound webhooks.

The registry lives for the lifetime of the process only. It is owned by
the FastAPI application (``app.state``) and handed to request handlers
through a dependency, so a persistent implementation of
``RecipientStore`` can replace it without touching handler code.
"""

from threading import Lock
from typing import Protocol, runtime_checkable

import logfire


@runtime_checkable
class RecipientStore(Protocol):
    """Protocol for storing recipient identifiers.

    There is intentionally no removal operation: unsubscribe / opt-out
    handling is not supported yet.
    """

    def add(self, identifier: str) -> bool:
        """Insert identifier if absent. Returns True if it was new."""
        ...

    def all(self) -> list[str]:
        """Snapshot of all known identifiers."""
        ...

    def size(self) -> int:
        """Current number of identifiers."""
        ...


class InMemoryRecipientRegistry:
    """Thread-safe in-memory recipient registry.

    Backed by a dict so insertion order is preserved, which keeps
    ``all()`` and the /notify fan-out order predictable.
    """

    def __init__(self, initial: list[str] | None = None):
        self._recipients: dict[str, None] = {}
        self._lock = Lock()
        for identifier in initial or []:
            self.add(identifier)

    def add(self, identifier: str) -> bool:
        """
        Register a recipient identifier.

        Args:
            identifier: Messenger PSID

        Returns:
            True if the identifier was not known before, False otherwise.
            An empty identifier is never stored and returns False.
        """
        if not identifier:
            return False

        with self._lock:
            if identifier in self._recipients:
                return False
            self._recipients[identifier] = None
            size = len(self._recipients)

        logfire.info(
            "Recipient registered",
            recipient_id=identifier,
            recipient_count=size,
        )
        return True

    def all(self) -> list[str]:
        with self._lock:
            return list(self._recipients)

    def size(self) -> int:
        with self._lock:
            return len(self._recipients)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, identifier: object) -> bool:
        with self._lock:
            return identifier in self._recipients
