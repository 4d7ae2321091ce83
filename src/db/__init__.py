"""Recipient storage layer."""

from src.db.recipient_registry import InMemoryRecipientRegistry, RecipientStore

__all__ = [
    "InMemoryRecipientRegistry",
    "RecipientStore",
]
