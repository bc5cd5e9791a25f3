"""Document store access."""

from .base import Condition, DocumentStore, Subscription
from .memory import MemoryDocumentStore

__all__ = ["Condition", "DocumentStore", "MemoryDocumentStore", "Subscription"]
