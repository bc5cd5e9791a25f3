"""Document store contract shared by every backend.

A store is organised into named collections of documents. Documents are
plain dicts; reads return them with their opaque string ``id`` merged in.
Writes stamp ``createdAt``/``updatedAt`` with the store's clock.
"""

from __future__ import annotations

import abc
import operator
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from ..core.errors import DocumentStoreError

Document = Dict[str, Any]
SnapshotCallback = Callable[[List[Document]], Union[None, Awaitable[None]]]

CREATED_AT = "createdAt"
UPDATED_AT = "updatedAt"


@dataclass(frozen=True)
class Condition:
    """A ``(field, operator, value)`` filter triple.

    Example:
        >>> Condition("assignedToId", "==", "i1")
    """

    field: str
    operator: str
    value: Any


def _array_contains(actual: Any, expected: Any) -> bool:
    return isinstance(actual, (list, tuple)) and expected in actual


def _array_contains_any(actual: Any, expected: Iterable[Any]) -> bool:
    return isinstance(actual, (list, tuple)) and any(v in actual for v in expected)


OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "in": lambda actual, expected: actual in expected,
    "not-in": lambda actual, expected: actual not in expected,
    "array-contains": _array_contains,
    "array-contains-any": _array_contains_any,
}


def check_conditions(conditions: Sequence[Condition]) -> None:
    for cond in conditions:
        if cond.operator not in OPERATORS:
            raise DocumentStoreError(f"Unsupported query operator: {cond.operator}")


class Subscription:
    """Handle returned by :meth:`DocumentStore.subscribe`."""

    def __init__(self, cancel: Callable[[], None]) -> None:
        self._cancel = cancel
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._cancel()


class DocumentStore(abc.ABC):
    """Generic CRUD, query and listener operations keyed by collection name."""

    @abc.abstractmethod
    async def add(self, collection: str, data: Mapping[str, Any]) -> str:
        """Create a document under a generated id and return the id."""

    @abc.abstractmethod
    async def set(
        self, collection: str, doc_id: str, data: Mapping[str, Any], merge: bool = False
    ) -> str:
        """Create or overwrite the document ``doc_id``."""

    @abc.abstractmethod
    async def get(self, collection: str, doc_id: str) -> Document:
        """Return one document or raise ``DocumentNotFound``."""

    @abc.abstractmethod
    async def get_all(self, collection: str) -> List[Document]:
        ...

    @abc.abstractmethod
    async def update(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        """Merge ``data`` into an existing document."""

    @abc.abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        ...

    @abc.abstractmethod
    async def query(
        self,
        collection: str,
        conditions: Sequence[Condition] = (),
        order_by: Optional[str] = None,
    ) -> List[Document]:
        ...

    @abc.abstractmethod
    def subscribe(
        self,
        collection: str,
        callback: SnapshotCallback,
        conditions: Sequence[Condition] = (),
    ) -> Subscription:
        """Deliver the full matching result set now and on every change."""

    async def close(self) -> None:
        return None
