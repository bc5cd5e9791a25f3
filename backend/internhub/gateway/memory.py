"""In-process document store used for development and tests."""

from __future__ import annotations

import asyncio
import copy
import inspect
import logging
import uuid
from typing import Any, Awaitable, Dict, List, Mapping, Optional, Sequence, Set, Tuple

from ..core.clock import utcnow
from ..core.errors import DocumentNotFound, DocumentStoreError
from .base import (
    CREATED_AT,
    OPERATORS,
    UPDATED_AT,
    Condition,
    Document,
    DocumentStore,
    SnapshotCallback,
    Subscription,
    check_conditions,
)

logger = logging.getLogger(__name__)


def _matches(doc: Document, conditions: Sequence[Condition]) -> bool:
    for cond in conditions:
        if cond.field not in doc:
            return False
        try:
            if not OPERATORS[cond.operator](doc[cond.field], cond.value):
                return False
        except TypeError:
            return False
    return True


class MemoryDocumentStore(DocumentStore):
    """Dict-backed store; documents are deep-copied on every read and write."""

    def __init__(self) -> None:
        self._collections: Dict[str, Dict[str, Document]] = {}
        self._listeners: Dict[int, Tuple[str, SnapshotCallback, Tuple[Condition, ...]]] = {}
        self._next_listener = 0
        self._pending: Set[asyncio.Task] = set()

    def _collection(self, name: str) -> Dict[str, Document]:
        return self._collections.setdefault(name, {})

    @staticmethod
    def _with_id(doc_id: str, doc: Document) -> Document:
        return {"id": doc_id, **copy.deepcopy(doc)}

    async def add(self, collection: str, data: Mapping[str, Any]) -> str:
        doc_id = uuid.uuid4().hex[:20]
        now = utcnow()
        doc = copy.deepcopy(dict(data))
        doc.pop("id", None)
        doc[CREATED_AT] = now
        doc[UPDATED_AT] = now
        self._collection(collection)[doc_id] = doc
        await self._notify(collection)
        return doc_id

    async def set(
        self, collection: str, doc_id: str, data: Mapping[str, Any], merge: bool = False
    ) -> str:
        now = utcnow()
        docs = self._collection(collection)
        existing = docs.get(doc_id) if merge else None
        doc = dict(existing) if existing else {CREATED_AT: now}
        doc.update(copy.deepcopy(dict(data)))
        doc.pop("id", None)
        doc.setdefault(CREATED_AT, now)
        doc[UPDATED_AT] = now
        docs[doc_id] = doc
        await self._notify(collection)
        return doc_id

    async def get(self, collection: str, doc_id: str) -> Document:
        doc = self._collection(collection).get(doc_id)
        if doc is None:
            raise DocumentNotFound(collection, doc_id)
        return self._with_id(doc_id, doc)

    async def get_all(self, collection: str) -> List[Document]:
        return [self._with_id(k, v) for k, v in self._collection(collection).items()]

    async def update(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        docs = self._collection(collection)
        if doc_id not in docs:
            raise DocumentNotFound(collection, doc_id)
        patch = copy.deepcopy(dict(data))
        patch.pop("id", None)
        docs[doc_id].update(patch)
        docs[doc_id][UPDATED_AT] = utcnow()
        await self._notify(collection)

    async def delete(self, collection: str, doc_id: str) -> None:
        self._collection(collection).pop(doc_id, None)
        await self._notify(collection)

    async def query(
        self,
        collection: str,
        conditions: Sequence[Condition] = (),
        order_by: Optional[str] = None,
    ) -> List[Document]:
        return self._select(collection, tuple(conditions), order_by)

    def _select(
        self, collection: str, conditions: Tuple[Condition, ...], order_by: Optional[str] = None
    ) -> List[Document]:
        check_conditions(conditions)
        docs = [
            self._with_id(k, v)
            for k, v in self._collection(collection).items()
            if _matches(v, conditions)
        ]
        if order_by:
            docs = [d for d in docs if order_by in d]
            try:
                docs.sort(key=lambda d: d[order_by])
            except TypeError as exc:
                raise DocumentStoreError(f"Cannot order by {order_by}: {exc}") from exc
        return docs

    def subscribe(
        self,
        collection: str,
        callback: SnapshotCallback,
        conditions: Sequence[Condition] = (),
    ) -> Subscription:
        conditions = tuple(conditions)
        check_conditions(conditions)
        key = self._next_listener
        self._next_listener += 1
        self._listeners[key] = (collection, callback, conditions)
        result = callback(self._select(collection, conditions))
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(self._guard(collection, result))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        return Subscription(lambda: self._listeners.pop(key, None))

    async def _notify(self, collection: str) -> None:
        for collection_name, callback, conditions in list(self._listeners.values()):
            if collection_name != collection:
                continue
            try:
                result = callback(self._select(collection, conditions))
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Snapshot listener on %s failed", collection)

    async def _guard(self, collection: str, delivery: Awaitable[None]) -> None:
        try:
            await delivery
        except Exception:
            logger.exception("Snapshot listener on %s failed", collection)

    async def close(self) -> None:
        """Wait for initial snapshot deliveries still in flight."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
