"""MongoDB-backed document store using PyMongo's asyncio client."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from bson import ObjectId
from pymongo import ASCENDING, AsyncMongoClient
from pymongo.errors import PyMongoError

from ..core.clock import utcnow
from ..core.errors import DocumentNotFound, DocumentStoreError
from .base import (
    CREATED_AT,
    UPDATED_AT,
    Condition,
    Document,
    DocumentStore,
    SnapshotCallback,
    Subscription,
    check_conditions,
)

logger = logging.getLogger(__name__)

_MONGO_OPERATORS = {
    "!=": "$ne",
    "<": "$lt",
    "<=": "$lte",
    ">": "$gt",
    ">=": "$gte",
    "in": "$in",
    "not-in": "$nin",
}


def build_filter(conditions: Sequence[Condition], order_by: Optional[str] = None) -> Dict[str, Any]:
    """Translate condition triples into a Mongo filter document."""
    check_conditions(conditions)
    clauses: List[Dict[str, Any]] = []
    for cond in conditions:
        if cond.operator == "==":
            clauses.append({cond.field: {"$eq": cond.value}})
        elif cond.operator == "array-contains":
            clauses.append({cond.field: {"$elemMatch": {"$eq": cond.value}}})
        elif cond.operator == "array-contains-any":
            clauses.append({cond.field: {"$elemMatch": {"$in": list(cond.value)}}})
        else:
            value = list(cond.value) if cond.operator in ("in", "not-in") else cond.value
            clauses.append({cond.field: {_MONGO_OPERATORS[cond.operator]: value}})
    if order_by:
        clauses.append({order_by: {"$exists": True}})
    if not clauses:
        return {}
    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


def _out(doc: Mapping[str, Any]) -> Document:
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    return doc


class MongoDocumentStore(DocumentStore):
    def __init__(self, url: str, database: str, client: Optional[AsyncMongoClient] = None) -> None:
        self._client = client or AsyncMongoClient(url)
        self._db = self._client[database]
        self._watchers: Dict[int, asyncio.Task] = {}
        self._next_watcher = 0

    async def add(self, collection: str, data: Mapping[str, Any]) -> str:
        doc_id = str(ObjectId())
        now = utcnow()
        doc = {k: v for k, v in data.items() if k != "id"}
        doc.update({"_id": doc_id, CREATED_AT: now, UPDATED_AT: now})
        try:
            await self._db[collection].insert_one(doc)
        except PyMongoError as exc:
            raise DocumentStoreError(str(exc)) from exc
        return doc_id

    async def set(
        self, collection: str, doc_id: str, data: Mapping[str, Any], merge: bool = False
    ) -> str:
        now = utcnow()
        fields = {k: v for k, v in data.items() if k != "id"}
        try:
            if merge:
                await self._db[collection].update_one(
                    {"_id": doc_id},
                    {"$set": {**fields, UPDATED_AT: now}, "$setOnInsert": {CREATED_AT: now}},
                    upsert=True,
                )
            else:
                await self._db[collection].replace_one(
                    {"_id": doc_id},
                    {**fields, CREATED_AT: now, UPDATED_AT: now},
                    upsert=True,
                )
        except PyMongoError as exc:
            raise DocumentStoreError(str(exc)) from exc
        return doc_id

    async def get(self, collection: str, doc_id: str) -> Document:
        try:
            doc = await self._db[collection].find_one({"_id": doc_id})
        except PyMongoError as exc:
            raise DocumentStoreError(str(exc)) from exc
        if doc is None:
            raise DocumentNotFound(collection, doc_id)
        return _out(doc)

    async def get_all(self, collection: str) -> List[Document]:
        return await self.query(collection)

    async def update(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        fields = {k: v for k, v in data.items() if k != "id"}
        fields[UPDATED_AT] = utcnow()
        try:
            result = await self._db[collection].update_one({"_id": doc_id}, {"$set": fields})
        except PyMongoError as exc:
            raise DocumentStoreError(str(exc)) from exc
        if result.matched_count == 0:
            raise DocumentNotFound(collection, doc_id)

    async def delete(self, collection: str, doc_id: str) -> None:
        try:
            await self._db[collection].delete_one({"_id": doc_id})
        except PyMongoError as exc:
            raise DocumentStoreError(str(exc)) from exc

    async def query(
        self,
        collection: str,
        conditions: Sequence[Condition] = (),
        order_by: Optional[str] = None,
    ) -> List[Document]:
        cursor = self._db[collection].find(build_filter(conditions, order_by))
        if order_by:
            cursor = cursor.sort(order_by, ASCENDING)
        try:
            return [_out(doc) for doc in await cursor.to_list()]
        except PyMongoError as exc:
            raise DocumentStoreError(str(exc)) from exc

    def subscribe(
        self,
        collection: str,
        callback: SnapshotCallback,
        conditions: Sequence[Condition] = (),
    ) -> Subscription:
        conditions = tuple(conditions)
        check_conditions(conditions)
        key = self._next_watcher
        self._next_watcher += 1
        task = asyncio.get_running_loop().create_task(self._watch(collection, callback, conditions))
        self._watchers[key] = task

        def cancel() -> None:
            watcher = self._watchers.pop(key, None)
            if watcher is not None:
                watcher.cancel()

        return Subscription(cancel)

    async def _deliver(self, collection: str, callback: SnapshotCallback, conditions) -> None:
        result = callback(await self.query(collection, conditions))
        if inspect.isawaitable(result):
            await result

    async def _watch(self, collection: str, callback: SnapshotCallback, conditions) -> None:
        # Change streams need a replica set; a standalone server ends the watcher.
        try:
            await self._deliver(collection, callback, conditions)
            async with await self._db[collection].watch() as stream:
                async for _change in stream:
                    await self._deliver(collection, callback, conditions)
        except asyncio.CancelledError:
            raise
        except PyMongoError:
            logger.exception("Change stream on %s stopped", collection)

    async def close(self) -> None:
        for task in self._watchers.values():
            task.cancel()
        self._watchers.clear()
        await self._client.close()
