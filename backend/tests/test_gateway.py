"""Tests for the document store backends."""

import asyncio
from collections import defaultdict
from types import SimpleNamespace

import pytest

from internhub.core.errors import DocumentNotFound, DocumentStoreError
from internhub.gateway.base import Condition
from internhub.gateway.memory import MemoryDocumentStore
from internhub.gateway.mongo import MongoDocumentStore, build_filter


def test_add_stamps_and_update_merges() -> None:
    async def scenario():
        store = MemoryDocumentStore()
        doc_id = await store.add("tasks", {"title": "A", "status": "To Do"})
        created = await store.get("tasks", doc_id)
        assert created["id"] == doc_id
        assert created["createdAt"] == created["updatedAt"]

        await store.update("tasks", doc_id, {"status": "Completed"})
        updated = await store.get("tasks", doc_id)
        assert updated["title"] == "A"
        assert updated["status"] == "Completed"
        assert updated["updatedAt"] >= created["updatedAt"]
        assert updated["createdAt"] == created["createdAt"]

    asyncio.run(scenario())


def test_reads_are_copies() -> None:
    async def scenario():
        store = MemoryDocumentStore()
        doc_id = await store.add("chats", {"unread": {"admin": 0}})
        doc = await store.get("chats", doc_id)
        doc["unread"]["admin"] = 5
        assert (await store.get("chats", doc_id))["unread"] == {"admin": 0}

    asyncio.run(scenario())


def test_missing_documents() -> None:
    async def scenario():
        store = MemoryDocumentStore()
        with pytest.raises(DocumentNotFound):
            await store.get("tasks", "nope")
        with pytest.raises(DocumentNotFound):
            await store.update("tasks", "nope", {"status": "Completed"})
        await store.delete("tasks", "nope")

    asyncio.run(scenario())


def test_set_with_merge_keeps_other_fields() -> None:
    async def scenario():
        store = MemoryDocumentStore()
        await store.set("settings", "u1", {"theme": "dark", "lang": "en"})
        await store.set("settings", "u1", {"theme": "light"}, merge=True)
        assert (await store.get("settings", "u1"))["lang"] == "en"
        await store.set("settings", "u1", {"theme": "dark"})
        assert "lang" not in await store.get("settings", "u1")

    asyncio.run(scenario())


def test_query_filters_and_orders() -> None:
    async def scenario():
        store = MemoryDocumentStore()
        await store.add("messages", {"chatId": "c1", "content": "b", "seq": 2})
        await store.add("messages", {"chatId": "c2", "content": "x", "seq": 1})
        await store.add("messages", {"chatId": "c1", "content": "a", "seq": 1})
        await store.add("messages", {"chatId": "c1", "content": "no seq"})

        rows = await store.query("messages", [Condition("chatId", "==", "c1")], order_by="seq")
        assert [r["content"] for r in rows] == ["a", "b"]

        rows = await store.query(
            "messages", [Condition("seq", ">=", 2), Condition("chatId", "in", ["c1"])]
        )
        assert [r["content"] for r in rows] == ["b"]

        with pytest.raises(DocumentStoreError):
            await store.query("messages", [Condition("seq", "~", 1)])

    asyncio.run(scenario())


def test_array_operators() -> None:
    async def scenario():
        store = MemoryDocumentStore()
        await store.add("chats", {"participantIds": ["admin", "i1"]})
        await store.add("chats", {"participantIds": ["admin", "i2"]})
        rows = await store.query("chats", [Condition("participantIds", "array-contains", "i1")])
        assert len(rows) == 1
        rows = await store.query(
            "chats", [Condition("participantIds", "array-contains-any", ["i1", "i2"])]
        )
        assert len(rows) == 2

    asyncio.run(scenario())


def test_subscribe_pushes_full_result_sets() -> None:
    async def scenario():
        store = MemoryDocumentStore()
        seen = []
        sub = store.subscribe(
            "messages", lambda docs: seen.append(len(docs)), [Condition("chatId", "==", "c1")]
        )
        await store.add("messages", {"chatId": "c1"})
        await store.add("messages", {"chatId": "c2"})
        await store.add("tasks", {"title": "elsewhere"})
        sub.unsubscribe()
        await store.add("messages", {"chatId": "c1"})
        return seen

    assert asyncio.run(scenario()) == [0, 1, 1]


def test_mongo_filter_translation() -> None:
    assert build_filter([]) == {}
    assert build_filter([Condition("chatId", "==", "c1")]) == {"chatId": {"$eq": "c1"}}
    assert build_filter([Condition("status", "in", ("To Do",))], order_by="createdAt") == {
        "$and": [{"status": {"$in": ["To Do"]}}, {"createdAt": {"$exists": True}}]
    }
    assert build_filter([Condition("participantIds", "array-contains", "i1")]) == {
        "participantIds": {"$elemMatch": {"$eq": "i1"}}
    }
    with pytest.raises(DocumentStoreError):
        build_filter([Condition("a", "like", 1)])


def test_entity_gateways_query_and_watch() -> None:
    from internhub.auth.local import LocalIdentityProvider
    from internhub.gateway.services import Gateways

    async def scenario():
        store = MemoryDocumentStore()
        gateways = Gateways.build(store, LocalIdentityProvider())
        await gateways.tasks.create({"title": "A", "assignedToId": "i1"})
        await gateways.tasks.create({"title": "B", "assignedToId": "i2"})
        mine = await gateways.tasks.by_intern("i1")

        seen = []
        sub = gateways.messages.watch_chat("c1", lambda docs: seen.append([d["content"] for d in docs]))
        await gateways.messages.create({"chatId": "c1", "content": "hi"})
        sub.unsubscribe()
        return mine, seen, await gateways.settings.get("nobody")

    mine, seen, settings = asyncio.run(scenario())
    assert [t.title for t in mine] == ["A"]
    assert seen == [[], ["hi"]]
    assert settings is None


def _matches_filter(doc, flt):
    if "$and" in flt:
        return all(_matches_filter(doc, clause) for clause in flt["$and"])
    for key, cond in flt.items():
        if "$eq" in cond and doc.get(key) != cond["$eq"]:
            return False
        if "$exists" in cond and (key in doc) != cond["$exists"]:
            return False
    return True


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    def sort(self, key, direction):
        self.docs = sorted(self.docs, key=lambda d: d[key], reverse=direction < 0)
        return self

    async def to_list(self):
        return [dict(d) for d in self.docs]


class FakeCollection:
    """Dict-backed stand-in for ``AsyncCollection``; understands ``_id`` lookups and $eq/$exists filters."""

    def __init__(self):
        self.docs = {}

    async def insert_one(self, doc):
        self.docs[doc["_id"]] = dict(doc)

    async def find_one(self, flt):
        doc = self.docs.get(flt["_id"])
        return dict(doc) if doc is not None else None

    async def update_one(self, flt, update, upsert=False):
        doc = self.docs.get(flt["_id"])
        matched = 1
        if doc is None:
            if not upsert:
                return SimpleNamespace(matched_count=0)
            doc = self.docs[flt["_id"]] = {"_id": flt["_id"], **update.get("$setOnInsert", {})}
            matched = 0
        doc.update(update["$set"])
        return SimpleNamespace(matched_count=matched)

    async def replace_one(self, flt, doc, upsert=False):
        self.docs[flt["_id"]] = {"_id": flt["_id"], **doc}

    async def delete_one(self, flt):
        self.docs.pop(flt["_id"], None)

    def find(self, flt):
        return FakeCursor([d for d in self.docs.values() if _matches_filter(d, flt)])


class FakeMongoClient:
    def __init__(self):
        self.collections = defaultdict(FakeCollection)
        self.closed = False

    def __getitem__(self, database):
        return self.collections

    async def close(self):
        self.closed = True


def test_mongo_store_maps_ids_and_reports_missing_documents() -> None:
    async def scenario():
        client = FakeMongoClient()
        store = MongoDocumentStore("mongodb://unused", "internhub", client=client)
        doc_id = await store.add("tasks", {"id": "ignored", "title": "A", "seq": 2})
        await store.add("tasks", {"title": "B", "seq": 1})

        raw = client.collections["tasks"].docs[doc_id]
        assert "id" not in raw and raw["_id"] == doc_id

        fetched = await store.get("tasks", doc_id)
        assert fetched["id"] == doc_id and "_id" not in fetched
        assert fetched["createdAt"] == fetched["updatedAt"]

        await store.update("tasks", doc_id, {"status": "Completed"})
        assert (await store.get("tasks", doc_id))["status"] == "Completed"
        with pytest.raises(DocumentNotFound):
            await store.update("tasks", "missing", {"status": "Completed"})
        with pytest.raises(DocumentNotFound):
            await store.get("tasks", "missing")

        ordered = await store.query("tasks", [], order_by="seq")
        assert [d["title"] for d in ordered] == ["B", "A"]
        assert [d["title"] for d in await store.query("tasks", [Condition("title", "==", "A")])] == ["A"]

        await store.delete("tasks", doc_id)
        assert [d["title"] for d in await store.get_all("tasks")] == ["B"]

        await store.close()
        return client

    assert asyncio.run(scenario()).closed


def test_mongo_set_merge_upserts_and_keeps_fields() -> None:
    async def scenario():
        client = FakeMongoClient()
        store = MongoDocumentStore("mongodb://unused", "internhub", client=client)
        await store.set("settings", "u1", {"theme": "dark"}, merge=True)
        first = await store.get("settings", "u1")
        await store.set("settings", "u1", {"lang": "en"}, merge=True)
        merged = await store.get("settings", "u1")
        await store.set("settings", "u1", {"theme": "light"})
        replaced = await store.get("settings", "u1")
        return first, merged, replaced

    first, merged, replaced = asyncio.run(scenario())
    assert first["theme"] == "dark" and "createdAt" in first
    assert merged["theme"] == "dark" and merged["lang"] == "en"
    assert merged["createdAt"] == first["createdAt"]
    assert replaced["theme"] == "light" and "lang" not in replaced


def test_failing_initial_snapshot_is_logged(caplog) -> None:
    async def scenario():
        store = MemoryDocumentStore()
        seen = []

        async def listener(docs):
            if not seen:
                seen.append("boom")
                raise RuntimeError("listener broke")
            seen.append(len(docs))

        store.subscribe("chats", listener)
        await store.close()
        await store.add("chats", {"name": "x"})
        return store, seen

    store, seen = asyncio.run(scenario())
    assert seen == ["boom", 1]
    assert store._pending == set()
    assert "Snapshot listener on chats failed" in caplog.text
