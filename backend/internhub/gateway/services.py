"""Per-entity wrappers translating domain calls into document store calls."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, List, Mapping, Optional, Sequence, Type, TypeVar

from ..auth.provider import IdentityProvider
from ..core.errors import DocumentNotFound
from ..domain.models import Attendance, Chat, Intern, Message, Performance, Task, from_document
from . import collections
from .base import Condition, DocumentStore, SnapshotCallback, Subscription

logger = logging.getLogger(__name__)

M = TypeVar("M")


class EntityGateway(Generic[M]):
    collection: str
    model: Type[M]

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def _build(self, docs: Sequence[Mapping[str, Any]]) -> List[M]:
        return [from_document(self.model, doc) for doc in docs]

    async def create(self, data: Mapping[str, Any]) -> str:
        return await self.store.add(self.collection, data)

    async def get(self, doc_id: str) -> M:
        return from_document(self.model, await self.store.get(self.collection, doc_id))

    async def get_all(self) -> List[M]:
        return self._build(await self.store.get_all(self.collection))

    async def update(self, doc_id: str, data: Mapping[str, Any]) -> None:
        await self.store.update(self.collection, doc_id, data)

    async def delete(self, doc_id: str) -> None:
        await self.store.delete(self.collection, doc_id)

    async def query(
        self, conditions: Sequence[Condition] = (), order_by: Optional[str] = None
    ) -> List[M]:
        return self._build(await self.store.query(self.collection, conditions, order_by))

    def watch(
        self, callback: SnapshotCallback, conditions: Sequence[Condition] = ()
    ) -> Subscription:
        return self.store.subscribe(self.collection, callback, conditions)


class InternGateway(EntityGateway[Intern]):
    collection = collections.INTERNS
    model = Intern

    def __init__(self, store: DocumentStore, identity: IdentityProvider) -> None:
        super().__init__(store)
        self.identity = identity

    async def create(self, data: Mapping[str, Any], password: str = "") -> str:  # type: ignore[override]
        """Create the intern's login identity and record; returns the uid.

        The identity is created on an isolated auth session so the acting
        session stays signed in as whoever it was before.
        """
        fields = {k: v for k, v in data.items() if k not in ("id", "password")}
        email = str(fields.get("email", "")).strip()
        async with self.identity.isolated_session() as session:
            user = await session.create_account(email, password)
            fields.update(uid=user.uid, email=email, status="Active")
            await self.store.set(self.collection, user.uid, fields)
        logger.info("Created intern %s with login identity %s", email, user.uid)
        return user.uid


class TaskGateway(EntityGateway[Task]):
    collection = collections.TASKS
    model = Task

    async def by_intern(self, intern_id: str) -> List[Task]:
        return await self.query([Condition("assignedToId", "==", intern_id)])


class PerformanceGateway(EntityGateway[Performance]):
    collection = collections.PERFORMANCES
    model = Performance


class AttendanceGateway(EntityGateway[Attendance]):
    collection = collections.ATTENDANCE
    model = Attendance


class MessageGateway(EntityGateway[Message]):
    collection = collections.MESSAGES
    model = Message

    async def for_chat(self, chat_id: str) -> List[Message]:
        return await self.query([Condition("chatId", "==", chat_id)], order_by="createdAt")

    def watch_chat(self, chat_id: str, callback: SnapshotCallback) -> Subscription:
        return self.watch(callback, [Condition("chatId", "==", chat_id)])


class ChatGateway(EntityGateway[Chat]):
    collection = collections.CHATS
    model = Chat


class SettingsGateway:
    """Per-user settings documents keyed by login identity uid."""

    collection = collections.SETTINGS

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def get(self, uid: str) -> Optional[dict]:
        try:
            return await self.store.get(self.collection, uid)
        except DocumentNotFound:
            return None

    async def save(self, uid: str, data: Mapping[str, Any]) -> None:
        await self.store.set(self.collection, uid, data, merge=True)


@dataclass
class Gateways:
    interns: InternGateway
    tasks: TaskGateway
    performances: PerformanceGateway
    attendance: AttendanceGateway
    messages: MessageGateway
    chats: ChatGateway
    settings: SettingsGateway

    @classmethod
    def build(cls, store: DocumentStore, identity: IdentityProvider) -> "Gateways":
        return cls(
            interns=InternGateway(store, identity),
            tasks=TaskGateway(store),
            performances=PerformanceGateway(store),
            attendance=AttendanceGateway(store),
            messages=MessageGateway(store),
            chats=ChatGateway(store),
            settings=SettingsGateway(store),
        )
