"""Chats, messages and per-user unread counters on top of the state store."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional, Sequence

from ..core import clock
from ..core.errors import InternHubError
from ..domain.models import Chat, Message, OperationResult
from .state import AppStateStore

logger = logging.getLogger(__name__)


class MessagingService:
    def __init__(self, store: AppStateStore) -> None:
        self.store = store
        self.gateways = store.gateways
        self.notifier = store.notifier
        self.settings = store.settings

    async def send_message(
        self, chat_id: str, content: str, sender_id: str, sender_name: str
    ) -> OperationResult:
        """Write the message, then the chat summary, then reload.

        The two writes are not atomic: if the summary update fails the
        message stays persisted and the chat keeps its old summary.
        """
        content = content.strip()
        if not content:
            return OperationResult.fail("Message is empty")
        try:
            message_id = await self.gateways.messages.create(
                {
                    "chatId": chat_id,
                    "sender": sender_name,
                    "senderId": sender_id,
                    "content": content,
                    "timestamp": clock.utcnow(),
                }
            )
            await self.gateways.chats.update(
                chat_id,
                {"lastMessage": content, "time": clock.clock_label(self.settings.TZ)},
            )
        except InternHubError as exc:
            logger.error("Error sending message to chat %s: %s", chat_id, exc.message)
            self.notifier.error(exc.message or "Failed to send message")
            return OperationResult.fail(exc.message or "Failed to send message")
        await self.store.refresh()
        return OperationResult.ok(message_id)

    async def create_chat(
        self, participant_ids: Sequence[str], participant_names: Sequence[str]
    ) -> str:
        """Create a chat with zeroed unread counters and return its id.

        Returns ``""`` on failure. Does not look for an existing chat between
        the same participants; use :meth:`find_chat` first.
        """
        user = self.store.user
        own_name = user.name if user else None
        name = next((n for n in participant_names if n != own_name), None)
        if name is None:
            name = participant_names[0] if participant_names else ""
        data = {
            "participants": list(participant_names),
            "participantIds": list(participant_ids),
            "name": name,
            "lastMessage": "No messages yet",
            "time": "Now",
            "unread": {pid: 0 for pid in participant_ids},
            "isGroup": len(participant_ids) > 2,
        }
        try:
            chat_id = await self.gateways.chats.create(data)
        except InternHubError as exc:
            logger.error("Error creating chat: %s", exc.message)
            self.notifier.error("Failed to create chat")
            return ""
        await self.store.refresh()
        return chat_id

    def find_chat(self, user_id: str, other_id: str) -> Optional[Chat]:
        for chat in self.store.chats:
            if user_id in chat.participant_ids and other_id in chat.participant_ids:
                return chat
        return None

    async def start_chat(self, other_id: str) -> str:
        """Open the admin/intern conversation with ``other_id``, reusing an existing one."""
        user = self.store.user
        if user is None:
            return ""
        existing = self.find_chat(user.id, other_id)
        if existing is not None:
            self.notifier.info("Chat already exists")
            return existing.id
        admin_name = self.settings.ADMIN_NAME
        if user.is_admin:
            intern = self.store.get_intern(other_id)
            if intern is None:
                self.notifier.error("Intern not found")
                return ""
            chat_id = await self.create_chat(["admin", intern.id], [admin_name, intern.name])
            other_name = intern.name
        else:
            chat_id = await self.create_chat([user.id, "admin"], [user.name, admin_name])
            other_name = admin_name
        if chat_id:
            self.notifier.success(f"Started chat with {other_name}")
        return chat_id

    async def mark_messages_as_read(self, chat_id: str, user_id: str) -> None:
        # The whole unread map is written back: last write wins across sessions.
        chat = self.store.get_chat(chat_id)
        if chat is None:
            return
        unread = dict(chat.unread)
        unread[user_id] = 0
        try:
            await self.gateways.chats.update(chat_id, {"unread": unread})
        except InternHubError as exc:
            logger.error("Error marking messages as read in %s: %s", chat_id, exc.message)
            return
        await self.store.refresh()

    async def load_messages(self, chat_id: str) -> List[Message]:
        """Fetch a chat's messages oldest first into the message slice."""
        try:
            messages = await self.gateways.messages.for_chat(chat_id)
        except InternHubError as exc:
            logger.error("Error loading messages for %s: %s", chat_id, exc.message)
            self.notifier.error("Failed to load messages")
            return []
        viewer = self.store.user.id if self.store.user else None
        messages = [replace(m, is_own=m.sender_id == viewer) for m in messages]
        others = [m for m in self.store.messages if m.chat_id != chat_id]
        self.store.messages = others + messages
        return messages

    def user_chats(self, user_id: str, search: str = "") -> List[Chat]:
        needle = search.strip().lower()
        return [
            chat
            for chat in self.store.chats
            if user_id in chat.participant_ids and needle in chat.name.lower()
        ]

    def unread_total(self, user_id: str) -> int:
        return sum(chat.unread_for(user_id) for chat in self.user_chats(user_id))
