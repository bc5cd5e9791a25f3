"""Session-scoped cache of every domain collection.

The store is the only writer of its cache. Every mutation performs exactly
one remote write and then reloads all collections, so the cache always
reflects the last successful write without any local patching. Failures
never raise to the caller; they are logged, pushed to the notifier and
returned as a failed :class:`OperationResult`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Set, Union

from ..core import clock
from ..core.config import Settings
from ..core.errors import InternHubError
from ..core.notifications import Notifier
from ..domain.models import (
    AppUser,
    Attendance,
    Chat,
    Intern,
    Message,
    OperationResult,
    Performance,
    Task,
)
from ..domain.schemas import DocumentModel
from ..gateway.services import Gateways

logger = logging.getLogger(__name__)

Payload = Union[DocumentModel, Mapping[str, Any]]

LOADED_SLICES = ("interns", "tasks", "performances", "attendance", "chats")


def as_document(data: Payload, partial: bool = False) -> dict:
    if isinstance(data, DocumentModel):
        return data.to_document(partial=partial)
    return {k: v for k, v in dict(data).items() if k != "id"}


class AppStateStore:
    def __init__(self, gateways: Gateways, notifier: Notifier, settings: Settings) -> None:
        self.gateways = gateways
        self.notifier = notifier
        self.settings = settings
        self.user: Optional[AppUser] = None
        self.loading = False
        self.interns: List[Intern] = []
        self.tasks: List[Task] = []
        self.performances: List[Performance] = []
        self.attendance: List[Attendance] = []
        self.chats: List[Chat] = []
        self.messages: List[Message] = []
        self.theme = settings.DEFAULT_THEME
        self.dark_mode = self.theme == "dark"
        self._background: Set[asyncio.Task] = set()

    # lifecycle

    async def attach(self, user: AppUser) -> None:
        """Identity acquired: adopt ``user`` and bulk-load every collection."""
        self.user = user
        await self.load()

    def detach(self) -> None:
        """Identity lost: drop the user and every cached slice."""
        self.user = None
        self.interns, self.tasks, self.performances = [], [], []
        self.attendance, self.chats, self.messages = [], [], []
        self._apply_theme(self.settings.DEFAULT_THEME)

    async def load(self) -> None:
        self.loading = True
        try:
            g = self.gateways
            results = await asyncio.gather(
                g.interns.get_all(),
                g.tasks.get_all(),
                g.performances.get_all(),
                g.attendance.get_all(),
                g.chats.get_all(),
                return_exceptions=True,
            )
            failures = 0
            for name, result in zip(LOADED_SLICES, results):
                if isinstance(result, InternHubError):
                    failures += 1
                    logger.error("Error loading %s: %s", name, result.message)
                elif isinstance(result, BaseException):
                    raise result
                else:
                    setattr(self, name, result)
            if failures == len(LOADED_SLICES):
                self.notifier.error("Failed to load data")
            if self.user is not None:
                await self._load_settings(self.user.uid)
        finally:
            self.loading = False

    async def refresh(self) -> None:
        await self.load()

    async def _load_settings(self, uid: str) -> None:
        try:
            doc = await self.gateways.settings.get(uid)
        except InternHubError as exc:
            logger.warning("Could not load settings for %s: %s", uid, exc.message)
            return
        if doc and doc.get("theme"):
            self._apply_theme(doc["theme"])

    async def _mutate(
        self,
        write: Callable[[], Awaitable[Optional[str]]],
        success: Union[str, Callable[[], str]],
        failure: str,
    ) -> OperationResult:
        try:
            new_id = await write()
        except InternHubError as exc:
            logger.error("%s: %s", failure, exc.message)
            message = exc.message or failure
            self.notifier.error(message)
            return OperationResult.fail(message)
        await self.refresh()
        self.notifier.success(success() if callable(success) else success)
        return OperationResult.ok(new_id)

    # interns

    async def add_intern(self, data: Payload) -> OperationResult:
        fields = as_document(data)
        fields.update(joinDate=clock.today(self.settings.TZ), status="Active")
        password = self.settings.DEFAULT_INTERN_PASSWORD
        return await self._mutate(
            lambda: self.gateways.interns.create(fields, password=password),
            f"Intern added successfully! Login credentials: {fields.get('email')} / {password}",
            "Failed to add intern",
        )

    async def update_intern(self, intern_id: str, data: Payload) -> OperationResult:
        fields = as_document(data, partial=True)

        async def write() -> str:
            await self.gateways.interns.update(intern_id, fields)
            return intern_id

        return await self._mutate(write, "Intern updated successfully!", "Failed to update intern")

    async def delete_intern(self, intern_id: str) -> OperationResult:
        # Tasks, reviews and attendance that reference the intern are kept.
        async def write() -> str:
            await self.gateways.interns.delete(intern_id)
            return intern_id

        return await self._mutate(write, "Intern deleted successfully!", "Failed to delete intern")

    # tasks

    async def add_task(self, data: Payload) -> OperationResult:
        fields = as_document(data)
        return await self._mutate(
            lambda: self.gateways.tasks.create(fields),
            "Task added successfully!",
            "Failed to add task",
        )

    async def update_task(self, task_id: str, data: Payload) -> OperationResult:
        fields = as_document(data, partial=True)

        async def write() -> str:
            await self.gateways.tasks.update(task_id, fields)
            return task_id

        return await self._mutate(write, "Task updated successfully!", "Failed to update task")

    async def update_task_status(self, task_id: str, status: str) -> OperationResult:
        async def write() -> str:
            await self.gateways.tasks.update(task_id, {"status": status})
            return task_id

        return await self._mutate(write, "Task status updated!", "Failed to update task status")

    async def delete_task(self, task_id: str) -> OperationResult:
        async def write() -> str:
            await self.gateways.tasks.delete(task_id)
            return task_id

        return await self._mutate(write, "Task deleted successfully!", "Failed to delete task")

    # performance reviews

    async def add_performance_review(self, data: Payload) -> OperationResult:
        fields = as_document(data)
        return await self._mutate(
            lambda: self.gateways.performances.create(fields),
            "Performance review added successfully!",
            "Failed to add performance review",
        )

    async def update_performance_review(self, review_id: str, data: Payload) -> OperationResult:
        fields = as_document(data, partial=True)

        async def write() -> str:
            await self.gateways.performances.update(review_id, fields)
            return review_id

        return await self._mutate(
            write,
            "Performance review updated successfully!",
            "Failed to update performance review",
        )

    async def delete_performance_review(self, review_id: str) -> OperationResult:
        async def write() -> str:
            await self.gateways.performances.delete(review_id)
            return review_id

        return await self._mutate(
            write,
            "Performance review deleted successfully!",
            "Failed to delete performance review",
        )

    # attendance

    async def add_attendance(self, data: Payload) -> OperationResult:
        fields = as_document(data)
        return await self._mutate(
            lambda: self.gateways.attendance.create(fields),
            "Attendance marked successfully!",
            "Failed to mark attendance",
        )

    async def update_attendance(self, record_id: str, data: Payload) -> OperationResult:
        fields = as_document(data, partial=True)

        async def write() -> str:
            await self.gateways.attendance.update(record_id, fields)
            return record_id

        return await self._mutate(
            write, "Attendance updated successfully!", "Failed to update attendance"
        )

    async def delete_attendance(self, record_id: str) -> OperationResult:
        async def write() -> str:
            await self.gateways.attendance.delete(record_id)
            return record_id

        return await self._mutate(
            write, "Attendance deleted successfully!", "Failed to delete attendance"
        )

    # cache reads

    def get_intern_attendance(self, intern_id: str) -> List[Attendance]:
        return [record for record in self.attendance if record.intern_id == intern_id]

    def get_intern_by_email(self, email: str) -> Optional[Intern]:
        wanted = email.strip().lower()
        for intern in self.interns:
            if intern.email.strip().lower() == wanted:
                return intern
        return None

    def get_intern(self, intern_id: str) -> Optional[Intern]:
        return next((i for i in self.interns if i.id == intern_id), None)

    def get_task(self, task_id: str) -> Optional[Task]:
        return next((t for t in self.tasks if t.id == task_id), None)

    def get_chat(self, chat_id: str) -> Optional[Chat]:
        return next((c for c in self.chats if c.id == chat_id), None)

    # theme

    def _apply_theme(self, theme: str) -> None:
        self.theme = theme
        self.dark_mode = theme == "dark"

    def set_theme(self, theme: str) -> Optional[asyncio.Task]:
        """Apply ``theme`` now; persist it in the background without waiting."""
        self._apply_theme(theme)
        if self.user is None:
            return None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running loop; theme %s not persisted", theme)
            return None
        task = loop.create_task(self._save_theme(self.user.uid, theme))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    async def _save_theme(self, uid: str, theme: str) -> None:
        try:
            await self.gateways.settings.save(uid, {"theme": theme})
        except InternHubError as exc:
            logger.warning("Could not persist theme for %s: %s", uid, exc.message)

    async def flush(self) -> None:
        """Wait for pending background writes."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)
