"""Core domain entities represented as immutable dataclasses.

Entities are rebuilt from store documents on every load and never mutated
in place. Documents keep the camelCase field names shared with the hosted
store; each entity declares its attribute to document-key mapping in
``FIELDS`` and converts through :func:`from_document` / :func:`to_document`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Type, TypeVar

TASK_STATUSES: Tuple[str, ...] = ("To Do", "In Progress", "Completed")

T = TypeVar("T")


def from_document(cls: Type[T], doc: Mapping[str, Any]) -> T:
    """Build ``cls`` from a store document, ignoring unknown keys."""
    kwargs = {}
    for attr, key in cls.FIELDS.items():  # type: ignore[attr-defined]
        if key in doc:
            kwargs[attr] = doc[key]
    for f in fields(cls):  # type: ignore[arg-type]
        value = kwargs.get(f.name)
        if isinstance(value, list):
            kwargs[f.name] = tuple(value)
    return cls(**kwargs)


def to_document(obj: Any, *, include_id: bool = False) -> Dict[str, Any]:
    """Inverse of :func:`from_document`."""
    doc: Dict[str, Any] = {}
    for attr, key in obj.FIELDS.items():
        if attr == "id" and not include_id:
            continue
        value = getattr(obj, attr)
        doc[key] = list(value) if isinstance(value, tuple) else value
    return doc


@dataclass(frozen=True)
class Intern:
    """An intern record; ``uid`` points at the login identity.

    Example:
        >>> Intern(id="i1", name="Ann Lee", email="ann.lee@x.com")
    """

    FIELDS: ClassVar[Dict[str, str]] = {
        "id": "id",
        "name": "name",
        "email": "email",
        "phone": "phone",
        "skills": "skills",
        "role": "role",
        "join_date": "joinDate",
        "status": "status",
        "uid": "uid",
    }

    id: str
    name: str = ""
    email: str = ""
    phone: str = ""
    skills: Tuple[str, ...] = ()
    role: str = ""
    join_date: str = ""
    status: str = "Active"
    uid: str = ""


@dataclass(frozen=True)
class Task:
    """Task on the board; ``assigned_to`` is a name snapshot."""

    FIELDS: ClassVar[Dict[str, str]] = {
        "id": "id",
        "title": "title",
        "assigned_to": "assignedTo",
        "assigned_to_id": "assignedToId",
        "deadline": "deadline",
        "status": "status",
        "priority": "priority",
    }

    id: str
    title: str = ""
    assigned_to: str = ""
    assigned_to_id: str = ""
    deadline: str = ""
    status: str = "To Do"
    priority: str = "Medium"


@dataclass(frozen=True)
class Performance:
    FIELDS: ClassVar[Dict[str, str]] = {
        "id": "id",
        "intern_id": "internId",
        "rating": "rating",
        "tasks_completed": "tasksCompleted",
        "last_review": "lastReview",
        "feedback": "feedback",
    }

    id: str
    intern_id: str = ""
    rating: float = 0
    tasks_completed: int = 0
    last_review: str = ""
    feedback: str = ""


@dataclass(frozen=True)
class Attendance:
    FIELDS: ClassVar[Dict[str, str]] = {
        "id": "id",
        "intern_id": "internId",
        "date": "date",
        "status": "status",
        "check_in": "checkIn",
        "check_out": "checkOut",
        "notes": "notes",
    }

    id: str
    intern_id: str = ""
    date: str = ""
    status: str = "Present"
    check_in: Optional[str] = None
    check_out: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class Chat:
    """Conversation between participants with a per-user unread map.

    Example:
        >>> Chat(
        ...     id="c1",
        ...     participants=("Admin", "Ann Lee"),
        ...     participant_ids=("admin", "i1"),
        ...     unread={"admin": 0, "i1": 0},
        ... )
    """

    FIELDS: ClassVar[Dict[str, str]] = {
        "id": "id",
        "participants": "participants",
        "participant_ids": "participantIds",
        "name": "name",
        "last_message": "lastMessage",
        "time": "time",
        "unread": "unread",
        "is_group": "isGroup",
    }

    id: str
    participants: Tuple[str, ...] = ()
    participant_ids: Tuple[str, ...] = ()
    name: str = ""
    last_message: str = ""
    time: str = ""
    unread: Dict[str, int] = field(default_factory=dict)
    is_group: bool = False

    def unread_for(self, user_id: str) -> int:
        return int(self.unread.get(user_id, 0))


@dataclass(frozen=True)
class Message:
    """Chat message; ``is_own`` is computed for the viewing user."""

    FIELDS: ClassVar[Dict[str, str]] = {
        "id": "id",
        "chat_id": "chatId",
        "sender": "sender",
        "sender_id": "senderId",
        "content": "content",
        "timestamp": "timestamp",
    }

    id: str
    chat_id: str = ""
    sender: str = ""
    sender_id: str = ""
    content: str = ""
    timestamp: Optional[datetime] = None
    is_own: bool = False


@dataclass(frozen=True)
class AppUser:
    """Application-level identity resolved from a login identity.

    Example:
        >>> AppUser(
        ...     id="admin",
        ...     email="admin@x.com",
        ...     role="admin",
        ...     name="Administrator",
        ...     uid="u1",
        ... )
    """

    id: str
    email: str
    role: str
    name: str
    uid: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


@dataclass(frozen=True)
class CalendarEvent:
    id: str
    title: str
    date: str
    time: str = "09:00"
    type: str = "meeting"
    attendees: int = 0
    location: str = ""
    description: str = ""


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a service call: success flag plus optional id or error."""

    success: bool
    id: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, id: Optional[str] = None) -> "OperationResult":
        return cls(success=True, id=id)

    @classmethod
    def fail(cls, error: str) -> "OperationResult":
        return cls(success=False, error=error)
