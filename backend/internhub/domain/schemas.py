"""Pydantic models used for request and response bodies.

These data transfer objects (DTOs) mirror the domain models but add
validation for the API layer. Field names are snake_case; each field is
aliased to the camelCase key stored in the document store, and
:meth:`DocumentModel.to_document` produces the store payload.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, model_validator

from .models import AppUser

TaskStatus = Literal["To Do", "In Progress", "Completed"]
TaskPriority = Literal["High", "Medium", "Low"]
AttendanceStatus = Literal["Present", "Absent", "Half Day", "Leave"]
EventType = Literal["meeting", "deadline", "training", "interview"]
Theme = Literal["light", "dark"]


class DocumentModel(BaseModel):
    """Base for bodies that are written to the document store."""

    class Config:
        populate_by_name = True

    def to_document(self, partial: bool = False) -> Dict[str, Any]:
        """Dump using store keys; ``partial`` keeps only fields the caller sent."""
        return self.model_dump(by_alias=True, exclude_unset=partial, mode="json")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class PasswordChange(BaseModel):
    new_password: str
    confirm_password: str


class InternCreate(DocumentModel):
    """New intern submitted by an administrator.

    Example:
        >>> InternCreate(name="Ann Lee", email="Ann.Lee@x.com")
    """

    name: str
    email: EmailStr
    phone: str = ""
    skills: List[str] = []
    role: str = ""

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "name": "Ann Lee",
                "email": "ann.lee@example.com",
                "phone": "555-0100",
                "skills": ["Python", "SQL"],
                "role": "Backend Intern",
            }
        }


class InternUpdate(DocumentModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    skills: Optional[List[str]] = None
    role: Optional[str] = None
    status: Optional[str] = None


class TaskCreate(DocumentModel):
    """Task assigned to one intern.

    Example:
        >>> TaskCreate(title="Write tests", assigned_to_id="i1", deadline="2024-03-22")
    """

    title: str
    assigned_to: str = Field("", alias="assignedTo")
    assigned_to_id: str = Field(alias="assignedToId")
    deadline: str = ""
    status: TaskStatus = "To Do"
    priority: TaskPriority = "Medium"

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "title": "Build attendance report",
                "assignedTo": "Ann Lee",
                "assignedToId": "i1",
                "deadline": "2024-03-22",
                "status": "To Do",
                "priority": "High",
            }
        }


class TaskUpdate(DocumentModel):
    title: Optional[str] = None
    assigned_to: Optional[str] = Field(None, alias="assignedTo")
    assigned_to_id: Optional[str] = Field(None, alias="assignedToId")
    deadline: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None


class TaskStatusUpdate(BaseModel):
    status: TaskStatus


class PerformanceCreate(DocumentModel):
    intern_id: str = Field(alias="internId")
    rating: float = Field(ge=0)
    tasks_completed: int = Field(0, ge=0, alias="tasksCompleted")
    last_review: str = Field("", alias="lastReview")
    feedback: str = ""


class PerformanceUpdate(DocumentModel):
    intern_id: Optional[str] = Field(None, alias="internId")
    rating: Optional[float] = Field(None, ge=0)
    tasks_completed: Optional[int] = Field(None, ge=0, alias="tasksCompleted")
    last_review: Optional[str] = Field(None, alias="lastReview")
    feedback: Optional[str] = None


class AttendanceCreate(DocumentModel):
    intern_id: str = Field(alias="internId")
    date: str
    status: AttendanceStatus = "Present"
    check_in: Optional[str] = Field(None, alias="checkIn")
    check_out: Optional[str] = Field(None, alias="checkOut")
    notes: Optional[str] = None


class AttendanceUpdate(DocumentModel):
    date: Optional[str] = None
    status: Optional[AttendanceStatus] = None
    check_in: Optional[str] = Field(None, alias="checkIn")
    check_out: Optional[str] = Field(None, alias="checkOut")
    notes: Optional[str] = None


class ChatCreate(BaseModel):
    participant_ids: List[str]
    participant_names: List[str]

    @model_validator(mode="after")
    def _pairs(self) -> "ChatCreate":
        if len(self.participant_ids) < 2:
            raise ValueError("A chat needs at least two participants.")
        if len(self.participant_ids) != len(self.participant_names):
            raise ValueError("Every participant id needs a name.")
        return self


class StartChat(BaseModel):
    other_id: str


class MessageCreate(BaseModel):
    content: str = Field(min_length=1)


class ThemeUpdate(BaseModel):
    theme: Theme


class CalendarEventIn(BaseModel):
    title: str
    date: str
    time: str = "09:00"
    type: EventType = "meeting"
    attendees: int = Field(0, ge=0)
    location: str = ""
    description: str = ""


class OperationOut(BaseModel):
    success: bool
    id: Optional[str] = None
    error: Optional[str] = None


class NoticeOut(BaseModel):
    level: str
    message: str


class SessionOut(BaseModel):
    """Issued on sign-in; send ``token`` back as the ``X-Auth-Token`` header."""

    token: str
    user: AppUser
