"""Read-only projections of the state store for dashboards and the task board."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..core import clock
from ..domain.models import TASK_STATUSES, AppUser, Task
from .state import AppStateStore

ATTENDANCE_WEIGHT = {"Present": 1.0, "Half Day": 0.5}


def visible_tasks(store: AppStateStore, user: AppUser) -> List[Task]:
    if user.is_admin:
        return list(store.tasks)
    return [t for t in store.tasks if t.assigned_to_id == user.id]


def task_board(store: AppStateStore, user: AppUser) -> Dict[str, List[Task]]:
    board: Dict[str, List[Task]] = {status: [] for status in TASK_STATUSES}
    for task in visible_tasks(store, user):
        board.setdefault(task.status, []).append(task)
    return board


def attendance_rate(store: AppStateStore, intern_id: str) -> Optional[float]:
    records = store.get_intern_attendance(intern_id)
    if not records:
        return None
    score = sum(ATTENDANCE_WEIGHT.get(r.status, 0.0) for r in records)
    return round(100 * score / len(records), 1)


def upcoming_tasks(tasks: List[Task], limit: int = 5) -> List[Task]:
    pending = [t for t in tasks if t.status != "Completed"]
    pending.sort(key=lambda t: t.deadline or "9999-12-31")
    return pending[:limit]


def intern_dashboard(store: AppStateStore, user: AppUser) -> Dict[str, Any]:
    mine = [t for t in store.tasks if t.assigned_to_id == user.id]
    reviews = [p for p in store.performances if p.intern_id == user.id]
    latest = max(reviews, key=lambda p: p.last_review, default=None)
    return {
        "active_tasks": sum(1 for t in mine if t.status != "Completed"),
        "completed_tasks": sum(1 for t in mine if t.status == "Completed"),
        "rating": latest.rating if latest else None,
        "attendance_rate": attendance_rate(store, user.id),
        "upcoming_tasks": upcoming_tasks(mine),
    }


def admin_dashboard(store: AppStateStore, today: Optional[str] = None) -> Dict[str, Any]:
    today = today or clock.today(store.settings.TZ)
    counts = {status: 0 for status in TASK_STATUSES}
    for task in store.tasks:
        counts[task.status] = counts.get(task.status, 0) + 1
    ratings = [p.rating for p in store.performances]
    return {
        "total_interns": len(store.interns),
        "active_interns": sum(1 for i in store.interns if i.status == "Active"),
        "tasks_by_status": counts,
        "average_rating": round(sum(ratings) / len(ratings), 2) if ratings else None,
        "present_today": sum(
            1 for a in store.attendance if a.date == today and a.status == "Present"
        ),
        "upcoming_tasks": upcoming_tasks(store.tasks),
    }
