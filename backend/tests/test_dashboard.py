"""Tests for dashboards, the task board and the calendar."""

import asyncio
from datetime import date

from internhub.domain.models import AppUser
from internhub.services import dashboard
from internhub.services.calendar import CalendarBoard

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD


def seeded(workspace):
    async def scenario():
        await workspace.login(ADMIN_EMAIL, ADMIN_PASSWORD)
        store = workspace.store
        for title, status, deadline, owner in [
            ("a", "To Do", "2024-03-25", "i1"),
            ("b", "In Progress", "2024-03-21", "i1"),
            ("c", "Completed", "2024-03-01", "i1"),
            ("d", "To Do", "2024-03-20", "i2"),
        ]:
            await store.add_task(
                {"title": title, "status": status, "deadline": deadline, "assignedToId": owner}
            )
        await store.add_performance_review({"internId": "i1", "rating": 3, "lastReview": "2024-01-01"})
        await store.add_performance_review({"internId": "i1", "rating": 4, "lastReview": "2024-02-01"})
        for status in ("Present", "Half Day", "Absent", "Present"):
            await store.add_attendance({"internId": "i1", "date": "2024-03-20", "status": status})
        return store

    return asyncio.run(scenario())


def test_intern_dashboard(workspace) -> None:
    store = seeded(workspace)
    intern = AppUser(id="i1", email="ann@x.com", role="intern", name="Ann", uid="u1")
    summary = dashboard.intern_dashboard(store, intern)
    assert summary["active_tasks"] == 2
    assert summary["completed_tasks"] == 1
    assert summary["rating"] == 4
    assert summary["attendance_rate"] == 62.5
    assert [t.title for t in summary["upcoming_tasks"]] == ["b", "a"]


def test_admin_dashboard_and_board(workspace) -> None:
    store = seeded(workspace)
    summary = dashboard.admin_dashboard(store, today="2024-03-20")
    assert summary["tasks_by_status"] == {"To Do": 2, "In Progress": 1, "Completed": 1}
    assert summary["average_rating"] == 3.5
    assert summary["present_today"] == 2

    intern = AppUser(id="i2", email="b@x.com", role="intern", name="Bob", uid="u2")
    board = dashboard.task_board(store, intern)
    assert list(board) == ["To Do", "In Progress", "Completed"]
    assert [t.title for t in board["To Do"]] == ["d"]
    assert board["Completed"] == []
    assert len(dashboard.visible_tasks(store, workspace.current_user)) == 4


def test_attendance_rate_without_records(workspace) -> None:
    assert dashboard.attendance_rate(workspace.store, "nobody") is None


def test_calendar_board() -> None:
    board = CalendarBoard()
    meeting = board.add_event(title="Sync", date="2024-03-20", time="10:00")
    board.add_event(title="Old", date="2024-01-01")
    board.add_event(title="Deadline", date="2024-03-22", type="deadline")
    assert [e.title for e in board.events_on("2024-03-20")] == ["Sync"]
    assert [e.title for e in board.upcoming(today="2024-03-20")] == ["Sync", "Deadline"]

    moved = board.update_event(meeting.id, date="2024-03-23")
    assert moved.date == "2024-03-23"
    assert board.update_event("missing", title="x") is None
    assert board.delete_event(meeting.id)
    assert not board.delete_event(meeting.id)


def test_month_grid_starts_on_sunday() -> None:
    grid = CalendarBoard.month_grid(2024, 3)
    # 1 March 2024 was a Friday.
    assert grid[:5] == [None] * 5
    assert grid[5] == date(2024, 3, 1)
    assert grid[-1] == date(2024, 3, 31)
