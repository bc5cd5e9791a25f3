"""Session-local calendar of meetings, deadlines, trainings and interviews.

Events are not persisted; they live as long as the workspace does.
"""

from __future__ import annotations

import calendar
import uuid
from dataclasses import replace
from datetime import date
from typing import Any, Dict, List, Optional

from ..core import clock
from ..domain.models import CalendarEvent


class CalendarBoard:
    def __init__(self) -> None:
        self._events: Dict[str, CalendarEvent] = {}

    @property
    def events(self) -> List[CalendarEvent]:
        return list(self._events.values())

    def add_event(self, **fields: Any) -> CalendarEvent:
        event = CalendarEvent(id=uuid.uuid4().hex[:12], **fields)
        self._events[event.id] = event
        return event

    def update_event(self, event_id: str, **fields: Any) -> Optional[CalendarEvent]:
        event = self._events.get(event_id)
        if event is None:
            return None
        event = replace(event, **fields)
        self._events[event_id] = event
        return event

    def delete_event(self, event_id: str) -> bool:
        return self._events.pop(event_id, None) is not None

    def events_on(self, day: str) -> List[CalendarEvent]:
        return [e for e in self._events.values() if e.date == day]

    def upcoming(self, limit: int = 5, today: Optional[str] = None) -> List[CalendarEvent]:
        today = today or clock.today()
        pending = [e for e in self._events.values() if e.date >= today]
        pending.sort(key=lambda e: (e.date, e.time))
        return pending[:limit]

    @staticmethod
    def month_grid(year: int, month: int) -> List[Optional[date]]:
        """Days of the month, padded with ``None`` so weeks start on Sunday."""
        first_weekday, days = calendar.monthrange(year, month)
        padding = (first_weekday + 1) % 7
        grid: List[Optional[date]] = [None] * padding
        grid.extend(date(year, month, d) for d in range(1, days + 1))
        return grid
