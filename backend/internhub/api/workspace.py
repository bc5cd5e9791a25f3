"""Theme preference, session calendar and pending notices."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from ..domain.models import AppUser, CalendarEvent
from ..domain.schemas import CalendarEventIn, NoticeOut, ThemeUpdate
from ..services.session import Workspace
from .deps import current_user, get_workspace

router = APIRouter(tags=["workspace"])


@router.get("/settings/theme")
async def get_theme(
    ws: Workspace = Depends(get_workspace), user: AppUser = Depends(current_user)
) -> ThemeUpdate:
    return ThemeUpdate(theme=ws.store.theme)


@router.put("/settings/theme")
async def put_theme(
    body: ThemeUpdate, ws: Workspace = Depends(get_workspace), user: AppUser = Depends(current_user)
) -> ThemeUpdate:
    ws.store.set_theme(body.theme)
    ws.notifier.success(f"Theme changed to {body.theme}")
    return ThemeUpdate(theme=ws.store.theme)


@router.get("/calendar/events")
async def list_events(
    day: Optional[str] = None,
    ws: Workspace = Depends(get_workspace),
    user: AppUser = Depends(current_user),
) -> List[CalendarEvent]:
    if day:
        return ws.calendar.events_on(day)
    return ws.calendar.events


@router.get("/calendar/upcoming")
async def upcoming_events(
    ws: Workspace = Depends(get_workspace), user: AppUser = Depends(current_user)
) -> List[CalendarEvent]:
    return ws.calendar.upcoming()


@router.post("/calendar/events", status_code=201)
async def add_event(
    body: CalendarEventIn, ws: Workspace = Depends(get_workspace), user: AppUser = Depends(current_user)
) -> CalendarEvent:
    return ws.calendar.add_event(**body.model_dump())


@router.put("/calendar/events/{event_id}")
async def update_event(
    event_id: str,
    body: CalendarEventIn,
    ws: Workspace = Depends(get_workspace),
    user: AppUser = Depends(current_user),
) -> CalendarEvent:
    event = ws.calendar.update_event(event_id, **body.model_dump())
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.delete("/calendar/events/{event_id}")
async def delete_event(
    event_id: str, ws: Workspace = Depends(get_workspace), user: AppUser = Depends(current_user)
) -> dict:
    if not ws.calendar.delete_event(event_id):
        raise HTTPException(status_code=404, detail="Event not found")
    return {"status": "ok"}


@router.get("/notifications")
async def notifications(
    ws: Workspace = Depends(get_workspace), user: AppUser = Depends(current_user)
) -> List[NoticeOut]:
    return [NoticeOut(level=n.level, message=n.message) for n in ws.notifier.drain()]
