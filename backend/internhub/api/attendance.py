"""Attendance log endpoints."""

from typing import List

from fastapi import APIRouter, Depends

from ..domain.models import AppUser, Attendance
from ..domain.schemas import AttendanceCreate, AttendanceUpdate, OperationOut
from ..services.session import Workspace
from .deps import admin_user, current_user, ensure, get_workspace

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.get("")
async def list_attendance(
    ws: Workspace = Depends(get_workspace), user: AppUser = Depends(current_user)
) -> List[Attendance]:
    if user.is_admin:
        return ws.store.attendance
    return ws.store.get_intern_attendance(user.id)


@router.post("", status_code=201)
async def mark_attendance(
    body: AttendanceCreate,
    ws: Workspace = Depends(get_workspace),
    user: AppUser = Depends(admin_user),
) -> OperationOut:
    return ensure(await ws.store.add_attendance(body))


@router.patch("/{record_id}")
async def update_attendance(
    record_id: str,
    body: AttendanceUpdate,
    ws: Workspace = Depends(get_workspace),
    user: AppUser = Depends(admin_user),
) -> OperationOut:
    return ensure(await ws.store.update_attendance(record_id, body))


@router.delete("/{record_id}")
async def delete_attendance(
    record_id: str, ws: Workspace = Depends(get_workspace), user: AppUser = Depends(admin_user)
) -> OperationOut:
    return ensure(await ws.store.delete_attendance(record_id))
