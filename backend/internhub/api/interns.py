"""Intern administration endpoints."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..domain.models import AppUser, Attendance, Intern
from ..domain.schemas import InternCreate, InternUpdate, OperationOut
from ..services.session import Workspace
from .deps import admin_user, current_user, ensure, get_workspace

router = APIRouter(prefix="/interns", tags=["interns"])


@router.get("")
async def list_interns(
    ws: Workspace = Depends(get_workspace), user: AppUser = Depends(current_user)
) -> List[Intern]:
    return ws.store.interns


@router.get("/lookup")
async def lookup(
    email: str, ws: Workspace = Depends(get_workspace), user: AppUser = Depends(current_user)
) -> Intern:
    intern = ws.store.get_intern_by_email(email)
    if intern is None:
        raise HTTPException(status_code=404, detail="Intern not found")
    return intern


@router.get("/{intern_id}/attendance")
async def intern_attendance(
    intern_id: str, ws: Workspace = Depends(get_workspace), user: AppUser = Depends(current_user)
) -> List[Attendance]:
    if not user.is_admin and user.id != intern_id:
        raise HTTPException(status_code=403, detail="Not your attendance")
    return ws.store.get_intern_attendance(intern_id)


@router.post("", status_code=201)
async def add_intern(
    body: InternCreate, ws: Workspace = Depends(get_workspace), user: AppUser = Depends(admin_user)
) -> OperationOut:
    return ensure(await ws.store.add_intern(body))


@router.patch("/{intern_id}")
async def update_intern(
    intern_id: str,
    body: InternUpdate,
    ws: Workspace = Depends(get_workspace),
    user: AppUser = Depends(admin_user),
) -> OperationOut:
    return ensure(await ws.store.update_intern(intern_id, body))


@router.delete("/{intern_id}")
async def delete_intern(
    intern_id: str, ws: Workspace = Depends(get_workspace), user: AppUser = Depends(admin_user)
) -> OperationOut:
    return ensure(await ws.store.delete_intern(intern_id))
