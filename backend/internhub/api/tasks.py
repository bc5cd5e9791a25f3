"""Task board endpoints. Interns see and move only their own tasks."""

from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException

from ..domain.models import AppUser, Task
from ..domain.schemas import OperationOut, TaskCreate, TaskStatusUpdate, TaskUpdate
from ..services import dashboard
from ..services.session import Workspace
from .deps import admin_user, current_user, ensure, get_workspace

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("")
async def list_tasks(
    ws: Workspace = Depends(get_workspace), user: AppUser = Depends(current_user)
) -> List[Task]:
    return dashboard.visible_tasks(ws.store, user)


@router.get("/board")
async def board(
    ws: Workspace = Depends(get_workspace), user: AppUser = Depends(current_user)
) -> Dict[str, List[Task]]:
    return dashboard.task_board(ws.store, user)


@router.post("", status_code=201)
async def add_task(
    body: TaskCreate, ws: Workspace = Depends(get_workspace), user: AppUser = Depends(admin_user)
) -> OperationOut:
    if not body.assigned_to:
        intern = ws.store.get_intern(body.assigned_to_id)
        if intern is not None:
            body = body.model_copy(update={"assigned_to": intern.name})
    return ensure(await ws.store.add_task(body))


@router.patch("/{task_id}")
async def update_task(
    task_id: str,
    body: TaskUpdate,
    ws: Workspace = Depends(get_workspace),
    user: AppUser = Depends(admin_user),
) -> OperationOut:
    return ensure(await ws.store.update_task(task_id, body))


@router.patch("/{task_id}/status")
async def update_status(
    task_id: str,
    body: TaskStatusUpdate,
    ws: Workspace = Depends(get_workspace),
    user: AppUser = Depends(current_user),
) -> OperationOut:
    task = ws.store.get_task(task_id)
    if task is not None and not user.is_admin and task.assigned_to_id != user.id:
        raise HTTPException(status_code=403, detail="Not your task")
    return ensure(await ws.store.update_task_status(task_id, body.status))


@router.delete("/{task_id}")
async def delete_task(
    task_id: str, ws: Workspace = Depends(get_workspace), user: AppUser = Depends(admin_user)
) -> OperationOut:
    return ensure(await ws.store.delete_task(task_id))
