"""Performance review endpoints."""

from typing import List

from fastapi import APIRouter, Depends

from ..domain.models import AppUser, Performance
from ..domain.schemas import OperationOut, PerformanceCreate, PerformanceUpdate
from ..services.session import Workspace
from .deps import admin_user, current_user, ensure, get_workspace

router = APIRouter(prefix="/performance", tags=["performance"])


@router.get("")
async def list_reviews(
    ws: Workspace = Depends(get_workspace), user: AppUser = Depends(current_user)
) -> List[Performance]:
    if user.is_admin:
        return ws.store.performances
    return [p for p in ws.store.performances if p.intern_id == user.id]


@router.post("", status_code=201)
async def add_review(
    body: PerformanceCreate,
    ws: Workspace = Depends(get_workspace),
    user: AppUser = Depends(admin_user),
) -> OperationOut:
    return ensure(await ws.store.add_performance_review(body))


@router.patch("/{review_id}")
async def update_review(
    review_id: str,
    body: PerformanceUpdate,
    ws: Workspace = Depends(get_workspace),
    user: AppUser = Depends(admin_user),
) -> OperationOut:
    return ensure(await ws.store.update_performance_review(review_id, body))


@router.delete("/{review_id}")
async def delete_review(
    review_id: str, ws: Workspace = Depends(get_workspace), user: AppUser = Depends(admin_user)
) -> OperationOut:
    return ensure(await ws.store.delete_performance_review(review_id))
