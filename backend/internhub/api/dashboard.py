"""Role-aware dashboard summary."""

from fastapi import APIRouter, Depends

from ..domain.models import AppUser
from ..services import dashboard
from ..services.session import Workspace
from .deps import current_user, get_workspace

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard")
async def summary(
    ws: Workspace = Depends(get_workspace), user: AppUser = Depends(current_user)
) -> dict:
    if user.is_admin:
        return dashboard.admin_dashboard(ws.store)
    return dashboard.intern_dashboard(ws.store, user)
