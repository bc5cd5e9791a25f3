"""Health check endpoints."""

from fastapi import APIRouter, Depends

from ..services.session import WorkspaceRegistry
from .deps import get_registry

router = APIRouter()


@router.get("/health")
async def health(registry: WorkspaceRegistry = Depends(get_registry)) -> dict[str, str]:
    """Return service health and which document store backs it."""
    return {"status": "ok", "store": registry.settings.STORE_BACKEND}
