"""Sign-in, sign-out and password endpoints."""

from fastapi import APIRouter, Depends

from ..domain.models import AppUser
from ..domain.schemas import LoginRequest, OperationOut, PasswordChange, SessionOut
from ..services.session import Workspace, WorkspaceRegistry
from .deps import auth_token, current_user, ensure, get_registry, get_workspace

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
async def login(body: LoginRequest, registry: WorkspaceRegistry = Depends(get_registry)) -> SessionOut:
    token, ws, result = await registry.login(body.email, body.password)
    ensure(result)
    return SessionOut(token=token, user=ws.current_user)


@router.post("/logout")
async def logout(
    token: str = Depends(auth_token), registry: WorkspaceRegistry = Depends(get_registry)
) -> OperationOut:
    return ensure(await registry.logout(token))


@router.post("/password")
async def change_password(
    body: PasswordChange,
    ws: Workspace = Depends(get_workspace),
    user: AppUser = Depends(current_user),
) -> OperationOut:
    return ensure(await ws.update_password(body.new_password, body.confirm_password))


@router.get("/me")
async def me(user: AppUser = Depends(current_user)) -> AppUser:
    return user
