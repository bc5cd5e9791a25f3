"""Shared FastAPI dependencies.

Clients sign in through ``POST /auth/login`` and send the returned token
in the ``X-Auth-Token`` header; every other protected route resolves its
workspace from that header.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from ..domain.models import AppUser, OperationResult
from ..domain.schemas import OperationOut
from ..services.session import Workspace, WorkspaceRegistry


def get_registry(request: Request) -> WorkspaceRegistry:
    return request.app.state.workspaces


def auth_token(x_auth_token: Optional[str] = Header(None)) -> str:
    if not x_auth_token:
        raise HTTPException(status_code=401, detail="Missing auth token")
    return x_auth_token


def get_workspace(
    token: str = Depends(auth_token), registry: WorkspaceRegistry = Depends(get_registry)
) -> Workspace:
    ws = registry.get(token)
    if ws is None:
        raise HTTPException(status_code=401, detail="Invalid session")
    return ws


def current_user(ws: Workspace = Depends(get_workspace)) -> AppUser:
    if ws.current_user is None:
        raise HTTPException(status_code=401, detail="Not signed in")
    return ws.current_user


def admin_user(user: AppUser = Depends(current_user)) -> AppUser:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin only")
    return user


def ensure(result: OperationResult) -> OperationOut:
    """Turn a failed service result into a 400 response."""
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error)
    return OperationOut(**asdict(result))
