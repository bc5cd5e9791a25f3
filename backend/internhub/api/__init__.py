"""HTTP routers."""

from fastapi import APIRouter

from . import attendance, auth, chats, dashboard, health, interns, performance, tasks, workspace

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(interns.router)
api_router.include_router(tasks.router)
api_router.include_router(performance.router)
api_router.include_router(attendance.router)
api_router.include_router(chats.router)
api_router.include_router(dashboard.router)
api_router.include_router(workspace.router)
