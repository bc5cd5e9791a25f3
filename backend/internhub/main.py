"""Application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .api import api_router
from .auth.local import LocalIdentityProvider
from .core.config import Settings, settings
from .core.logging import RequestIDMiddleware, init_logging
from .gateway.base import DocumentStore
from .gateway.memory import MemoryDocumentStore
from .services.session import WorkspaceRegistry

logger = logging.getLogger(__name__)


def build_document_store(cfg: Settings) -> DocumentStore:
    if cfg.STORE_BACKEND == "mongo":
        from .gateway.mongo import MongoDocumentStore

        return MongoDocumentStore(cfg.DATABASE_URL, cfg.DATABASE_NAME)
    return MemoryDocumentStore()


def build_registry(cfg: Settings, documents: Optional[DocumentStore] = None) -> WorkspaceRegistry:
    """Assemble the local identity provider with a seeded admin login."""
    identity = LocalIdentityProvider(min_password_length=cfg.MIN_PASSWORD_LENGTH)
    identity.register(cfg.ADMIN_EMAIL, cfg.ADMIN_PASSWORD)
    return WorkspaceRegistry(identity, documents or build_document_store(cfg), cfg)


def create_app(cfg: Optional[Settings] = None, registry: Optional[WorkspaceRegistry] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    cfg = cfg or settings
    init_logging(cfg.LOG_LEVEL)
    workspaces = registry or build_registry(cfg)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("InternHub starting with %s store", cfg.STORE_BACKEND)
        yield
        await workspaces.close()

    app = FastAPI(title="InternHub", lifespan=lifespan)
    app.state.workspaces = workspaces
    app.add_middleware(RequestIDMiddleware)
    app.include_router(api_router)
    return app


app = create_app()


def run() -> None:
    import os

    import uvicorn

    uvicorn.run("internhub.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")))


if __name__ == "__main__":
    run()
