"""Shared fixtures: a workspace on the memory store with a seeded admin login."""

from pathlib import Path
import sys
from typing import Set, Tuple

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))
from internhub.core.config import Settings  # noqa: E402
from internhub.core.errors import DocumentStoreError  # noqa: E402
from internhub.gateway.memory import MemoryDocumentStore  # noqa: E402
from internhub.main import build_registry  # noqa: E402

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "secret1"


class FlakyStore(MemoryDocumentStore):
    """Memory store that fails chosen ``(method, collection)`` pairs."""

    def __init__(self) -> None:
        super().__init__()
        self.failing: Set[Tuple[str, str]] = set()

    def _maybe_fail(self, method: str, collection: str) -> None:
        if (method, collection) in self.failing:
            raise DocumentStoreError(f"{method} on {collection} unavailable")

    async def add(self, collection, data):
        self._maybe_fail("add", collection)
        return await super().add(collection, data)

    async def set(self, collection, doc_id, data, merge=False):
        self._maybe_fail("set", collection)
        return await super().set(collection, doc_id, data, merge=merge)

    async def get_all(self, collection):
        self._maybe_fail("get_all", collection)
        return await super().get_all(collection)

    async def update(self, collection, doc_id, data):
        self._maybe_fail("update", collection)
        return await super().update(collection, doc_id, data)

    async def delete(self, collection, doc_id):
        self._maybe_fail("delete", collection)
        return await super().delete(collection, doc_id)


@pytest.fixture
def cfg() -> Settings:
    return Settings(
        ADMIN_EMAIL=ADMIN_EMAIL,
        ADMIN_NAME="Admin",
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        TZ="UTC",
    )


@pytest.fixture
def documents() -> FlakyStore:
    return FlakyStore()


@pytest.fixture
def workspace(cfg, documents):
    return build_registry(cfg, documents).open()
