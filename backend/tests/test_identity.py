"""Tests for the identity provider and the identity resolver."""

import asyncio

import pytest

from internhub.auth.local import LocalIdentityProvider
from internhub.auth.provider import AuthUser
from internhub.core.errors import AuthError
from internhub.gateway.memory import MemoryDocumentStore
from internhub.gateway.services import InternGateway
from internhub.services.identity import IdentityResolver


def test_sessions_are_independent() -> None:
    async def scenario():
        provider = LocalIdentityProvider()
        provider.register("boss@example.com", "secret1")
        primary = provider.session()
        await primary.sign_in("Boss@Example.com ", "secret1")

        async with provider.isolated_session() as side:
            created = await side.create_account("new@example.com", "pass1234")
            assert side.current_user == created
            assert primary.current_user.email == "boss@example.com"
        assert side.current_user is None
        assert primary.current_user.email == "boss@example.com"

        with pytest.raises(AuthError):
            await primary.sign_in("boss@example.com", "wrong")
        with pytest.raises(AuthError):
            provider.register("NEW@example.com", "pass1234")
        with pytest.raises(AuthError):
            provider.register("short@example.com", "123")

    asyncio.run(scenario())


def test_isolated_session_signs_out_on_failure() -> None:
    async def scenario():
        provider = LocalIdentityProvider()
        with pytest.raises(RuntimeError):
            async with provider.isolated_session() as side:
                await side.create_account("x@example.com", "pass1234")
                raise RuntimeError("boom")
        assert [name for name in provider._sessions if name.startswith("isolated")] == []

    asyncio.run(scenario())


def test_resolver_roles(cfg) -> None:
    async def scenario():
        store = MemoryDocumentStore()
        provider = LocalIdentityProvider()
        interns = InternGateway(store, provider)
        uid = await interns.create({"name": "Ann Lee", "email": "ann@x.com"}, password="intern123")
        resolver = IdentityResolver(interns, cfg)

        admin = await resolver.resolve(AuthUser(uid="a-uid", email="ADMIN@example.com"))
        intern = await resolver.resolve(AuthUser(uid=uid, email="ann@x.com"))
        stranger = await resolver.resolve(AuthUser(uid="ghost", email="ghost@x.com"))
        nobody = await resolver.resolve(None)
        return uid, admin, intern, stranger, nobody

    uid, admin, intern, stranger, nobody = asyncio.run(scenario())
    assert (admin.id, admin.role, admin.name, admin.uid) == ("admin", "admin", "Admin", "a-uid")
    assert (intern.id, intern.role, intern.name) == (uid, "intern", "Ann Lee")
    assert stranger is None
    assert nobody is None


def test_intern_document_omits_password() -> None:
    async def scenario():
        store = MemoryDocumentStore()
        interns = InternGateway(store, LocalIdentityProvider())
        uid = await interns.create(
            {"name": "Ann", "email": " ann@x.com ", "password": "leak"}, password="intern123"
        )
        return uid, await store.get("interns", uid)

    uid, doc = asyncio.run(scenario())
    assert doc["uid"] == uid
    assert doc["email"] == "ann@x.com"
    assert doc["status"] == "Active"
    assert "password" not in doc
