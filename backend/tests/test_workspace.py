"""Tests for the sign-in lifecycle and password changes."""

import asyncio

from internhub.main import build_registry

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD


def test_login_attaches_and_logout_detaches(workspace) -> None:
    async def scenario():
        result = await workspace.login(ADMIN_EMAIL, ADMIN_PASSWORD)
        assert result.success and result.id == "admin"
        await workspace.store.add_task({"title": "T", "assignedToId": "i1"})
        assert len(workspace.store.tasks) == 1

        assert (await workspace.logout()).success
        assert workspace.current_user is None
        assert workspace.store.tasks == []

    asyncio.run(scenario())


def test_bad_credentials(workspace) -> None:
    result = asyncio.run(workspace.login(ADMIN_EMAIL, "nope"))
    assert not result.success
    assert result.error == "Invalid email or password"
    assert workspace.current_user is None


def test_identity_without_intern_record_is_not_a_session(workspace) -> None:
    async def scenario():
        workspace.identity.register("orphan@example.com", "pass1234")
        return await workspace.login("orphan@example.com", "pass1234")

    result = asyncio.run(scenario())
    assert not result.success
    assert workspace.current_user is None


def test_intern_logs_in_with_default_password(workspace) -> None:
    async def scenario():
        await workspace.login(ADMIN_EMAIL, ADMIN_PASSWORD)
        await workspace.store.add_intern({"name": "Ann Lee", "email": "ann@x.com"})
        await workspace.logout()
        return await workspace.login("ann@x.com", "intern123")

    result = asyncio.run(scenario())
    assert result.success
    assert workspace.current_user.role == "intern"
    assert workspace.current_user.name == "Ann Lee"


def test_update_password_validation(workspace) -> None:
    async def scenario():
        no_user = await workspace.update_password("abcdef", "abcdef")
        await workspace.login(ADMIN_EMAIL, ADMIN_PASSWORD)
        mismatch = await workspace.update_password("abcdef", "abcdeg")
        short = await workspace.update_password("abc", "abc")
        changed = await workspace.update_password("newpass1", "newpass1")
        await workspace.logout()
        relogin = await workspace.login(ADMIN_EMAIL, "newpass1")
        return no_user, mismatch, short, changed, relogin

    no_user, mismatch, short, changed, relogin = asyncio.run(scenario())
    assert no_user.error == "No user logged in"
    assert mismatch.error == "New passwords do not match"
    assert short.error == "Password must be at least 6 characters long"
    assert changed.success
    assert relogin.success


def test_registry_keeps_one_workspace_per_token(cfg, documents) -> None:
    async def scenario():
        registry = build_registry(cfg, documents)
        admin_token, admin_ws, ok = await registry.login(ADMIN_EMAIL, ADMIN_PASSWORD)
        assert ok.success
        await admin_ws.store.add_intern({"name": "Ann Lee", "email": "ann@x.com"})

        intern_token, intern_ws, ok = await registry.login("ann@x.com", "intern123")
        assert ok.success and intern_token != admin_token
        assert registry.get(admin_token).current_user.role == "admin"
        assert registry.get(intern_token).current_user.name == "Ann Lee"
        assert admin_ws.notifier.peek() and intern_ws.notifier.peek() == []

        failed_token, _, failed = await registry.login(ADMIN_EMAIL, "wrong")
        assert failed_token is None and not failed.success
        assert len(registry) == 2

        assert (await registry.logout(admin_token)).success
        assert registry.get(admin_token) is None
        assert admin_ws.current_user is None
        assert registry.get(intern_token).current_user is not None
        assert (await registry.logout(admin_token)).error == "No user logged in"

        await registry.close()
        return registry

    registry = asyncio.run(scenario())
    assert len(registry) == 0
    assert list(registry.identity._sessions) == []
