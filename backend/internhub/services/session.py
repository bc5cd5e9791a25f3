"""Wire auth sessions to the resolver and the state store."""

from __future__ import annotations

import logging
import secrets
from typing import Dict, Optional, Tuple

from ..auth.provider import AuthUser, IdentityProvider
from ..core.config import Settings
from ..core.errors import AuthError
from ..core.notifications import Notifier
from ..domain.models import AppUser, OperationResult
from ..gateway.base import DocumentStore
from ..gateway.services import Gateways
from .calendar import CalendarBoard
from .identity import IdentityResolver
from .messaging import MessagingService
from .state import AppStateStore

logger = logging.getLogger(__name__)


class Workspace:
    """Everything one signed-in user works with, built around one auth session.

    Identity changes on the session drive the store lifecycle:
    acquired and resolved -> ``attach``; lost or unresolvable -> ``detach``.
    """

    def __init__(
        self,
        identity: IdentityProvider,
        documents: DocumentStore,
        settings: Settings,
        notifier: Optional[Notifier] = None,
        session_name: str = "primary",
    ) -> None:
        self.identity = identity
        self.documents = documents
        self.settings = settings
        self.notifier = notifier or Notifier()
        self.gateways = Gateways.build(documents, identity)
        self.resolver = IdentityResolver(self.gateways.interns, settings)
        self.store = AppStateStore(self.gateways, self.notifier, settings)
        self.messaging = MessagingService(self.store)
        self.calendar = CalendarBoard()
        self.session = identity.session(session_name)
        self._unsubscribe = self.session.on_change(self._on_auth_change)

    @property
    def current_user(self) -> Optional[AppUser]:
        return self.store.user

    async def _on_auth_change(self, auth_user: Optional[AuthUser]) -> None:
        if auth_user is None:
            self.store.detach()
            return
        user = await self.resolver.resolve(auth_user)
        if user is None:
            self.store.detach()
            return
        logger.info("Resolved %s as %s %s", auth_user.email, user.role, user.id)
        await self.store.attach(user)

    async def login(self, email: str, password: str) -> OperationResult:
        try:
            await self.session.sign_in(email, password)
        except AuthError as exc:
            logger.warning("Login failed for %s: %s", email, exc.message)
            return OperationResult.fail(exc.message)
        if self.current_user is None:
            return OperationResult.fail("Account is not linked to an intern record")
        return OperationResult.ok(self.current_user.id)

    async def logout(self) -> OperationResult:
        try:
            await self.session.sign_out()
        except AuthError as exc:
            logger.error("Logout error: %s", exc.message)
            return OperationResult.fail(exc.message)
        return OperationResult.ok()

    async def update_password(self, new_password: str, confirm_password: str) -> OperationResult:
        if new_password != confirm_password:
            return OperationResult.fail("New passwords do not match")
        if len(new_password) < self.settings.MIN_PASSWORD_LENGTH:
            return OperationResult.fail(
                f"Password must be at least {self.settings.MIN_PASSWORD_LENGTH} characters long"
            )
        if self.session.current_user is None:
            return OperationResult.fail("No user logged in")
        try:
            await self.session.update_password(new_password)
        except AuthError as exc:
            logger.error("Password update error: %s", exc.message)
            return OperationResult.fail(exc.message)
        self.notifier.success("Password updated successfully")
        return OperationResult.ok()

    async def end(self) -> None:
        """Release the auth session and the cache; the document store stays open."""
        self._unsubscribe()
        await self.identity.discard(self.session.name)
        await self.store.flush()
        self.store.detach()

    async def close(self) -> None:
        await self.end()
        await self.documents.close()


class WorkspaceRegistry:
    """Signed-in workspaces keyed by session token.

    Every workspace shares the registry's identity provider and document
    store but owns its auth session, cache and notices, so one client's
    sign-in never leaks into another's requests.
    """

    def __init__(self, identity: IdentityProvider, documents: DocumentStore, settings: Settings) -> None:
        self.identity = identity
        self.documents = documents
        self.settings = settings
        self._workspaces: Dict[str, Workspace] = {}

    def open(self, session_name: str = "primary") -> Workspace:
        return Workspace(self.identity, self.documents, self.settings, session_name=session_name)

    def get(self, token: str) -> Optional[Workspace]:
        return self._workspaces.get(token)

    def __len__(self) -> int:
        return len(self._workspaces)

    async def login(self, email: str, password: str) -> Tuple[Optional[str], Workspace, OperationResult]:
        """Sign in on a fresh workspace; the token is ``None`` when sign-in fails."""
        token = secrets.token_urlsafe(32)
        ws = self.open(token)
        result = await ws.login(email, password)
        if not result.success:
            await ws.end()
            return None, ws, result
        self._workspaces[token] = ws
        return token, ws, result

    async def logout(self, token: str) -> OperationResult:
        ws = self._workspaces.pop(token, None)
        if ws is None:
            return OperationResult.fail("No user logged in")
        result = await ws.logout()
        await ws.end()
        return result

    async def close(self) -> None:
        for ws in list(self._workspaces.values()):
            await ws.end()
        self._workspaces.clear()
        await self.documents.close()
