"""Identity provider contract.

A provider hands out named :class:`AuthSession` objects. Each session holds
its own signed-in identity, so work done on one session (for example
creating a new account, which signs that account in) never changes what
another session sees. :meth:`IdentityProvider.isolated_session` yields a
throwaway session for exactly that purpose.
"""

from __future__ import annotations

import abc
import logging
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthUser:
    """Identity as the provider knows it.

    Example:
        >>> AuthUser(uid="u1", email="ann.lee@x.com")
    """

    uid: str
    email: str


AuthListener = Callable[[Optional[AuthUser]], Awaitable[None]]


class AuthSession(abc.ABC):
    def __init__(self, name: str) -> None:
        self.name = name
        self.current_user: Optional[AuthUser] = None
        self._listeners: List[AuthListener] = []

    def on_change(self, listener: AuthListener) -> Callable[[], None]:
        """Register an async listener; returns the matching unsubscribe call."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _set_user(self, user: Optional[AuthUser]) -> None:
        self.current_user = user
        for listener in list(self._listeners):
            await listener(user)

    @abc.abstractmethod
    async def sign_in(self, email: str, password: str) -> AuthUser:
        ...

    @abc.abstractmethod
    async def sign_out(self) -> None:
        ...

    @abc.abstractmethod
    async def create_account(self, email: str, password: str) -> AuthUser:
        """Create a login identity and sign it in on this session."""

    @abc.abstractmethod
    async def update_password(self, new_password: str) -> None:
        ...


class IdentityProvider(abc.ABC):
    def __init__(self) -> None:
        self._sessions: Dict[str, AuthSession] = {}

    @abc.abstractmethod
    def _new_session(self, name: str) -> AuthSession:
        ...

    def session(self, name: str = "primary") -> AuthSession:
        if name not in self._sessions:
            self._sessions[name] = self._new_session(name)
        return self._sessions[name]

    async def discard(self, name: str) -> None:
        """Sign the named session out if needed and forget it."""
        session = self._sessions.get(name)
        if session is None:
            return
        try:
            if session.current_user is not None:
                await session.sign_out()
        finally:
            self._sessions.pop(name, None)
            logger.debug("Discarded auth session %s", name)

    @asynccontextmanager
    async def isolated_session(self) -> AsyncIterator[AuthSession]:
        """Yield a fresh session that is signed out and discarded on exit."""
        name = f"isolated-{uuid.uuid4().hex[:8]}"
        session = self.session(name)
        try:
            yield session
        finally:
            await self.discard(name)
