"""In-process identity provider for development and tests."""

from __future__ import annotations

import logging
import secrets
import uuid
from dataclasses import dataclass
from hashlib import sha256
from typing import Dict

from ..core.errors import AuthError
from .provider import AuthSession, AuthUser, IdentityProvider

logger = logging.getLogger(__name__)


def hash_password(raw: str, salt: str) -> str:
    return sha256(f"{salt}:{raw}".encode()).hexdigest()


@dataclass
class _Account:
    uid: str
    email: str
    salt: str
    password_hash: str

    def check(self, raw: str) -> bool:
        return secrets.compare_digest(self.password_hash, hash_password(raw, self.salt))


class LocalAuthSession(AuthSession):
    def __init__(self, name: str, provider: "LocalIdentityProvider") -> None:
        super().__init__(name)
        self._provider = provider

    async def sign_in(self, email: str, password: str) -> AuthUser:
        account = self._provider._accounts.get(email.strip().lower())
        if account is None or not account.check(password):
            raise AuthError("Invalid email or password")
        user = AuthUser(uid=account.uid, email=account.email)
        await self._set_user(user)
        logger.info("Session %s signed in %s", self.name, account.email)
        return user

    async def sign_out(self) -> None:
        await self._set_user(None)

    async def create_account(self, email: str, password: str) -> AuthUser:
        account = self._provider.register(email, password)
        user = AuthUser(uid=account.uid, email=account.email)
        await self._set_user(user)
        return user

    async def update_password(self, new_password: str) -> None:
        if self.current_user is None:
            raise AuthError("No user logged in")
        self._provider.set_password(self.current_user.email, new_password)


class LocalIdentityProvider(IdentityProvider):
    """Accounts live in memory, keyed by lower-cased email."""

    def __init__(self, min_password_length: int = 6) -> None:
        super().__init__()
        self.min_password_length = min_password_length
        self._accounts: Dict[str, _Account] = {}

    def _new_session(self, name: str) -> AuthSession:
        return LocalAuthSession(name, self)

    def _check_password(self, password: str) -> None:
        if len(password) < self.min_password_length:
            raise AuthError(
                f"Password should be at least {self.min_password_length} characters"
            )

    def register(self, email: str, password: str) -> _Account:
        key = email.strip().lower()
        if not key:
            raise AuthError("Email is required")
        if key in self._accounts:
            raise AuthError("Email already in use")
        self._check_password(password)
        salt = secrets.token_hex(8)
        account = _Account(
            uid=uuid.uuid4().hex,
            email=email.strip(),
            salt=salt,
            password_hash=hash_password(password, salt),
        )
        self._accounts[key] = account
        logger.info("Registered login identity %s", account.email)
        return account

    def set_password(self, email: str, password: str) -> None:
        account = self._accounts.get(email.strip().lower())
        if account is None:
            raise AuthError("User not found")
        self._check_password(password)
        account.salt = secrets.token_hex(8)
        account.password_hash = hash_password(password, account.salt)
