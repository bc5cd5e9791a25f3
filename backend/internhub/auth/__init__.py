"""Identity provider boundary."""

from .local import LocalIdentityProvider
from .provider import AuthSession, AuthUser, IdentityProvider

__all__ = ["AuthSession", "AuthUser", "IdentityProvider", "LocalIdentityProvider"]
