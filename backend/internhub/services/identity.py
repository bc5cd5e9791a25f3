"""Map a login identity to an application user with a role."""

from __future__ import annotations

import logging
from typing import Optional

from ..auth.provider import AuthUser
from ..core.config import Settings
from ..core.errors import InternHubError
from ..domain.models import AppUser
from ..gateway.services import InternGateway

logger = logging.getLogger(__name__)


class IdentityResolver:
    """Resolve the signed-in identity to an admin or intern :class:`AppUser`.

    The administrator is recognised by email alone and never looked up.
    Everybody else must own an intern record whose ``uid`` matches; an
    identity without one is an inconsistent state and resolves to ``None``.
    The intern collection is fetched afresh on every call.
    """

    def __init__(self, interns: InternGateway, settings: Settings) -> None:
        self.interns = interns
        self.settings = settings

    def is_admin_email(self, email: str) -> bool:
        return email.strip().lower() == self.settings.ADMIN_EMAIL.strip().lower()

    async def resolve(self, auth_user: Optional[AuthUser]) -> Optional[AppUser]:
        if auth_user is None:
            return None
        if self.is_admin_email(auth_user.email):
            return AppUser(
                id="admin",
                email=auth_user.email,
                role="admin",
                name=self.settings.ADMIN_NAME,
                uid=auth_user.uid,
            )
        try:
            interns = await self.interns.get_all()
        except InternHubError:
            logger.exception("Could not load interns to resolve %s", auth_user.email)
            return None
        for intern in interns:
            if intern.uid == auth_user.uid:
                return AppUser(
                    id=intern.id,
                    email=intern.email,
                    role="intern",
                    name=intern.name,
                    uid=auth_user.uid,
                )
        logger.error("Intern not found in database for identity %s", auth_user.uid)
        return None
