from __future__ import annotations

import logging

from ..common.validators import require_choice, require_email, require_non_empty
from ..core.enums import Role
from ..core.exceptions import RemoteWriteError
from .model import GymUser, ProfileUpdate
from .repository import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """Use cases: admin member list with search, and profile edits.

    Creating and deleting accounts belongs to auth and is not offered here.
    """

    def __init__(self, users: UserRepository):
        self._users = users

    def list(self, search: str = "") -> list[GymUser]:
        """Members newest first, filtered by name, email or phone."""
        return [u for u in self._users.list_members() if u.matches(search)]

    def update_profile(
        self,
        user_id,
        *,
        name: str,
        email: str,
        phone: str = "",
        role: str = Role.MEMBER.value,
    ) -> ProfileUpdate:
        user_id = require_non_empty(user_id, "id")
        profile = ProfileUpdate(
            name=require_non_empty(name, "name"),
            email=require_email(email, "email"),
            phone=(phone or "").strip(),
            role=require_choice(role or Role.MEMBER.value, "role", [r.value for r in Role]),
        )
        try:
            self._users.update(user_id, profile)
        except RemoteWriteError:
            logger.error("Update of user %s failed", user_id)
            raise
        logger.info("Updated user %s", user_id)
        return profile
