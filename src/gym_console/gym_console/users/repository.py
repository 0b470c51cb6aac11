from __future__ import annotations

from typing import Protocol, Sequence

from .model import GymUser, ProfileUpdate


class UserRepository(Protocol):
    """Repository interface for gym members. Accounts themselves are created by auth."""

    def list_members(self) -> Sequence[GymUser]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def update(self, user_id: str, profile: ProfileUpdate) -> None:
        """Raises RemoteWriteError when the row cannot be updated."""
        raise NotImplementedError
