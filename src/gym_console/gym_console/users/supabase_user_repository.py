from __future__ import annotations

from typing import Sequence

from ..core.exceptions import RemoteWriteError, TransientFetchError
from ..database.connection import SupabaseConnection
from ..database.supabase_base import count_of, remote_call, rows_of
from .model import GymUser, ProfileUpdate
from .repository import UserRepository

USER_COLUMNS = "id,email,full_name,phone,role,created_at"


class SupabaseUserRepository(UserRepository):
    def __init__(self, conn: SupabaseConnection):
        self._conn = conn
        self._table = conn.config.users_table

    def _query(self):
        return self._conn.client().table(self._table)

    def list_members(self) -> Sequence[GymUser]:
        with remote_call(TransientFetchError, "Loading users"):
            res = self._query().select(USER_COLUMNS).order("created_at", desc=True).execute()
        return [GymUser.from_row(r) for r in rows_of(res)]

    def count(self) -> int:
        with remote_call(TransientFetchError, "Counting users"):
            res = self._query().select("id", count="exact", head=True).execute()
        return count_of(res)

    def update(self, user_id: str, profile: ProfileUpdate) -> None:
        with remote_call(RemoteWriteError, f"Updating user {user_id}"):
            self._query().update(profile.to_payload()).eq("id", user_id).execute()
