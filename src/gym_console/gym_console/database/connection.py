from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from supabase import AsyncClient, Client, acreate_client, create_client


@dataclass
class SupabaseConfig:
    url: str
    key: str
    attendance_table: str = "attendance"
    users_table: str = "gym_users"


class SupabaseConnection:
    """Singleton-like Supabase client factory.

    The sync client serves table reads/writes; the async client is created
    lazily and only used for realtime channels.
    """

    _instance: Optional["SupabaseConnection"] = None

    def __init__(self, config: SupabaseConfig):
        if not config.url or not config.key:
            raise RuntimeError("SUPABASE_URL / SUPABASE_KEY are not configured")
        self._config = config
        self._client: Optional[Client] = None
        self._async_client: Optional[AsyncClient] = None

    @property
    def config(self) -> SupabaseConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: SupabaseConfig) -> "SupabaseConnection":
        if cls._instance is None:
            cls._instance = SupabaseConnection(config)
        return cls._instance

    def client(self) -> Client:
        if self._client is None:
            self._client = create_client(self._config.url, self._config.key)
        return self._client

    async def async_client(self) -> AsyncClient:
        if self._async_client is None:
            self._async_client = await acreate_client(self._config.url, self._config.key)
        return self._async_client
