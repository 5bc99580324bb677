from typing import Optional

from supabase import AsyncClient, acreate_client

from taskhub.config import settings
from taskhub.database.collection import DocCollection


class Database:
    """Holds the Supabase async client used by every collection of the app."""

    def __init__(self, client: Optional[AsyncClient] = None):
        self._client = client

    async def connect(self) -> AsyncClient:
        if self._client is None:
            self._client = await acreate_client(settings.supabase_url, settings.supabase_key)
        return self._client

    @property
    def client(self) -> AsyncClient:
        if self._client is None:
            raise RuntimeError("Database is not connected; call connect() first")
        return self._client

    def collection(self, name: str) -> DocCollection:
        return DocCollection(self, name)

    def reset_client(self):
        self._client = None
