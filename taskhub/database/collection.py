"""
Generic document access over a single Supabase table.

Every row carries ``id``, ``created_at`` and ``updated_at``. Filters are plain
field -> value maps:

- a ``None`` value matches NULL
- a list, tuple or set value matches any of its members
- anything else is an equality match

UUIDs and datetimes are encoded to strings before they leave the process, so
callers can pass native values throughout.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional
from uuid import UUID, uuid4

if TYPE_CHECKING:
    from taskhub.database.supabase_client import Database

Filter = Dict[str, Any]

PROTECTED_FIELDS = ("id", "created_at")


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def encode_value(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: encode_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [encode_value(v) for v in value]
    return value


class DocCollection:
    def __init__(self, database: "Database", name: str):
        self.database = database
        self.name = name

    def _table(self):
        return self.database.client.table(self.name)

    @staticmethod
    def _apply_filter(query, filter: Optional[Filter]):
        for field, value in (filter or {}).items():
            if value is None:
                query = query.is_(field, "null")
            elif isinstance(value, (list, tuple, set)):
                query = query.in_(field, encode_value(value))
            else:
                query = query.eq(field, encode_value(value))
        return query

    async def create_one(self, doc: Dict[str, Any]) -> UUID:
        """Insert a document and return its generated id."""
        _id = uuid4()
        now = _utcnow()
        row = {k: encode_value(v) for k, v in doc.items() if k not in PROTECTED_FIELDS}
        row.update({"id": str(_id), "created_at": now, "updated_at": now})
        await self._table().insert(row).execute()
        return _id

    async def read_one(self, filter: Filter) -> Optional[Dict[str, Any]]:
        query = self._apply_filter(self._table().select("*"), filter)
        result = await query.limit(1).execute()
        return result.data[0] if result.data else None

    async def read_many(
        self,
        filter: Optional[Filter] = None,
        projection: Optional[Iterable[str]] = None,
    ) -> List[Dict[str, Any]]:
        """Read matching documents, newest first. ``projection`` limits the returned fields (``id`` is always kept)."""
        if projection:
            columns = ",".join(["id", *[f for f in projection if f != "id"]])
        else:
            columns = "*"
        query = self._apply_filter(self._table().select(columns), filter)
        result = await query.order("created_at", desc=True).execute()
        return result.data or []

    async def partial_update_one(self, filter: Filter, update: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Update the given fields of the first matching document; ``None`` values are written as NULL."""
        doc = await self.read_one(filter)
        if doc is None:
            return None
        values = {k: encode_value(v) for k, v in update.items() if k not in PROTECTED_FIELDS}
        values["updated_at"] = _utcnow()
        result = await self._table().update(values).eq("id", doc["id"]).execute()
        return result.data[0] if result.data else None

    async def pop_one(self, filter: Filter) -> Optional[Dict[str, Any]]:
        """Delete the first matching document and return it."""
        doc = await self.read_one(filter)
        if doc is None:
            return None
        await self._table().delete().eq("id", doc["id"]).execute()
        return doc

    async def delete_one(self, filter: Filter) -> bool:
        return await self.pop_one(filter) is not None

    async def delete_many(self, filter: Filter) -> int:
        if not filter:
            raise ValueError(f"Refusing to delete every row of {self.name} without a filter")
        result = await self._apply_filter(self._table().delete(), filter).execute()
        return len(result.data or [])
