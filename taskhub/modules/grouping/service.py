import logging
from typing import List
from uuid import UUID

from taskhub.core.errors import NotFoundError
from taskhub.database import Database

logger = logging.getLogger(__name__)


class GroupItemService:
    """
    Many-to-many membership of items in groups.

    The same class backs project membership (group=project, item=user) and
    task assignment (group=task, item=user); only the table differs.
    """

    def __init__(self, database: Database, table: str):
        self.table = table
        self.group_items = database.collection(table)

    async def add_group_item(self, group: UUID, item: UUID) -> dict:
        await self.group_items.create_one({"group": group, "item": item})
        return {"msg": "Added item to group!"}

    async def remove_group_item(self, group: UUID, item: UUID) -> dict:
        await self.group_items.delete_many({"group": group, "item": item})
        return {"msg": "Removed item from group!"}

    async def get_items_in_group(self, group: UUID) -> List[UUID]:
        docs = await self.group_items.read_many({"group": group}, projection=["item"])
        return [UUID(str(doc["item"])) for doc in docs]

    async def get_groups_for_item(self, item: UUID) -> List[UUID]:
        docs = await self.group_items.read_many({"item": item}, projection=["group"])
        return [UUID(str(doc["group"])) for doc in docs]

    async def delete_all_items_in_group(self, group: UUID) -> dict:
        deleted = await self.group_items.delete_many({"group": group})
        logger.info(f"Deleted {deleted} {self.table} rows for group {group}")
        return {"msg": "Deleted all instances of group!"}

    async def delete_item_from_all_groups(self, item: UUID) -> dict:
        deleted = await self.group_items.delete_many({"item": item})
        logger.info(f"Deleted {deleted} {self.table} rows for item {item}")
        return {"msg": "Deleted all instances of item!"}

    async def assert_item_in_group(self, group: UUID, item: UUID):
        if await self.group_items.read_one({"group": group, "item": item}) is None:
            raise NotFoundError(f"Item {item} not in group {group}!")
