import logging
from typing import Iterable, List, Optional
from uuid import UUID

from taskhub.database import Database
from taskhub.modules.tasking.schemas import TaskDoc

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, database: Database, table: str = "tasks"):
        self.tasks = database.collection(table)

    async def create(self, description: str, project: UUID, assignee: Optional[UUID] = None) -> dict:
        _id = await self.tasks.create_one({
            "description": description,
            "project": project,
            "assignee": assignee,
            "completion": False,
        })
        logger.info(f"Created task {_id} in project {project}")
        return {"msg": "Task successfully created!", "task": await self.get_task(_id)}

    async def delete(self, _id: UUID) -> dict:
        await self.tasks.delete_one({"id": _id})
        return {"msg": "Task deleted successfully!"}

    async def delete_tasks_for_project(self, project: UUID) -> dict:
        deleted = await self.tasks.delete_many({"project": project})
        logger.info(f"Deleted {deleted} tasks of project {project}")
        return {"msg": "Tasks for project successfully deleted."}

    async def update_description(self, _id: UUID, description: str) -> dict:
        await self.tasks.partial_update_one({"id": _id}, {"description": description})
        return {"msg": "Task description successfully updated!"}

    async def update_assignee(self, _id: UUID, assignee: UUID) -> dict:
        await self.tasks.partial_update_one({"id": _id}, {"assignee": assignee})
        return {"msg": "Task assignee successfully updated!"}

    async def unassign_task(self, _id: UUID) -> dict:
        """Clear the assignee; an unassigned task stores NULL, never a placeholder id"""
        await self.tasks.partial_update_one({"id": _id}, {"assignee": None})
        return {"msg": "Task successfully unassigned!"}

    async def set_completion_status(self, _id: UUID, completion: bool) -> dict:
        await self.tasks.partial_update_one({"id": _id}, {"completion": completion})
        if completion:
            return {"msg": "Task marked as completed!"}
        return {"msg": "Task marked incomplete."}

    async def get_task(self, _id: UUID) -> Optional[TaskDoc]:
        doc = await self.tasks.read_one({"id": _id})
        return TaskDoc(**doc) if doc else None

    async def get_tasks(self, ids: Iterable[UUID]) -> List[TaskDoc]:
        ids = list(ids)
        if not ids:
            return []
        return [TaskDoc(**doc) for doc in await self.tasks.read_many({"id": ids})]

    async def get_all_tasks_for_project(self, project: UUID) -> List[TaskDoc]:
        return [TaskDoc(**doc) for doc in await self.tasks.read_many({"project": project})]

    async def get_all_tasks_for_user(self, assignee: UUID) -> List[TaskDoc]:
        return [TaskDoc(**doc) for doc in await self.tasks.read_many({"assignee": assignee})]
