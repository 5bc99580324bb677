import logging
from typing import Iterable, List, Optional
from uuid import UUID

from taskhub.core.errors import ConflictError, NotFoundError, UserCreatorNotMatchError
from taskhub.database import Database
from taskhub.modules.projects.schemas import ProjectDoc

logger = logging.getLogger(__name__)


class ProjectService:
    """Project metadata: a unique name and the user managing it"""

    def __init__(self, database: Database, table: str = "projects"):
        self.projects = database.collection(table)

    async def create(self, creator: UUID, name: str) -> dict:
        await self._assert_project_name_unique(name)
        _id = await self.projects.create_one({"creator": creator, "name": name})
        logger.info(f"User {creator} created project {name} ({_id})")
        return {"msg": "Project successfully created!", "project": await self.get_project(_id)}

    async def get_project(self, _id: UUID) -> Optional[ProjectDoc]:
        doc = await self.projects.read_one({"id": _id})
        return ProjectDoc(**doc) if doc else None

    async def get_project_by_name(self, name: str) -> ProjectDoc:
        doc = await self.projects.read_one({"name": name})
        if doc is None:
            raise NotFoundError(f"Project {name} does not exist!")
        return ProjectDoc(**doc)

    async def get_projects(self, ids: Iterable[UUID]) -> List[ProjectDoc]:
        ids = list(ids)
        if not ids:
            return []
        return [ProjectDoc(**doc) for doc in await self.projects.read_many({"id": ids})]

    async def update_project_name(self, _id: UUID, name: str) -> dict:
        await self._assert_project_name_unique(name)
        await self.projects.partial_update_one({"id": _id}, {"name": name})
        return {"msg": "Project name successfully updated!"}

    async def update_project_creator(self, _id: UUID, creator: UUID) -> dict:
        # Membership of the new creator is checked by the caller
        await self.projects.partial_update_one({"id": _id}, {"creator": creator})
        return {"msg": "Project manager successfully updated!"}

    async def delete_project(self, _id: UUID) -> dict:
        await self.projects.delete_one({"id": _id})
        logger.info(f"Deleted project {_id}")
        return {"msg": "Project successfully deleted!"}

    async def assert_user_is_creator(self, _id: UUID, user: UUID):
        project = await self.get_project(_id)
        if project is None:
            raise NotFoundError(f"Project {_id} does not exist!")
        if project.creator != user:
            raise UserCreatorNotMatchError(user, _id)

    async def _assert_project_name_unique(self, name: str):
        if await self.projects.read_one({"name": name}):
            raise ConflictError(f"Project with name {name} already exists! Please choose a different name.")
