from pydantic import BaseModel, Field
from uuid import UUID

from taskhub.core.schemas import BaseDoc


class ProjectCreate(BaseModel):
    name: str = Field(min_length=1)


class ProjectNameUpdate(BaseModel):
    id: UUID
    name: str = Field(min_length=1)


class ProjectManagerUpdate(BaseModel):
    id: UUID
    manager: UUID


class ProjectMemberAdd(BaseModel):
    id: UUID
    member: UUID


class ProjectDoc(BaseDoc):
    creator: UUID
    name: str
