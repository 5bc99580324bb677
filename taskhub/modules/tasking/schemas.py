from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID

from taskhub.core.schemas import BaseDoc


class TaskCreate(BaseModel):
    project: UUID
    description: str = Field(min_length=1)
    assignee: Optional[UUID] = None


class TaskDescriptionUpdate(BaseModel):
    task: UUID
    description: str = Field(min_length=1)


class TaskCompletionUpdate(BaseModel):
    task: UUID
    completion: bool


class TaskAssigneeAdd(BaseModel):
    task: UUID
    assignee: UUID


class TaskDoc(BaseDoc):
    description: str
    project: UUID
    assignee: Optional[UUID] = None
    completion: bool = False
