from pydantic import BaseModel
from typing import Optional
from uuid import UUID

from taskhub.core.schemas import BaseDoc


class PostOptions(BaseModel):
    background_color: Optional[str] = None


class PostCreate(BaseModel):
    content: str
    options: Optional[PostOptions] = None


class PostUpdate(BaseModel):
    content: Optional[str] = None
    options: Optional[PostOptions] = None


class PostDoc(BaseDoc):
    author: UUID
    content: str
    options: Optional[PostOptions] = None
