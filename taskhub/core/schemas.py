from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from uuid import UUID


class BaseDoc(BaseModel):
    id: UUID
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
