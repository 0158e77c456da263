from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class CommentIn(BaseModel):
    author: Any = None
    content: Any = None


class CommentOut(BaseModel):
    id: int
    author: str
    content: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
