from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class SubtaskIn(BaseModel):
    title: Any = None
    is_done: Any = None


class SubtaskOut(BaseModel):
    id: int
    task_id: int
    title: str
    is_done: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
