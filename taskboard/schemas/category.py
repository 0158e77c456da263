from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class CategoryIn(BaseModel):
    name: Any = None
    color: Any = None


class CategoryOut(BaseModel):
    id: int
    name: str
    color: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
