from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ActivityOut(BaseModel):
    id: int
    action: str
    details: Optional[str] = None
    user_name: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
