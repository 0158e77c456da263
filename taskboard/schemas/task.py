from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from taskboard.schemas.comment import CommentOut
from taskboard.schemas.subtask import SubtaskOut


class TaskIn(BaseModel):
    """Raw task body. Values stay untyped here and are coerced by the pipeline,
    so a bad priority or status falls back to a default instead of a 422."""

    title: Any = None
    description: Any = None
    priority: Any = None
    status: Any = None
    due_date: Any = None
    category_id: Any = None
    assigned_to: Any = None
    subtasks: Optional[List[Any]] = None

    @field_validator("subtasks", mode="before")
    @classmethod
    def subtasks_must_be_list(cls, v):
        return v if isinstance(v, list) else None

    def present(self) -> dict:
        """Fields the client actually sent with a non-null value."""
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class TaskMove(BaseModel):
    status: Any = None


class TaskOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = ""
    priority: str
    status: str
    due_date: Optional[date] = None
    category_id: Optional[int] = None
    assigned_to: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TaskSummary(TaskOut):
    category_name: Optional[str] = None
    category_color: Optional[str] = None
    subtasks_total: int = 0
    subtasks_completed: int = 0


class TaskDetail(TaskOut):
    category_name: Optional[str] = None
    category_color: Optional[str] = None
    subtasks: List[SubtaskOut] = []
    comments: List[CommentOut] = []


class Pagination(BaseModel):
    total: int
    page: int
    per_page: int
    total_pages: int


class TaskPage(BaseModel):
    tasks: List[TaskSummary]
    pagination: Pagination
