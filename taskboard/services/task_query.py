"""Filtered, sorted and paginated task listing."""
from dataclasses import dataclass
from math import ceil
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import case, func, or_
from sqlalchemy.orm import Session

from taskboard.config import DEFAULT_PER_PAGE
from taskboard.models.category import Category
from taskboard.models.subtask import Subtask
from taskboard.models.task import Priority, Task
from taskboard.schemas.task import Pagination, TaskOut, TaskPage, TaskSummary
from taskboard.utils.validation import coerce_id, pagination_params

SORT_FIELDS = ("due_date", "priority", "created_at", "title")
DEFAULT_SORT = "created_at"

# High sorts first; anything unexpected in the column goes last
PRIORITY_RANK = case(
    {Priority.HIGH.value: 1, Priority.MEDIUM.value: 2, Priority.LOW.value: 3},
    value=Task.priority,
    else_=4,
)


@dataclass
class TaskFilters:
    """Listing criteria for a single request. Blank values mean "no filter"."""

    status: Optional[str] = None
    category_id: Any = None
    priority: Optional[str] = None
    assigned_to: Optional[str] = None
    search: Optional[str] = None
    sort: Optional[str] = None
    page: Any = 1
    per_page: Any = DEFAULT_PER_PAGE

    @property
    def sort_key(self) -> str:
        return self.sort if self.sort in SORT_FIELDS else DEFAULT_SORT


def _present(value: Any) -> bool:
    return value is not None and value != ""


def apply_filters(query, filters: TaskFilters):
    if _present(filters.status):
        query = query.filter(Task.status == filters.status)
    if _present(filters.category_id):
        # a non-numeric id matches nothing rather than everything
        query = query.filter(Task.category_id == (coerce_id(filters.category_id) or 0))
    if _present(filters.priority):
        query = query.filter(Task.priority == filters.priority)
    if _present(filters.assigned_to):
        query = query.filter(Task.assigned_to.like(f"%{filters.assigned_to}%"))
    if _present(filters.search):
        term = f"%{filters.search}%"
        query = query.filter(or_(Task.title.like(term), Task.description.like(term)))
    return query


def apply_sort(query, sort_key: str):
    if sort_key == "priority":
        return query.order_by(PRIORITY_RANK.asc(), Task.id.asc())
    return query.order_by(getattr(Task, sort_key).asc(), Task.id.asc())


def subtask_counts(db: Session, task_ids: List[int]) -> Dict[int, Tuple[int, int]]:
    """Map task id -> (total, completed) in one grouped query."""
    if not task_ids:
        return {}
    rows = (
        db.query(
            Subtask.task_id,
            func.count(Subtask.id),
            func.coalesce(func.sum(case((Subtask.is_done.is_(True), 1), else_=0)), 0),
        )
        .filter(Subtask.task_id.in_(task_ids))
        .group_by(Subtask.task_id)
        .all()
    )
    return {task_id: (int(total), int(done)) for task_id, total, done in rows}


def list_tasks(db: Session, filters: TaskFilters) -> TaskPage:
    pagination = pagination_params(filters.page, filters.per_page)

    total = apply_filters(db.query(Task), filters).count()

    query = apply_filters(
        db.query(Task, Category.name, Category.color).outerjoin(Category, Task.category_id == Category.id),
        filters,
    )
    rows = (
        apply_sort(query, filters.sort_key)
        .limit(pagination["per_page"])
        .offset(pagination["offset"])
        .all()
    )

    counts = subtask_counts(db, [task.id for task, _, _ in rows])
    tasks = []
    for task, category_name, category_color in rows:
        subtasks_total, subtasks_completed = counts.get(task.id, (0, 0))
        tasks.append(
            TaskSummary(
                **TaskOut.model_validate(task).model_dump(),
                category_name=category_name,
                category_color=category_color,
                subtasks_total=subtasks_total,
                subtasks_completed=subtasks_completed,
            )
        )

    return TaskPage(
        tasks=tasks,
        pagination=Pagination(
            total=total,
            page=pagination["page"],
            per_page=pagination["per_page"],
            total_pages=ceil(total / pagination["per_page"]),
        ),
    )
