"""Read-side composition of tasks with their category, subtasks and comments."""
from typing import Optional

from sqlalchemy.orm import Session

from taskboard.models.category import Category
from taskboard.models.comment import Comment
from taskboard.models.subtask import Subtask
from taskboard.models.task import Task
from taskboard.schemas.comment import CommentOut
from taskboard.schemas.subtask import SubtaskOut
from taskboard.schemas.task import TaskDetail, TaskOut


def assemble_task(db: Session, task_id: int) -> Optional[TaskDetail]:
    """Full detail view: category fields, subtasks oldest first, comments newest first."""
    row = (
        db.query(Task, Category.name, Category.color)
        .outerjoin(Category, Task.category_id == Category.id)
        .filter(Task.id == task_id)
        .first()
    )
    if row is None:
        return None
    task, category_name, category_color = row

    subtasks = (
        db.query(Subtask)
        .filter(Subtask.task_id == task_id)
        .order_by(Subtask.created_at.asc(), Subtask.id.asc())
        .all()
    )
    comments = (
        db.query(Comment)
        .filter(Comment.task_id == task_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .all()
    )

    return TaskDetail(
        **TaskOut.model_validate(task).model_dump(),
        category_name=category_name,
        category_color=category_color,
        subtasks=[SubtaskOut.model_validate(s) for s in subtasks],
        comments=[CommentOut.model_validate(c) for c in comments],
    )
