"""Create, update, move and delete tasks.

Each operation is a single transaction covering the task row, its subtasks
and the activity entry describing the change, so a task is never observed
half-written. Change events are published only after the commit succeeds.
"""
from typing import Any, List, Optional

import structlog
from fastapi import HTTPException
from sqlalchemy.orm import Session

from taskboard.models.category import Category
from taskboard.models.subtask import Subtask
from taskboard.models.task import Task, TaskStatus
from taskboard.schemas.task import TaskDetail, TaskIn
from taskboard.services import activity, events
from taskboard.services.activity import record_activity
from taskboard.services.assemblers import assemble_task
from taskboard.services.events import broker
from taskboard.utils.transaction import transaction
from taskboard.utils.validation import (
    coerce_bool,
    coerce_id,
    coerce_priority,
    coerce_status,
    exceeds_id_range,
    is_blank,
    parse_priority,
    parse_status,
    sanitize_string,
    validate_date,
    validate_required,
)

logger = structlog.get_logger(__name__)


def _get_task_or_404(db: Session, task_id: int) -> Task:
    task = db.get(Task, task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


def _category_ref(value: Any) -> Optional[int]:
    # an id no row can have is a missing category, not "no category"
    if exceeds_id_range(value):
        raise HTTPException(status_code=400, detail="Category not found")
    return coerce_id(value)


def _check_category(db: Session, category_id: Optional[int]) -> None:
    if category_id is not None and db.get(Category, category_id) is None:
        raise HTTPException(status_code=400, detail="Category not found")


def _insert_subtasks(db: Session, task_id: int, items: List[Any]) -> int:
    """Insert one subtask per item with a non-blank title; returns how many."""
    inserted = 0
    for item in items:
        if not isinstance(item, dict) or is_blank(item.get("title")):
            continue
        title = sanitize_string(item["title"])
        if not title:
            continue
        db.add(Subtask(task_id=task_id, title=title, is_done=coerce_bool(item.get("is_done"))))
        inserted += 1
    return inserted


def create_task(db: Session, payload: TaskIn) -> TaskDetail:
    data = payload.present()
    missing = validate_required(data, ["title"])
    title = sanitize_string(data.get("title"))
    if missing or not title:
        raise HTTPException(status_code=400, detail="Missing required fields: title")

    due_date = None
    if not is_blank(data.get("due_date")):
        due_date = validate_date(data["due_date"])
        if due_date is None:
            raise HTTPException(status_code=400, detail="Invalid due date format. Use YYYY-MM-DD")

    category_id = _category_ref(data.get("category_id"))
    assigned_to = sanitize_string(data.get("assigned_to")) or None

    with transaction(db, "Failed to create task", "task_create_failed"):
        _check_category(db, category_id)
        task = Task(
            title=title,
            description=sanitize_string(data.get("description")) or "",
            priority=coerce_priority(data.get("priority")).value,
            status=coerce_status(data.get("status")).value,
            due_date=due_date,
            category_id=category_id,
            assigned_to=assigned_to,
        )
        db.add(task)
        db.flush()
        task_id = task.id
        subtask_count = _insert_subtasks(db, task_id, data.get("subtasks") or [])
        record_activity(db, task_id, activity.CREATED, f"Task created: {title}")

    logger.info("task_created", task_id=task_id, subtasks=subtask_count)
    broker.publish(events.TASK_CREATED, task_id, title=title)
    return assemble_task(db, task_id)


def _collect_changes(db: Session, task: Task, data: dict):
    """Work out which fields really change.

    Returns ``(updates, changes)``: column values to write and the
    human-readable notes for the activity log. Nothing is written here.
    """
    updates = {}
    changes = []

    if "title" in data:
        title = sanitize_string(data["title"])
        if not title:
            raise HTTPException(status_code=400, detail="Title cannot be empty")
        if title != task.title:
            updates["title"] = title
            changes.append(f"Title changed to: {title}")

    if "description" in data:
        description = sanitize_string(data["description"])
        if description != (task.description or ""):
            updates["description"] = description
            changes.append("Description updated")

    if "priority" in data:
        # unrecognized values are ignored on update
        priority = parse_priority(data["priority"])
        if priority is not None and priority.value != task.priority:
            updates["priority"] = priority.value
            changes.append(f"Priority changed to: {priority.value}")

    if "status" in data:
        status = parse_status(data["status"])
        if status is not None and status.value != task.status:
            updates["status"] = status.value
            changes.append(f"Status changed to: {status.value}")

    if "category_id" in data:
        category_id = _category_ref(data["category_id"])
        if category_id != task.category_id:
            _check_category(db, category_id)
            updates["category_id"] = category_id
            changes.append("Category changed" if category_id else "Category removed")

    if "assigned_to" in data:
        assigned_to = sanitize_string(data["assigned_to"]) or None
        if assigned_to != task.assigned_to:
            updates["assigned_to"] = assigned_to
            changes.append(f"Assigned to: {assigned_to}" if assigned_to else "Assignment removed")

    if "due_date" in data:
        # an empty or malformed date clears the field
        due_date = validate_date(data["due_date"])
        if due_date != task.due_date:
            updates["due_date"] = due_date
            changes.append(f"Due date set to: {due_date.isoformat()}" if due_date else "Due date removed")

    return updates, changes


def update_task(db: Session, task_id: int, payload: TaskIn) -> TaskDetail:
    data = payload.present()

    with transaction(db, "Failed to update task", "task_update_failed", task_id=task_id):
        task = _get_task_or_404(db, task_id)
        updates, changes = _collect_changes(db, task, data)

        for field, value in updates.items():
            setattr(task, field, value)

        if "subtasks" in data:
            # full replacement: existing subtask ids do not survive
            db.query(Subtask).filter(Subtask.task_id == task_id).delete(synchronize_session=False)
            _insert_subtasks(db, task_id, data["subtasks"])
            changes.append("Subtasks updated")

        if changes:
            record_activity(db, task_id, activity.UPDATED, "; ".join(changes))

    if changes:
        logger.info("task_updated", task_id=task_id, fields=sorted(updates))
        broker.publish(events.TASK_UPDATED, task_id, changes=changes)
    return assemble_task(db, task_id)


def move_task(db: Session, task_id: int, new_status: Any) -> dict:
    """Status-only change used by the board's drag and drop."""
    if is_blank(new_status):
        raise HTTPException(status_code=400, detail="Status is required")
    status = parse_status(new_status)
    if status is None:
        raise HTTPException(status_code=400, detail="Invalid status")

    with transaction(db, "Failed to move task", "task_move_failed", task_id=task_id):
        task = _get_task_or_404(db, task_id)
        previous = TaskStatus(task.status)
        task.status = status.value
        record_activity(
            db, task_id, activity.MOVED, f"Task moved from {previous.label} to {status.label}"
        )

    logger.info("task_moved", task_id=task_id, previous=previous.value, status=status.value)
    broker.publish(events.TASK_MOVED, task_id, previous=previous.value, status=status.value)
    return {"id": task_id, "status": status.value}


def delete_task(db: Session, task_id: int) -> None:
    with transaction(db, "Failed to delete task", "task_delete_failed", task_id=task_id):
        task = _get_task_or_404(db, task_id)
        title = task.title
        # the entry is written first and then removed by the cascade below
        record_activity(db, task_id, activity.DELETED, f"Task deleted: {title}")
        db.flush()
        db.delete(task)

    logger.info("task_deleted", task_id=task_id, title=title)
    broker.publish(events.TASK_DELETED, task_id, title=title)
