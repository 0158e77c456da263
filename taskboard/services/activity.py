"""Append-only activity trail for tasks."""
from typing import List

import structlog
from sqlalchemy.orm import Session

from taskboard.models.activity import ActivityLog

logger = structlog.get_logger(__name__)

CREATED = "created"
UPDATED = "updated"
DELETED = "deleted"
MOVED = "moved"
SUBTASK_UPDATED = "subtask_updated"
SUBTASK_DELETED = "subtask_deleted"
COMMENT_ADDED = "comment_added"


def record_activity(db: Session, task_id: int, action: str, details: str, user_name: str = "System") -> ActivityLog:
    """Add an entry to the caller's session.

    Nothing is committed here: the entry lives and dies with the caller's
    transaction.
    """
    entry = ActivityLog(task_id=task_id, action=action, details=details, user_name=user_name or "System")
    db.add(entry)
    logger.debug("activity_recorded", task_id=task_id, action=action)
    return entry


def list_activity(db: Session, task_id: int) -> List[ActivityLog]:
    return (
        db.query(ActivityLog)
        .filter(ActivityLog.task_id == task_id)
        .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .all()
    )
