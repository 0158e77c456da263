from typing import List

import structlog
from fastapi import HTTPException
from sqlalchemy.orm import Session

from taskboard.models.comment import Comment
from taskboard.models.task import Task
from taskboard.schemas.comment import CommentIn, CommentOut
from taskboard.services import activity, events
from taskboard.services.activity import record_activity
from taskboard.services.events import broker
from taskboard.utils.transaction import transaction
from taskboard.utils.validation import sanitize_string, validate_required

logger = structlog.get_logger(__name__)


def _require_task(db: Session, task_id: int) -> None:
    if db.get(Task, task_id) is None:
        raise HTTPException(status_code=404, detail="Task not found")


def list_comments(db: Session, task_id: int) -> List[CommentOut]:
    _require_task(db, task_id)
    comments = (
        db.query(Comment)
        .filter(Comment.task_id == task_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .all()
    )
    return [CommentOut.model_validate(c) for c in comments]


def create_comment(db: Session, task_id: int, payload: CommentIn) -> CommentOut:
    data = payload.model_dump()
    content = sanitize_string(data.get("content"))
    if validate_required(data, ["content"]) or not content:
        raise HTTPException(status_code=400, detail="Missing required fields: content")
    author = sanitize_string(data.get("author")) or "Anonymous"

    with transaction(db, "Failed to create comment", "comment_create_failed", task_id=task_id):
        _require_task(db, task_id)
        comment = Comment(task_id=task_id, author=author, content=content)
        db.add(comment)
        record_activity(db, task_id, activity.COMMENT_ADDED, f"Comment added by {author}")
        db.flush()
        comment_id = comment.id

    logger.info("comment_added", task_id=task_id, comment_id=comment_id)
    broker.publish(events.COMMENT_ADDED, task_id, comment_id=comment_id, author=author)
    return CommentOut.model_validate(db.get(Comment, comment_id))
