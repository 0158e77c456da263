import structlog
from fastapi import HTTPException
from sqlalchemy.orm import Session

from taskboard.models.subtask import Subtask
from taskboard.schemas.subtask import SubtaskIn, SubtaskOut
from taskboard.services import activity, events
from taskboard.services.activity import record_activity
from taskboard.services.events import broker
from taskboard.utils.transaction import transaction
from taskboard.utils.validation import coerce_bool, sanitize_string

logger = structlog.get_logger(__name__)


def _get_subtask_or_404(db: Session, subtask_id: int) -> Subtask:
    subtask = db.get(Subtask, subtask_id)
    if subtask is None:
        raise HTTPException(status_code=404, detail="Subtask not found")
    return subtask


def update_subtask(db: Session, subtask_id: int, payload: SubtaskIn) -> SubtaskOut:
    """Rename and/or tick a subtask. Writes and logs only what actually differs."""
    data = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}

    with transaction(db, "Failed to update subtask", "subtask_update_failed", subtask_id=subtask_id):
        subtask = _get_subtask_or_404(db, subtask_id)
        task_id = subtask.task_id
        old_title = subtask.title
        changes = []

        if "title" in data:
            title = sanitize_string(data["title"])
            if not title:
                raise HTTPException(status_code=400, detail="Title cannot be empty")
            if title != subtask.title:
                subtask.title = title
                changes.append("Title updated")

        if "is_done" in data:
            is_done = coerce_bool(data["is_done"])
            if is_done != subtask.is_done:
                subtask.is_done = is_done
                changes.append("Marked as completed" if is_done else "Marked as incomplete")

        if changes:
            record_activity(
                db, task_id, activity.SUBTASK_UPDATED, f"Subtask '{old_title}': " + "; ".join(changes)
            )

    if changes:
        logger.info("subtask_updated", subtask_id=subtask_id, task_id=task_id)
        broker.publish(events.SUBTASK_UPDATED, task_id, subtask_id=subtask_id, changes=changes)
    return SubtaskOut.model_validate(_get_subtask_or_404(db, subtask_id))


def delete_subtask(db: Session, subtask_id: int) -> None:
    with transaction(db, "Failed to delete subtask", "subtask_delete_failed", subtask_id=subtask_id):
        subtask = _get_subtask_or_404(db, subtask_id)
        task_id, title = subtask.task_id, subtask.title
        db.delete(subtask)
        record_activity(db, task_id, activity.SUBTASK_DELETED, f"Subtask deleted: {title}")

    logger.info("subtask_deleted", subtask_id=subtask_id, task_id=task_id)
    broker.publish(events.SUBTASK_DELETED, task_id, subtask_id=subtask_id, title=title)
