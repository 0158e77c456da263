from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from taskboard.database import get_db
from taskboard.routers.deps import require_positive_id
from taskboard.schemas.comment import CommentIn
from taskboard.services.comments import create_comment, list_comments
from taskboard.utils.responses import success

router = APIRouter(prefix="/tasks", tags=["comments"])


@router.get("/{task_id}/comments")
def get_comments(task_id: int, db: Session = Depends(get_db)):
    require_positive_id(task_id, "task")
    return success(list_comments(db, task_id), "Comments retrieved successfully")


@router.post("/{task_id}/comments")
def add_comment(task_id: int, payload: CommentIn, db: Session = Depends(get_db)):
    require_positive_id(task_id, "task")
    return success(create_comment(db, task_id, payload), "Comment created successfully", 201)
