from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from taskboard.database import get_db
from taskboard.routers.deps import require_positive_id
from taskboard.schemas.subtask import SubtaskIn
from taskboard.services.subtasks import delete_subtask, update_subtask
from taskboard.utils.responses import success

router = APIRouter(prefix="/subtasks", tags=["subtasks"])


@router.put("/{subtask_id}")
def put_subtask(subtask_id: int, payload: SubtaskIn, db: Session = Depends(get_db)):
    require_positive_id(subtask_id, "subtask")
    return success(update_subtask(db, subtask_id, payload), "Subtask updated successfully")


@router.delete("/{subtask_id}")
def remove_subtask(subtask_id: int, db: Session = Depends(get_db)):
    require_positive_id(subtask_id, "subtask")
    delete_subtask(db, subtask_id)
    return success(None, "Subtask deleted successfully")
