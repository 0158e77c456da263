from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from taskboard.database import get_db
from taskboard.routers.deps import require_positive_id
from taskboard.schemas.activity import ActivityOut
from taskboard.schemas.task import TaskIn, TaskMove
from taskboard.services import task_pipeline
from taskboard.services.activity import list_activity
from taskboard.services.assemblers import assemble_task
from taskboard.services.export import CSV_HEADERS, export_rows, generate_csv
from taskboard.services.task_query import TaskFilters, list_tasks
from taskboard.utils.responses import success

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("")
def get_tasks(
    status: Optional[str] = None,
    category_id: Optional[str] = None,
    priority: Optional[str] = None,
    assigned_to: Optional[str] = None,
    search: Optional[str] = None,
    sort: Optional[str] = None,
    page: Optional[str] = None,
    per_page: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Paginated task summaries. Unknown sort keys fall back to created_at;
    page and per_page are clamped rather than rejected."""
    filters = TaskFilters(
        status=status,
        category_id=category_id,
        priority=priority,
        assigned_to=assigned_to,
        search=search,
        sort=sort,
        page=page,
        per_page=per_page,
    )
    return success(list_tasks(db, filters), "Tasks retrieved successfully")


@router.get("/export")
def export_tasks(db: Session = Depends(get_db)):
    rows = export_rows(db)
    if not rows:
        return success({"content": ""}, "No tasks to export")
    filename = f"tasks_{date.today().isoformat()}.csv"
    return StreamingResponse(
        generate_csv(CSV_HEADERS, rows),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{task_id}")
def get_task(task_id: int, db: Session = Depends(get_db)):
    require_positive_id(task_id, "task")
    task = assemble_task(db, task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return success(task, "Task retrieved successfully")


@router.get("/{task_id}/activity")
def get_task_activity(task_id: int, db: Session = Depends(get_db)):
    require_positive_id(task_id, "task")
    entries = [ActivityOut.model_validate(e) for e in list_activity(db, task_id)]
    return success(entries, "Task activity retrieved successfully")


@router.post("")
def create_task(payload: TaskIn, db: Session = Depends(get_db)):
    task = task_pipeline.create_task(db, payload)
    return success(task, "Task created successfully", 201)


@router.put("/{task_id}")
def update_task(task_id: int, payload: TaskIn, db: Session = Depends(get_db)):
    require_positive_id(task_id, "task")
    task = task_pipeline.update_task(db, task_id, payload)
    return success(task, "Task updated successfully")


@router.post("/{task_id}/move")
def move_task(task_id: int, payload: TaskMove, db: Session = Depends(get_db)):
    require_positive_id(task_id, "task")
    moved = task_pipeline.move_task(db, task_id, payload.status)
    return success(moved, "Task moved successfully")


@router.delete("/{task_id}")
def delete_task(task_id: int, db: Session = Depends(get_db)):
    require_positive_id(task_id, "task")
    task_pipeline.delete_task(db, task_id)
    return success(None, "Task deleted successfully")
