import csv
import io
from typing import List

from sqlalchemy.orm import Session

from taskboard.models.category import Category
from taskboard.models.task import Task

CSV_HEADERS = [
    "ID", "Title", "Description", "Priority", "Due Date", "Status",
    "Assigned To", "Category", "Created At", "Updated At",
]


def export_rows(db: Session) -> List[list]:
    rows = (
        db.query(Task, Category.name)
        .outerjoin(Category, Task.category_id == Category.id)
        .order_by(Task.created_at.desc(), Task.id.desc())
        .all()
    )
    return [
        [
            task.id,
            task.title,
            task.description,
            task.priority,
            task.due_date.isoformat() if task.due_date else "",
            task.status,
            task.assigned_to or "",
            category_name or "",
            task.created_at.strftime("%Y-%m-%d %H:%M:%S") if task.created_at else "",
            task.updated_at.strftime("%Y-%m-%d %H:%M:%S") if task.updated_at else "",
        ]
        for task, category_name in rows
    ]


def generate_csv(headers: List[str], rows: List[list]) -> io.StringIO:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(headers)
    writer.writerows(rows)
    output.seek(0)
    return output
