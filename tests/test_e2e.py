import csv
import io
from datetime import date

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from taskboard.models.activity import ActivityLog
from taskboard.models.task import Task


class TestE2E:
    def test_complete_board_journey(self, client: TestClient, db: Session):
        # 1. Categories
        r = client.post("/categories", json={"color": "#000000"})
        assert r.status_code == 400

        r = client.post("/categories", json={"name": "Ops", "color": "not-a-color"})
        assert r.status_code == 201
        ops = r.json()["data"]
        assert ops["color"] == "#3B82F6"

        # 2. Create a task on the board
        r = client.post("/tasks", json={"title": "Ship v1", "category_id": ops["id"],
                                        "subtasks": [{"title": "tag release"}, {"title": "  "}]})
        assert r.status_code == 201
        task = r.json()["data"]
        task_id = task["id"]
        assert task["priority"] == "Medium"
        assert task["status"] == "todo"
        assert len(task["subtasks"]) == 1

        # 3. Work on it
        r = client.put(f"/tasks/{task_id}", json={"status": "done"})
        assert r.status_code == 200
        r = client.post(f"/tasks/{task_id}/move", json={"status": "todo"})
        assert r.status_code == 200
        r = client.post(f"/tasks/{task_id}/comments", json={"content": "reopened, QA found a bug"})
        assert r.status_code == 201

        activity = client.get(f"/tasks/{task_id}/activity").json()["data"]
        assert [a["action"] for a in activity] == ["comment_added", "moved", "updated", "created"]
        assert activity[1]["details"] == "Task moved from Done to To Do"
        assert activity[2]["details"] == "Status changed to: done"

        # 4. Board listing shows the summary
        listing = client.get("/tasks").json()["data"]
        assert listing["pagination"]["total"] == 1
        assert listing["tasks"][0]["subtasks_total"] == 1
        assert listing["tasks"][0]["category_name"] == "Ops"

        # 5. Removing the category detaches the task
        assert client.delete(f"/categories/{ops['id']}").status_code == 200
        assert client.get(f"/tasks/{task_id}").json()["data"]["category_id"] is None

        # 6. Delete the task; its trail goes with it
        assert client.delete(f"/tasks/{task_id}").status_code == 200
        assert client.get(f"/tasks/{task_id}").status_code == 404
        assert db.query(Task).count() == 0
        assert db.query(ActivityLog).count() == 0

    def test_csv_export(self, client: TestClient, make_task, make_category):
        r = client.get("/tasks/export")
        assert r.status_code == 200
        assert r.json()["message"] == "No tasks to export"
        assert r.json()["data"] == {"content": ""}

        ops = make_category("Ops")
        make_task(title="first", due_date="2026-05-01", category_id=ops["id"], assigned_to="lee")
        make_task(title="second, with comma", description='say "hi"')

        r = client.get("/tasks/export")
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/csv")
        assert r.headers["content-disposition"] == f'attachment; filename="tasks_{date.today().isoformat()}.csv"'

        rows = list(csv.reader(io.StringIO(r.text)))
        assert rows[0] == ["ID", "Title", "Description", "Priority", "Due Date", "Status",
                           "Assigned To", "Category", "Created At", "Updated At"]
        assert len(rows) == 3
        # newest first
        assert rows[1][1] == "second, with comma"
        assert rows[1][2] == "say &quot;hi&quot;"
        assert rows[2][1:8] == ["first", "", "Medium", "2026-05-01", "todo", "lee", "Ops"]

    def test_envelope_and_request_id(self, client: TestClient):
        r = client.get("/categories", headers={"X-Request-ID": "abc-123"})
        assert r.status_code == 200
        assert r.headers["X-Request-ID"] == "abc-123"
        assert r.json() == {"status": "success", "message": "Categories retrieved successfully",
                            "code": 200, "data": []}

        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["data"] == {"database": "connected"}
        assert r.headers["X-Request-ID"]
