from taskboard.models.subtask import Subtask


def _task_with_subtask(make_task, title="Write tests"):
    task = make_task(subtasks=[{"title": title}])
    return task, task["subtasks"][0]


def _activity(client, task_id):
    return client.get(f"/tasks/{task_id}/activity").json()["data"]


def test_toggle_done(client, make_task):
    task, sub = _task_with_subtask(make_task)
    r = client.put(f"/subtasks/{sub['id']}", json={"is_done": True})
    assert r.status_code == 200
    assert r.json()["data"]["is_done"] is True

    entry = _activity(client, task["id"])[0]
    assert entry["action"] == "subtask_updated"
    assert entry["details"] == "Subtask 'Write tests': Marked as completed"

    r = client.put(f"/subtasks/{sub['id']}", json={"is_done": 0})
    assert r.json()["data"]["is_done"] is False
    assert _activity(client, task["id"])[0]["details"] == "Subtask 'Write tests': Marked as incomplete"


def test_rename_and_toggle_in_one_entry(client, make_task):
    task, sub = _task_with_subtask(make_task)
    r = client.put(f"/subtasks/{sub['id']}", json={"title": "Write more tests", "is_done": "1"})
    assert r.json()["data"]["title"] == "Write more tests"
    entries = _activity(client, task["id"])
    assert len(entries) == 2
    assert entries[0]["details"] == "Subtask 'Write tests': Title updated; Marked as completed"


def test_no_difference_no_write(client, make_task):
    task, sub = _task_with_subtask(make_task)
    r = client.put(f"/subtasks/{sub['id']}", json={"title": "Write tests", "is_done": False})
    assert r.status_code == 200
    assert len(_activity(client, task["id"])) == 1


def test_blank_title_rejected(client, make_task):
    _, sub = _task_with_subtask(make_task)
    r = client.put(f"/subtasks/{sub['id']}", json={"title": ""})
    assert r.status_code == 400


def test_delete_logs_title(client, db, make_task):
    task, sub = _task_with_subtask(make_task, "Tidy up")
    r = client.delete(f"/subtasks/{sub['id']}")
    assert r.status_code == 200
    assert db.get(Subtask, sub["id"]) is None

    entry = _activity(client, task["id"])[0]
    assert entry["action"] == "subtask_deleted"
    assert entry["details"] == "Subtask deleted: Tidy up"
    assert client.get(f"/tasks/{task['id']}").json()["data"]["subtasks"] == []


def test_missing_subtask(client):
    assert client.put("/subtasks/999", json={"is_done": True}).status_code == 404
    assert client.delete("/subtasks/999").status_code == 404
    assert client.get("/subtasks/1").status_code == 405


def test_subtask_id_beyond_integer_range(client):
    r = client.put("/subtasks/99999999999999999999", json={"is_done": True})
    assert r.status_code == 404
    assert r.json()["message"] == "Subtask not found"
    assert client.delete("/subtasks/99999999999999999999").status_code == 404
