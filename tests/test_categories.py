from taskboard.models.task import Task


def test_create_and_list_sorted_by_name(client):
    for name in ("Ops", "Backend", "Design"):
        r = client.post("/categories", json={"name": name, "color": "#10B981"})
        assert r.status_code == 201
        assert r.json()["message"] == "Category created successfully"

    r = client.get("/categories")
    assert r.status_code == 200
    assert [c["name"] for c in r.json()["data"]] == ["Backend", "Design", "Ops"]


def test_invalid_color_falls_back_to_default(client):
    for color in ("blue", "#12345", "#GGGGGG", "", None):
        body = {"name": f"cat {color!r}"}
        if color is not None:
            body["color"] = color
        r = client.post("/categories", json=body)
        assert r.status_code == 201
        assert r.json()["data"]["color"] == "#3B82F6"


def test_name_required(client):
    for body in ({}, {"name": "  "}, {"color": "#000000"}):
        r = client.post("/categories", json=body)
        assert r.status_code == 400
        assert r.json()["message"] == "Missing required fields: name"


def test_duplicate_name(client, make_category):
    make_category("Ops")
    r = client.post("/categories", json={"name": "Ops"})
    assert r.status_code == 400
    assert r.json()["message"] == "Category name already exists"
    # the failed insert leaves nothing behind
    assert len(client.get("/categories").json()["data"]) == 1


def test_delete_category_keeps_tasks(client, db, make_category, make_task):
    ops = make_category("Ops")
    task = make_task(title="X", category_id=ops["id"])
    other = make_task(title="Y", category_id=ops["id"])

    r = client.delete(f"/categories/{ops['id']}")
    assert r.status_code == 200
    assert r.json()["message"] == "Category deleted successfully"

    data = client.get(f"/tasks/{task['id']}").json()["data"]
    assert data["category_id"] is None
    assert data["category_name"] is None
    assert db.query(Task).count() == 2
    assert db.get(Task, other["id"]).category_id is None
    assert client.get("/categories").json()["data"] == []


def test_delete_missing_category(client):
    r = client.delete("/categories/77")
    assert r.status_code == 404
    assert r.json()["message"] == "Category not found"
    assert client.delete("/categories/0").status_code == 400


def test_categories_method_not_allowed(client):
    assert client.put("/categories", json={}).status_code == 405


def test_delete_category_id_beyond_integer_range(client):
    r = client.delete("/categories/99999999999999999999")
    assert r.status_code == 404
    assert r.json()["message"] == "Category not found"
