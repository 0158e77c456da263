import os
import tempfile

# Point the app at a throwaway SQLite file before anything imports taskboard.config
TEST_DB_FILE = os.path.join(tempfile.mkdtemp(), "taskboard_test.db")
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_FILE}"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from taskboard.main import app
from taskboard.database import SessionLocal, Base, engine


# Recreate all tables for each test
@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_task(client):
    def _make(**body):
        body.setdefault("title", "Task")
        r = client.post("/tasks", json=body)
        assert r.status_code == 201, r.text
        return r.json()["data"]
    return _make


@pytest.fixture
def make_category(client):
    def _make(name="Ops", color=None):
        body = {"name": name}
        if color is not None:
            body["color"] = color
        r = client.post("/categories", json=body)
        assert r.status_code == 201, r.text
        return r.json()["data"]
    return _make
