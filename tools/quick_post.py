import sys
from pathlib import Path

# ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from fastapi.testclient import TestClient
from taskboard.main import app

client = TestClient(app)
title = sys.argv[1] if len(sys.argv) > 1 else "Quick test task"
r = client.post("/tasks", json={"title": title, "subtasks": [{"title": "check the board"}]})
print('status', r.status_code)
try:
    print('json:', r.json())
except Exception:
    print('text:', r.text)
