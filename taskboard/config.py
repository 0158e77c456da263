import os

# Default to local SQLite for dev/tests; override via env in Docker/Prod
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./taskboard.db")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_JSON = os.environ.get("LOG_JSON", "").lower() in ("1", "true", "yes")

CORS_ORIGINS = [o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()]

DEFAULT_PER_PAGE = int(os.environ.get("DEFAULT_PER_PAGE", 20))
MAX_PER_PAGE = int(os.environ.get("MAX_PER_PAGE", 100))

# Seconds of silence before the update stream sends a heartbeat event
STREAM_HEARTBEAT_SECONDS = float(os.environ.get("STREAM_HEARTBEAT_SECONDS", 30))
STREAM_QUEUE_SIZE = int(os.environ.get("STREAM_QUEUE_SIZE", 100))

# Bind address for the `taskboard` server command
HOST = os.environ.get("HOST", "127.0.0.1")
PORT = int(os.environ.get("PORT", 8000))
