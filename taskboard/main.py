import structlog
import uvicorn
from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard.config import CORS_ORIGINS, HOST, PORT
from taskboard.database import Base, engine, get_db
from taskboard.logging_setup import setup_logging
from taskboard.middleware.logging import LoggingMiddleware
from taskboard.models import activity, category, comment, subtask, task  # noqa: F401  (register tables)
from taskboard.routers import categories, comments, stream, subtasks, tasks
from taskboard.utils.responses import error, success

setup_logging()
logger = structlog.get_logger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Taskboard")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)
app.add_middleware(LoggingMiddleware)

# API routers
app.include_router(categories.router)
app.include_router(tasks.router)
app.include_router(comments.router)
app.include_router(subtasks.router)
app.include_router(stream.router)


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Health check with database status."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("health_check_failed", error=str(exc))
        return error("unhealthy", 503, {"database": "unavailable"})
    return success({"database": "connected"}, "healthy")


# Every error, including Starlette's own 404/405, goes out in the same envelope
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc):
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = "Endpoint not found"
    elif exc.status_code == 405:
        message = "Method not allowed"
    else:
        message = exc.detail
    return error(message, exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    if any(err.get("loc") and err["loc"][0] == "body" for err in exc.errors()):
        return error("Invalid JSON input", 400)
    return error("Invalid request", 400)


# Generic error handler to return JSON errors for unexpected exceptions
@app.exception_handler(Exception)
async def generic_exception_handler(request, exc):
    logger.exception("unhandled_error", path=request.url.path)
    return error("Internal server error", 500)


def run():
    """Serve the API with uvicorn (the `taskboard` console script)."""
    uvicorn.run(app, host=HOST, port=PORT, log_config=None)
