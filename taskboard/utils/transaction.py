from contextlib import contextmanager

import structlog
from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = structlog.get_logger(__name__)


@contextmanager
def transaction(db: Session, error_message: str, event: str, **log_fields):
    """Commit on success; on any failure roll back every pending change.

    Database errors are logged with their traceback and surfaced as a 500
    carrying only ``error_message``. HTTP errors raised inside the block pass
    through unchanged after the rollback.
    """
    try:
        yield db
        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception(event, **log_fields)
        raise HTTPException(status_code=500, detail=error_message)
    except Exception:
        db.rollback()
        raise
