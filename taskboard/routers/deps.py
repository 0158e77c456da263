from fastapi import HTTPException

from taskboard.utils.validation import MAX_ID


def require_positive_id(value: int, label: str) -> int:
    if value <= 0:
        raise HTTPException(status_code=400, detail=f"Invalid {label} ID")
    # too large for any stored row, and for the sqlite driver
    if value > MAX_ID:
        raise HTTPException(status_code=404, detail=f"{label.capitalize()} not found")
    return value
