"""Coercion helpers for untrusted request input.

Everything here is pure: values come in as whatever the JSON body or query
string carried and leave either normalized or as ``None``. Nothing raises;
callers decide whether a ``None`` is an error.
"""
import html
import re
from datetime import date, datetime
from typing import Any, Iterable, List, Optional

from taskboard.config import DEFAULT_PER_PAGE, MAX_PER_PAGE
from taskboard.models.category import DEFAULT_COLOR
from taskboard.models.task import Priority, TaskStatus

_TAG_RE = re.compile(r"<[^>]*>")
_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
_TRUE_STRINGS = {"1", "true", "yes", "on"}

# Largest value SQLite can store in an INTEGER column
MAX_ID = 2 ** 63 - 1


def sanitize_string(value: Any) -> Optional[str]:
    """Trim, drop markup tags and HTML-escape a free-text value."""
    if value is None:
        return None
    text = _TAG_RE.sub("", str(value).strip())
    return html.escape(text, quote=True)


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def validate_required(data: dict, fields: Iterable[str]) -> List[str]:
    """Return the names of required fields that are missing or blank."""
    return [f for f in fields if is_blank(data.get(f))]


def validate_date(value: Any) -> Optional[date]:
    """Parse a strict YYYY-MM-DD string.

    The parsed value must format back to exactly the input, so ``2024-2-3``
    or ``2024-02-30`` are rejected.
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None
    if parsed.strftime("%Y-%m-%d") != value:
        return None
    return parsed


def parse_priority(value: Any) -> Optional[Priority]:
    try:
        return Priority(value)
    except ValueError:
        return None


def parse_status(value: Any) -> Optional[TaskStatus]:
    try:
        return TaskStatus(value)
    except ValueError:
        return None


def coerce_priority(value: Any) -> Priority:
    return parse_priority(value) or Priority.MEDIUM


def coerce_status(value: Any) -> TaskStatus:
    return parse_status(value) or TaskStatus.TODO


def coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def _to_id(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def coerce_id(value: Any) -> Optional[int]:
    """Positive integer id that fits an SQLite INTEGER, or None for anything
    else (0, '', 'abc', -3, 2**63)."""
    number = _to_id(value)
    if number is None or number <= 0 or number > MAX_ID:
        return None
    return number


def exceeds_id_range(value: Any) -> bool:
    """True for a well-formed integer too large to be any stored id."""
    number = _to_id(value)
    return number is not None and number > MAX_ID


def normalize_color(value: Any) -> str:
    if isinstance(value, str) and _COLOR_RE.match(value.strip()):
        return value.strip()
    return DEFAULT_COLOR


def pagination_params(page: Any = 1, per_page: Any = DEFAULT_PER_PAGE) -> dict:
    page = _to_int(page, 1)
    per_page = _to_int(per_page, DEFAULT_PER_PAGE)
    per_page = max(1, min(MAX_PER_PAGE, per_page))
    # keep the offset inside SQLite's integer range
    page = max(1, min(page, MAX_ID // per_page))
    return {"page": page, "per_page": per_page, "offset": (page - 1) * per_page}


def _to_int(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        # non-numeric input behaves like 0 and is clamped by the caller
        return 0
