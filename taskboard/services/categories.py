from typing import List

import structlog
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from taskboard.models.category import Category
from taskboard.schemas.category import CategoryIn, CategoryOut
from taskboard.utils.transaction import transaction
from taskboard.utils.validation import normalize_color, sanitize_string, validate_required

logger = structlog.get_logger(__name__)


def list_categories(db: Session) -> List[CategoryOut]:
    return [CategoryOut.model_validate(c) for c in db.query(Category).order_by(Category.name.asc()).all()]


def create_category(db: Session, payload: CategoryIn) -> CategoryOut:
    data = payload.model_dump()
    name = sanitize_string(data.get("name"))
    if validate_required(data, ["name"]) or not name:
        raise HTTPException(status_code=400, detail="Missing required fields: name")

    with transaction(db, "Failed to create category", "category_create_failed", name=name):
        category = Category(name=name, color=normalize_color(data.get("color")))
        db.add(category)
        try:
            db.flush()
        except IntegrityError:
            raise HTTPException(status_code=400, detail="Category name already exists")
        category_id = category.id

    logger.info("category_created", category_id=category_id, name=name)
    return CategoryOut.model_validate(db.get(Category, category_id))


def delete_category(db: Session, category_id: int) -> None:
    with transaction(db, "Failed to delete category", "category_delete_failed", category_id=category_id):
        category = db.get(Category, category_id)
        if category is None:
            raise HTTPException(status_code=404, detail="Category not found")
        # referencing tasks keep existing; the FK sets their category_id to NULL
        db.delete(category)

    logger.info("category_deleted", category_id=category_id)
