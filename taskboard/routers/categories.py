from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from taskboard.database import get_db
from taskboard.routers.deps import require_positive_id
from taskboard.schemas.category import CategoryIn
from taskboard.services import categories
from taskboard.utils.responses import success

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("")
def list_categories(db: Session = Depends(get_db)):
    return success(categories.list_categories(db), "Categories retrieved successfully")


@router.post("")
def create_category(payload: CategoryIn, db: Session = Depends(get_db)):
    return success(categories.create_category(db, payload), "Category created successfully", 201)


@router.delete("/{category_id}")
def delete_category(category_id: int, db: Session = Depends(get_db)):
    require_positive_id(category_id, "category")
    categories.delete_category(db, category_id)
    return success(None, "Category deleted successfully")
