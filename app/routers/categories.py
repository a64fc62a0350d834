from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from app.core.database import get_db
from app.core.deps import require_elevated_user, require_site_open
from app.core.errors import FieldValidationError, validation_http_error
from app.models.user import User
from app.models.category import Category
from app.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse, CategoryWithChildren, CategoryTree
from app.schemas.structure import CategoryReorder, MessageResponse
from app.services import category_service

router = APIRouter(prefix="/categories", tags=["categories"])

def _get_category_or_404(db: Session, category_id: int) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category

@router.get("", response_model=List[CategoryTree])
def list_categories(db: Session = Depends(get_db), current_user: User = Depends(require_site_open)):
    # catégories racines avec tout leur sous-arbre et leurs pages
    return [category_service.to_tree(category) for category in category_service.list_root_categories(db)]

@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(category_data: CategoryCreate, db: Session = Depends(get_db), current_user: User = Depends(require_elevated_user)):
    try:
        return category_service.create_category(db, category_data.model_dump())
    except FieldValidationError as e:
        raise validation_http_error(e)

@router.post("/reorder", response_model=MessageResponse)
def reorder_categories(payload: CategoryReorder, db: Session = Depends(get_db), current_user: User = Depends(require_elevated_user)):
    ids = {item.id for item in payload.categories}
    found = {row.id for row in db.query(Category.id).filter(Category.id.in_(ids)).all()}
    missing = sorted(ids - found)
    if missing:
        raise validation_http_error(FieldValidationError(
            "Catégorie inconnue.", {"categories": [f"La catégorie {category_id} n'existe pas." for category_id in missing]}
        ))

    category_service.reorder_categories(db, [item.model_dump() for item in payload.categories])
    return {"message": "Ordre mis à jour"}

@router.get("/{category_id}", response_model=CategoryWithChildren)
def get_category(category_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_site_open)):
    return _get_category_or_404(db, category_id)

@router.put("/{category_id}", response_model=CategoryResponse)
def update_category(category_id: int, category_data: CategoryUpdate, db: Session = Depends(get_db), current_user: User = Depends(require_elevated_user)):
    category = _get_category_or_404(db, category_id)
    try:
        return category_service.update_category(db, category, category_data.model_dump(exclude_unset=True))
    except FieldValidationError as e:
        raise validation_http_error(e)

@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(category_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_elevated_user)):
    category = _get_category_or_404(db, category_id)
    category_service.delete_category(db, category)
    return {"message": "Catégorie supprimée"}
