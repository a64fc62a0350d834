"""Category service"""

import logging
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional, Set

from app.models.category import Category
from app.models.page import Page
from app.core.errors import FieldValidationError
from app.schemas.category import CategoryResponse, CategoryTree
from app.schemas.page import PageResponse
from app.services.slug_service import slugify, unique_slug

logger = logging.getLogger(__name__)


def list_root_categories(db: Session) -> List[Category]:
    return db.query(Category).filter(Category.parent_id.is_(None)).order_by(Category.order, Category.id).all()


def next_order(db: Session, parent_id: Optional[int]) -> int:
    # max(order) des frères + 1, 1 pour le premier
    query = db.query(func.max(Category.order))
    if parent_id is None:
        query = query.filter(Category.parent_id.is_(None))
    else:
        query = query.filter(Category.parent_id == parent_id)
    current = query.scalar()
    return (current or 0) + 1


def descendant_ids(category: Category) -> Set[int]:
    seen: Set[int] = set()
    stack = list(category.children)
    while stack:
        child = stack.pop()
        if child.id in seen:
            continue
        seen.add(child.id)
        stack.extend(child.children)
    return seen


def _check_parent(db: Session, parent_id: Optional[int], category: Optional[Category] = None) -> None:
    if parent_id is None:
        return
    if not db.query(Category).filter(Category.id == parent_id).first():
        raise FieldValidationError("Catégorie parente invalide.", {"parent_id": ["La catégorie parente sélectionnée est invalide."]})
    if category is not None and (parent_id == category.id or parent_id in descendant_ids(category)):
        logger.warning(f"Cycle refused: category {category.id} under {parent_id}")
        raise FieldValidationError(
            "Une catégorie ne peut pas être placée sous elle-même.",
            {"parent_id": ["La catégorie parente ne peut pas être un descendant."]}
        )


def _slug_for(db: Session, name: str, exclude_id: Optional[int] = None) -> str:
    return unique_slug(db, Category, slugify(name) or "categorie", exclude_id)


def create_category(db: Session, data: Dict[str, Any]) -> Category:
    _check_parent(db, data.get("parent_id"))

    category = Category(**data)
    category.slug = _slug_for(db, data["name"])
    if not category.order:
        category.order = next_order(db, category.parent_id)

    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info(f"Category {category.id} '{category.slug}' created")
    return category


def update_category(db: Session, category: Category, data: Dict[str, Any]) -> Category:
    data = {k: v for k, v in data.items() if v is not None or k not in ("name", "order")}
    if "parent_id" in data:
        _check_parent(db, data["parent_id"], category)
    if "name" in data:
        data["slug"] = _slug_for(db, data["name"], category.id)

    for field, value in data.items():
        setattr(category, field, value)

    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, category: Category) -> None:
    """Les sous-catégories remontent d'un niveau, les pages perdent leur catégorie"""
    category_id = category.id
    db.query(Category).filter(Category.parent_id == category_id).update(
        {Category.parent_id: category.parent_id}, synchronize_session=False
    )
    db.query(Page).filter(Page.category_id == category_id).update(
        {Page.category_id: None}, synchronize_session=False
    )
    # relations rechargées : plus aucun enfant à détacher
    db.expire_all()
    db.delete(category)
    db.commit()
    logger.info(f"Category {category_id} deleted")


def reorder_categories(db: Session, items: List[Dict[str, int]]) -> None:
    for item in items:
        db.query(Category).filter(Category.id == item["id"]).update({Category.order: item["order"]}, synchronize_session=False)
    db.commit()
    logger.info(f"Reordered {len(items)} categories")


def to_tree(category: Category) -> CategoryTree:
    """Catégorie avec tout son sous-arbre (all_children) et ses pages"""
    return CategoryTree(
        **CategoryResponse.model_validate(category).model_dump(),
        all_children=[to_tree(child) for child in category.children],
        pages=[PageResponse.model_validate(page) for page in category.pages]
    )
