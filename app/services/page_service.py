# IMPORTS
import logging
from sqlalchemy.orm import Session, selectinload
from app.models.page import Page
from app.models.category import Category
from app.services.slug_service import slugify
from app.core.errors import FieldValidationError
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

NON_NULLABLE_FIELDS = ("title", "slug", "is_published", "order")


# func 1: list_pages()
def list_pages(db: Session) -> List[Page]:
    # toutes les pages, les plus récemment modifiées d'abord
    return db.query(Page).options(
        selectinload(Page.user),
        selectinload(Page.children),
        selectinload(Page.category)
    ).order_by(Page.updated_at.desc(), Page.id.desc()).all()


# func 2: get_page_by_id_or_slug()
def get_page_by_id_or_slug(db: Session, id_or_slug: str) -> Optional[Page]:
    query = db.query(Page)
    if str(id_or_slug).isdigit():
        page = query.filter(Page.id == int(id_or_slug)).first()
        if page:
            return page
    return query.filter(Page.slug == str(id_or_slug)).first()


def _check_references(db: Session, data: Dict[str, Any], page_id: Optional[int] = None) -> None:
    parent_id = data.get("parent_id")
    if parent_id is not None:
        if parent_id == page_id or not db.query(Page).filter(Page.id == parent_id).first():
            raise FieldValidationError("Page parente invalide.", {"parent_id": ["La page parente sélectionnée est invalide."]})
    category_id = data.get("category_id")
    if category_id is not None and not db.query(Category).filter(Category.id == category_id).first():
        raise FieldValidationError("Catégorie invalide.", {"category_id": ["La catégorie sélectionnée est invalide."]})


# func 3: create_page()
def create_page(db: Session, user_id: int, data: Dict[str, Any]) -> Page:
    slug = slugify(data["title"])
    if not slug:
        raise FieldValidationError("Titre invalide.", {"title": ["Ce titre ne génère pas de lien valide."]})

    # pas de suffixe automatique : un doublon bloque la création
    if db.query(Page).filter(Page.slug == slug).first():
        raise FieldValidationError(
            "Une page avec ce titre existe déjà (doublon de lien).",
            {"title": ["Ce titre génère un lien qui est déjà utilisé."]}
        )
    _check_references(db, data)

    page = Page(user_id=user_id, slug=slug, **data)
    db.add(page)
    db.commit()
    db.refresh(page)
    logger.info(f"Page {page.id} '{page.slug}' created by user {user_id}")
    return page


# func 4: update_page()
def update_page(db: Session, page: Page, data: Dict[str, Any]) -> Page:
    # un null explicite sur une colonne obligatoire est ignoré
    data = {k: v for k, v in data.items() if v is not None or k not in NON_NULLABLE_FIELDS}
    if "slug" in data:
        slug = data["slug"]
        if slugify(slug) != slug:
            raise FieldValidationError(
                "Ce lien n'est pas valide.",
                {"slug": ["Le slug ne peut contenir que des minuscules, des chiffres et des tirets."]}
            )
        taken = db.query(Page).filter(Page.slug == slug, Page.id != page.id).first()
        if taken:
            raise FieldValidationError("Ce lien est déjà utilisé.", {"slug": ["La valeur du champ slug est déjà utilisée."]})
    _check_references(db, data, page.id)

    for field, value in data.items():
        setattr(page, field, value)

    db.commit()
    db.refresh(page)
    return page


# func 5: delete_page()
def delete_page(db: Session, page: Page) -> None:
    page_id = page.id
    # les sous-pages remontent à la racine
    for child in page.children:
        child.parent_id = None
    db.delete(page)
    db.commit()
    logger.info(f"Page {page_id} deleted")


# func 6: reorder_pages()
def reorder_pages(db: Session, items: List[Dict[str, int]]) -> None:
    for item in items:
        db.query(Page).filter(Page.id == item["id"]).update({Page.order: item["order"]}, synchronize_session=False)
    db.commit()
    logger.info(f"Reordered {len(items)} pages")
