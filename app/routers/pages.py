from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError
from sqlalchemy.orm import Session
from typing import List

from app.core.database import get_db
from app.core.deps import require_elevated_user, require_site_open
from app.core.errors import FieldValidationError, validation_http_error
from app.core.permissions import can_edit_page, forbidden
from app.models.user import User
from app.models.page import Page
from app.schemas.block import parse_document
from app.schemas.page import PageCreate, PageUpdate, PageResponse, PageDetail, PageRender
from app.schemas.structure import PageReorder, MessageResponse
from app.services.block_renderer import render_document
from app.services import page_service

router = APIRouter(prefix="/pages", tags=["pages"])

def _get_page_or_404(db: Session, page_id: int) -> Page:
    page = db.query(Page).filter(Page.id == page_id).first()
    if not page:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")
    return page

@router.get("", response_model=List[PageDetail])
def list_pages(db: Session = Depends(get_db), current_user: User = Depends(require_site_open)):
    # toutes les pages, triées par date de modification décroissante
    return page_service.list_pages(db)

# Crée une page (tout utilisateur connecté)
@router.post("", response_model=PageResponse, status_code=status.HTTP_201_CREATED)
def create_page(page_data: PageCreate, db: Session = Depends(get_db), current_user: User = Depends(require_site_open)):
    try:
        return page_service.create_page(db, current_user.id, page_data.model_dump())
    except FieldValidationError as e:
        raise validation_http_error(e)

@router.post("/reorder", response_model=MessageResponse)
def reorder_pages(payload: PageReorder, db: Session = Depends(get_db), current_user: User = Depends(require_elevated_user)):
    ids = {item.id for item in payload.pages}
    found = {row.id for row in db.query(Page.id).filter(Page.id.in_(ids)).all()}
    missing = sorted(ids - found)
    if missing:
        raise validation_http_error(FieldValidationError(
            "Page inconnue.", {"pages": [f"La page {page_id} n'existe pas." for page_id in missing]}
        ))

    page_service.reorder_pages(db, [item.model_dump() for item in payload.pages])
    return {"message": "Ordre mis à jour"}

@router.get("/{id_or_slug}", response_model=PageDetail)
def get_page(id_or_slug: str, db: Session = Depends(get_db), current_user: User = Depends(require_site_open)):
    # par id ou par slug
    page = page_service.get_page_by_id_or_slug(db, id_or_slug)
    if not page:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")
    return page

@router.get("/{id_or_slug}/render", response_model=PageRender)
def render_page(id_or_slug: str, db: Session = Depends(get_db), current_user: User = Depends(require_site_open)):
    """Rendu HTML lecture seule du contenu de la page"""
    page = page_service.get_page_by_id_or_slug(db, id_or_slug)
    if not page:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")
    try:
        blocks = parse_document(page.content)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Contenu de page invalide.", "errors": {"content": [err["msg"] for err in e.errors()]}}
        )
    return {"id": page.id, "slug": page.slug, "title": page.title, "html": render_document(blocks)}

@router.put("/{page_id}", response_model=PageResponse)
def update_page(page_id: int, page_data: PageUpdate, db: Session = Depends(get_db), current_user: User = Depends(require_site_open)):
    page = _get_page_or_404(db, page_id)
    # seulement le créateur, un admin ou un documentaliste
    if not can_edit_page(current_user, page):
        raise forbidden()
    try:
        return page_service.update_page(db, page, page_data.model_dump(exclude_unset=True))
    except FieldValidationError as e:
        raise validation_http_error(e)

@router.delete("/{page_id}", response_model=MessageResponse)
def delete_page(page_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_site_open)):
    page = _get_page_or_404(db, page_id)
    if not can_edit_page(current_user, page):
        raise forbidden()
    page_service.delete_page(db, page)
    return {"message": "Page supprimée"}
