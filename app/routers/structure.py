from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from app.core.database import get_db
from app.core.deps import require_elevated_user, require_site_open
from app.models.user import User
from app.schemas.page import PageResponse
from app.schemas.structure import StructureReorder, StructureMove, StructureNodeResponse, MessageResponse
from app.services.category_service import list_root_categories, to_tree
from app.services.page_service import list_pages
from app.services import structure_service

router = APIRouter(prefix="/structure", tags=["structure"])

def _current_structure(db: Session) -> List[structure_service.StructureNode]:
    # mêmes lectures que GET /categories et GET /pages
    categories = [to_tree(category).model_dump() for category in list_root_categories(db)]
    pages = [PageResponse.model_validate(page).model_dump() for page in list_pages(db)]
    return structure_service.build_structure(categories, pages)

@router.get("", response_model=List[StructureNodeResponse])
def get_structure(db: Session = Depends(get_db), current_user: User = Depends(require_site_open)):
    """Arbre unifié catégories + pages, trié par order à chaque niveau"""
    return [StructureNodeResponse.model_validate(node) for node in _current_structure(db)]

@router.post("/reorder", response_model=MessageResponse)
def reorder_structure(payload: StructureReorder, db: Session = Depends(get_db), current_user: User = Depends(require_elevated_user)):
    # rôle déjà vérifié par la dépendance, rien n'est écrit sinon
    structure_service.apply_reorder(db, payload.items)
    return {"message": "Structure updated"}

@router.post("/move", response_model=MessageResponse)
def move_node(payload: StructureMove, db: Session = Depends(get_db), current_user: User = Depends(require_elevated_user)):
    """Monte/descend un noeud parmi ses frères et réécrit toute la fratrie"""
    siblings = structure_service.find_siblings(_current_structure(db), payload.id, payload.type)
    if siblings is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Node not found")

    items = structure_service.compute_move(siblings, payload.id, payload.type, payload.direction)
    if items is None:
        return {"message": "Nothing to move"}

    structure_service.apply_reorder(db, items)
    return {"message": "Structure updated"}
