import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from app.core.config import settings
from app.core.database import get_db
from app.core.deps import require_elevated_user, require_site_open
from app.models.user import User
from app.models.tag import Tag
from app.schemas.tag import TagCreate, TagUpdate, TagResponse
from app.schemas.structure import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tags", tags=["tags"])

def _name_taken(db: Session, name: str, exclude_id: int = None) -> bool:
    query = db.query(Tag).filter(Tag.name == name)
    if exclude_id is not None:
        query = query.filter(Tag.id != exclude_id)
    return query.first() is not None

def _duplicate_name():
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"message": "Ce tag existe déjà.", "errors": {"name": ["La valeur du champ name est déjà utilisée."]}}
    )

def _get_tag_or_404(db: Session, tag_id: int) -> Tag:
    tag = db.query(Tag).filter(Tag.id == tag_id).first()
    if not tag:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tag not found")
    return tag

@router.get("", response_model=List[TagResponse])
def list_tags(db: Session = Depends(get_db), current_user: User = Depends(require_site_open)):
    return db.query(Tag).order_by(Tag.id).all()

@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
def create_tag(tag_data: TagCreate, db: Session = Depends(get_db), current_user: User = Depends(require_elevated_user)):
    # les noms sont stockés en majuscules
    name = tag_data.name.upper()
    if _name_taken(db, name):
        raise _duplicate_name()

    tag = Tag(name=name, color=tag_data.color or settings.DEFAULT_TAG_COLOR)
    db.add(tag)
    db.commit()
    db.refresh(tag)
    return tag

@router.put("/{tag_id}", response_model=TagResponse)
def update_tag(tag_id: int, tag_data: TagUpdate, db: Session = Depends(get_db), current_user: User = Depends(require_elevated_user)):
    tag = _get_tag_or_404(db, tag_id)

    if tag_data.name is not None:
        name = tag_data.name.upper()
        if _name_taken(db, name, tag.id):
            raise _duplicate_name()
        tag.name = name
    if tag_data.color is not None:
        # les pages gardent la couleur copiée au moment du tagging
        tag.color = tag_data.color

    db.commit()
    db.refresh(tag)
    return tag

@router.delete("/{tag_id}", response_model=MessageResponse)
def delete_tag(tag_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_elevated_user)):
    tag = _get_tag_or_404(db, tag_id)
    db.delete(tag)
    db.commit()
    logger.info(f"Tag {tag_id} deleted")
    return {"message": "Tag supprimé"}
