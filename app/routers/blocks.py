from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional, Tuple

from app.core.database import get_db
from app.core.deps import require_site_open
from app.core.permissions import can_edit_page, forbidden
from app.models.user import User
from app.models.page import Page
from app.schemas.block import (
    BlockInsert, BlockUpdate, BlockReorder, BlockOperationResponse, EditorKey, TableAxis,
    parse_document, dump_document, dump_block,
)
from app.services.block_editor import BlockEditor, BlockEditorError

router = APIRouter(prefix="/pages/{page_id}/blocks", tags=["blocks"])


def _load_editor(db: Session, page_id: int, current_user: User) -> Tuple[Page, BlockEditor]:
    """Charge la page et un éditeur sur son contenu"""
    page = db.query(Page).filter(Page.id == page_id).first()
    if not page:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")
    if not can_edit_page(current_user, page):
        raise forbidden()
    try:
        blocks = parse_document(page.content)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Contenu de page invalide.", "errors": {"content": [err["msg"] for err in e.errors()]}}
        )
    return page, BlockEditor(blocks)


def _editor_error(e: BlockEditorError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"message": str(e), "errors": {"block": [str(e)]}}
    )


def _save(db: Session, page: Page, editor: BlockEditor, block_id: Optional[str] = None) -> Dict[str, Any]:
    page.content = dump_document(editor.blocks)
    db.commit()
    db.refresh(page)
    return {"page_id": page.id, "block_id": block_id, "focused_id": editor.focused_id, "content": page.content}


@router.get("", response_model=List[Dict[str, Any]])
def list_blocks(page_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_site_open)):
    """Blocks de premier niveau de la page"""
    _, editor = _load_editor(db, page_id, current_user)
    return [dump_block(block) for block in editor.blocks]


@router.post("", response_model=BlockOperationResponse, status_code=status.HTTP_201_CREATED)
def insert_block(page_id: int, block_data: BlockInsert, db: Session = Depends(get_db), current_user: User = Depends(require_site_open)):
    """Insère un block après after_index, ou à la fin de la séquence"""
    page, editor = _load_editor(db, page_id, current_user)
    try:
        if block_data.after_index is None:
            block_id = editor.append(block_data.type, block_data.path)
        else:
            block_id = editor.insert_after(block_data.after_index, block_data.type, block_data.path)
    except BlockEditorError as e:
        raise _editor_error(e)
    return _save(db, page, editor, block_id)


@router.post("/reorder", response_model=BlockOperationResponse)
def reorder_block(page_id: int, payload: BlockReorder, db: Session = Depends(get_db), current_user: User = Depends(require_site_open)):
    """Glisser-déposer : déplace le block from_index vers to_index"""
    page, editor = _load_editor(db, page_id, current_user)
    try:
        editor.reorder(payload.from_index, payload.to_index, payload.path)
    except BlockEditorError as e:
        raise _editor_error(e)
    return _save(db, page, editor)


@router.patch("/{block_id}", response_model=BlockOperationResponse)
def update_block(page_id: int, block_id: str, block_data: BlockUpdate, db: Session = Depends(get_db), current_user: User = Depends(require_site_open)):
    page, editor = _load_editor(db, page_id, current_user)
    fields = block_data.model_fields_set
    try:
        if "content" in fields and block_data.content is not None:
            editor.update_content(block_id, block_data.content, block_data.path)
        if "checked" in fields and block_data.checked is not None:
            editor.update_checked(block_id, block_data.checked, block_data.path)
        if "table_data" in fields and block_data.table_data is not None:
            editor.update_table_data(block_id, block_data.table_data, block_data.path)
        if "font_size" in fields:
            # fontSize: null remet la taille par défaut
            editor.update_font_size(block_id, block_data.font_size, block_data.path)
    except BlockEditorError as e:
        raise _editor_error(e)
    return _save(db, page, editor, block_id)


@router.delete("/{block_id}", response_model=BlockOperationResponse)
def delete_block(page_id: int, block_id: str, path: List[int] = Query([]), db: Session = Depends(get_db), current_user: User = Depends(require_site_open)):
    page, editor = _load_editor(db, page_id, current_user)
    try:
        editor.delete(block_id, path)
    except BlockEditorError as e:
        raise _editor_error(e)
    return _save(db, page, editor)


@router.post("/{block_id}/keys/{key}", response_model=BlockOperationResponse)
def press_key(page_id: int, block_id: str, key: EditorKey, path: List[int] = Query([]), db: Session = Depends(get_db), current_user: User = Depends(require_site_open)):
    """Entrée : nouveau block du même type. Retour arrière sur liste vide : repasse en texte"""
    page, editor = _load_editor(db, page_id, current_user)
    try:
        if key == EditorKey.enter:
            new_id = editor.press_enter(block_id, path)
            return _save(db, page, editor, new_id or block_id)
        editor.press_backspace(block_id, path)
    except BlockEditorError as e:
        raise _editor_error(e)
    return _save(db, page, editor, block_id)


@router.post("/{block_id}/columns", response_model=BlockOperationResponse, status_code=status.HTTP_201_CREATED)
def add_column(page_id: int, block_id: str, path: List[int] = Query([]), db: Session = Depends(get_db), current_user: User = Depends(require_site_open)):
    page, editor = _load_editor(db, page_id, current_user)
    try:
        editor.add_column(block_id, path)
    except BlockEditorError as e:
        raise _editor_error(e)
    return _save(db, page, editor, block_id)


@router.delete("/{block_id}/columns/{column_id}", response_model=BlockOperationResponse)
def remove_column(page_id: int, block_id: str, column_id: str, path: List[int] = Query([]), db: Session = Depends(get_db), current_user: User = Depends(require_site_open)):
    page, editor = _load_editor(db, page_id, current_user)
    try:
        editor.remove_column(block_id, column_id, path)
    except BlockEditorError as e:
        raise _editor_error(e)
    return _save(db, page, editor, block_id)


@router.post("/{block_id}/table/{axis}", response_model=BlockOperationResponse)
def grow_table(page_id: int, block_id: str, axis: TableAxis, path: List[int] = Query([]), db: Session = Depends(get_db), current_user: User = Depends(require_site_open)):
    """Ajoute une ligne ou une colonne vide au tableau"""
    page, editor = _load_editor(db, page_id, current_user)
    try:
        if axis == TableAxis.rows:
            editor.add_table_row(block_id, path)
        else:
            editor.add_table_column(block_id, path)
    except BlockEditorError as e:
        raise _editor_error(e)
    return _save(db, page, editor, block_id)
