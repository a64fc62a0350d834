import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from app.core.database import get_db
from app.core.deps import get_current_user
from app.core.permissions import require_admin
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate, UserResponse, UserMessageResponse
from app.services.user_service import create_user, get_user_by_username

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

def _username_taken():
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"message": "Ce pseudo est déjà utilisé.", "errors": {"username": ["La valeur du champ username est déjà utilisée."]}}
    )

def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user

@router.get("", response_model=List[UserResponse])
def list_users(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    # Seuls les admins voient la liste complète
    require_admin(current_user)
    return db.query(User).order_by(User.id).all()

@router.post("", response_model=UserMessageResponse, status_code=status.HTTP_201_CREATED)
def store_user(user_data: UserCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    require_admin(current_user)
    if get_user_by_username(db, user_data.username):
        raise _username_taken()

    user = create_user(db, user_data.username, user_data.password, user_data.role)
    return {"user": user, "message": "Utilisateur créé avec succès"}

@router.get("/{user_id}", response_model=UserResponse)
def show_user(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    require_admin(current_user)
    return _get_user_or_404(db, user_id)

@router.put("/{user_id}", response_model=UserMessageResponse)
def update_user(user_id: int, user_data: UserUpdate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    require_admin(current_user)
    user = _get_user_or_404(db, user_id)

    if user_data.username is not None:
        existing = get_user_by_username(db, user_data.username)
        if existing and existing.id != user.id:
            raise _username_taken()
        user.username = user_data.username
    if user_data.role is not None:
        user.role = user_data.role
    # mot de passe vide = inchangé
    if user_data.password:
        if len(user_data.password) < 8:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={"message": "Mot de passe trop court.", "errors": {"password": ["Le mot de passe doit contenir au moins 8 caractères."]}}
            )
        user.set_password(user_data.password)

    db.commit()
    db.refresh(user)
    return {"user": user, "message": "Utilisateur mis à jour avec succès"}

@router.delete("/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    require_admin(current_user)
    user = _get_user_or_404(db, user_id)

    # un admin ne peut pas supprimer son propre compte
    if user.id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Vous ne pouvez pas supprimer votre propre compte admin"}
        )

    db.delete(user)
    db.commit()
    logger.info(f"User {user_id} deleted by {current_user.id}")
    return {"message": "Utilisateur supprimé avec succès"}
