import logging
from sqlalchemy.orm import Session
from typing import Optional

from app.core.permissions import ROLE_ADMIN
from app.models.user import User

logger = logging.getLogger(__name__)


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def authenticate(db: Session, username: str, password: str) -> Optional[User]:
    user = get_user_by_username(db, username)
    if not user or not user.verify_password(password):
        return None
    return user


def create_user(db: Session, username: str, password: str, role: str) -> User:
    user = User(username=username, role=role)
    user.set_password(password)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.id} '{username}' created with role {role}")
    return user


def create_admin(db: Session, username: str, password: str) -> User:
    """Crée le compte admin s'il n'existe pas encore"""
    existing = get_user_by_username(db, username)
    if existing:
        return existing
    return create_user(db, username, password, ROLE_ADMIN)
