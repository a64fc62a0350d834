from fastapi import Depends, HTTPException, Header, status
from sqlalchemy.orm import Session
from typing import Optional

from app.core.database import get_db
from app.core.permissions import require_elevated
from app.core.security import decode_token
from app.models.user import User
from app.services.setting_service import get_maintenance_status, is_access_allowed


def get_current_user(db: Session = Depends(get_db), authorization: Optional[str] = Header(None)) -> User:
    """
    Récupère l'utilisateur depuis le JWT token.

    Réutilisée par tous les routers pour protéger les routes : extrait le
    token du header Authorization, le valide, et retourne l'user.
    """
    if not authorization:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")

    token = authorization.replace("Bearer ", "")
    user_id = decode_token(token)
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    return user


def require_site_open(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> User:
    # Bloque les non-admins pendant la maintenance
    maintenance = get_maintenance_status(db)
    if not is_access_allowed(maintenance, current_user):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"message": maintenance.message or "Maintenance en cours"}
        )
    return current_user


def require_elevated_user(current_user: User = Depends(require_site_open)) -> User:
    """Admin ou documentaliste, vérifié avant la validation du corps de la requête"""
    require_elevated(current_user)
    return current_user
