from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import require_elevated_user
from app.core.permissions import ROLE_ADMIN, ROLE_USER
from app.models.user import User
from app.models.page import Page
from app.schemas.user import UserResponse

router = APIRouter(prefix="/admin", tags=["admin"])

@router.get("/stats")
def stats(db: Session = Depends(get_db), current_user: User = Depends(require_elevated_user)):
    # Compteurs du tableau de bord
    latest = db.query(User).order_by(User.created_at.desc(), User.id.desc()).limit(5).all()
    return {
        "total_users": db.query(User).count(),
        "admins_count": db.query(User).filter(User.role == ROLE_ADMIN).count(),
        "users_count": db.query(User).filter(User.role == ROLE_USER).count(),
        "total_pages": db.query(Page).count(),
        "latest_users": [UserResponse.model_validate(user) for user in latest]
    }
