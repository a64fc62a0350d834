from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.deps import get_current_user
from app.core.security import create_access_token, create_refresh_token, verify_token
from app.models.user import User
from app.schemas.user import UserResponse, LoginRequest, TokenResponse
from app.services.user_service import authenticate

router = APIRouter(prefix="/auth", tags=["auth"])

def _tokens_for(user: User, refresh_token: str = None) -> dict:
    return {
        "access_token": create_access_token(user.id, user.username, user.role),
        "refresh_token": refresh_token or create_refresh_token(user.id, user.username, user.role),
        "token_type": "bearer",
        "user": UserResponse.model_validate(user)
    }

@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Se connecter et recevoir les tokens"""
    user = authenticate(db, credentials.username, credentials.password)
    if not user:
        # même format qu'une erreur de validation sur le champ username
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "message": "Le pseudo ou le mot de passe est incorrect.",
                "errors": {"username": ["Le pseudo ou le mot de passe est incorrect."]}
            }
        )
    return _tokens_for(user)

@router.post("/refresh", response_model=TokenResponse)
def refresh(refresh_token: str, db: Session = Depends(get_db)):
    """Utiliser un refresh_token pour obtenir un nouvel access_token"""
    payload = verify_token(refresh_token)
    if not payload or payload.get("type") != "refresh":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    user = db.query(User).filter(User.id == payload.get("user_id")).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    return _tokens_for(user, refresh_token)

@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
