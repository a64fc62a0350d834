from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Dict

from app.core.database import get_db
from app.core.deps import get_current_user
from app.core.permissions import require_elevated
from app.models.user import User
from app.schemas.setting import SettingsUpdate, MaintenanceResponse
from app.schemas.structure import MessageResponse
from app.services import setting_service

router = APIRouter(tags=["settings"])

# Public : état de la maintenance
@router.get("/maintenance", response_model=MaintenanceResponse)
def check_maintenance(db: Session = Depends(get_db)):
    status = setting_service.get_maintenance_status(db)
    return {"maintenance": status.maintenance, "message": status.message}

@router.get("/admin/settings", response_model=Dict[str, str])
def get_settings(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    require_elevated(current_user)
    return setting_service.get_settings(db)

@router.post("/admin/settings", response_model=MessageResponse)
def update_settings(payload: SettingsUpdate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    require_elevated(current_user)
    setting_service.update_settings(db, payload.settings)
    return {"message": "Settings updated"}
