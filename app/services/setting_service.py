"""Paramètres système et mode maintenance"""

import logging
from dataclasses import dataclass
from sqlalchemy.orm import Session
from typing import Any, Dict

from app.core.permissions import ROLE_ADMIN
from app.models.system_setting import SystemSetting

logger = logging.getLogger(__name__)

MAINTENANCE_MODE = "maintenance_mode"
MAINTENANCE_REASON = "maintenance_reason"

_TRUE_VALUES = ("1", "true", "on", "yes")


@dataclass(frozen=True)
class MaintenanceStatus:
    maintenance: bool = False
    message: str = ""


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in _TRUE_VALUES


def to_setting_value(value: Any) -> str:
    # les valeurs sont stockées en texte, "true"/"false" pour les booléens
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def get_settings(db: Session) -> Dict[str, str]:
    return {s.key: s.value for s in db.query(SystemSetting).order_by(SystemSetting.key).all()}


def get_setting(db: Session, key: str) -> str:
    setting = db.query(SystemSetting).filter(SystemSetting.key == key).first()
    return setting.value if setting else None


def update_settings(db: Session, values: Dict[str, Any]) -> None:
    for key, value in values.items():
        setting = db.query(SystemSetting).filter(SystemSetting.key == key).first()
        if setting is None:
            setting = SystemSetting(key=key)
            db.add(setting)
        setting.value = to_setting_value(value)
    db.commit()
    logger.info(f"Settings updated: {sorted(values)}")


def get_maintenance_status(db: Session) -> MaintenanceStatus:
    mode = get_setting(db, MAINTENANCE_MODE)
    reason = get_setting(db, MAINTENANCE_REASON)
    return MaintenanceStatus(maintenance=parse_bool(mode), message=reason or "")


def is_access_allowed(status: MaintenanceStatus, user) -> bool:
    """Pendant la maintenance seuls les admins passent"""
    if not status.maintenance:
        return True
    return user is not None and user.role == ROLE_ADMIN
