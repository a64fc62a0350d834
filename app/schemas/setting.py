from pydantic import BaseModel
from typing import Any, Dict

class SettingsUpdate(BaseModel):
    settings: Dict[str, Any]

class MaintenanceResponse(BaseModel):
    maintenance: bool
    message: str
