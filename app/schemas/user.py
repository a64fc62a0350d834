from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Literal, Optional

Role = Literal["admin", "user", "documentaliste"]

class UserCreate(BaseModel):
    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=8)
    role: Role

class UserUpdate(BaseModel):
    username: Optional[str] = Field(default=None, min_length=1, max_length=255)
    password: Optional[str] = None  # vide = inchangé
    role: Optional[Role] = None

class UserResponse(BaseModel):
    id: int
    username: str
    role: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class UserMessageResponse(BaseModel):
    user: UserResponse
    message: str

class LoginRequest(BaseModel):
    username: str
    password: str

class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: Optional[UserResponse] = None
