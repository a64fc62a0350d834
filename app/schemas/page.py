from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional, List, Any

from app.schemas.user import UserResponse

# Schemas pour les pages

class PageCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    parent_id: Optional[int] = None
    category_id: Optional[int] = None
    content: Optional[List[Any]] = None
    icon: Optional[str] = None
    cover_image: Optional[str] = None
    tag: Optional[str] = Field(default=None, max_length=50)
    tag_color: Optional[str] = Field(default=None, max_length=20)
    is_published: bool = False

class PageUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=255)
    parent_id: Optional[int] = None
    category_id: Optional[int] = None
    content: Optional[List[Any]] = None
    icon: Optional[str] = None
    cover_image: Optional[str] = None
    tag: Optional[str] = Field(default=None, max_length=50)
    tag_color: Optional[str] = Field(default=None, max_length=20)
    is_published: Optional[bool] = None
    order: Optional[int] = None

class PageResponse(BaseModel):
    id: int
    user_id: int
    parent_id: Optional[int]
    category_id: Optional[int]
    title: str
    slug: str
    content: Optional[List[Any]]
    order: int
    icon: Optional[str]
    cover_image: Optional[str]
    tag: Optional[str]
    tag_color: Optional[str]
    is_published: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class PageCategory(BaseModel):
    id: int
    name: str
    slug: str

    model_config = ConfigDict(from_attributes=True)

class PageDetail(PageResponse):
    """Page avec ses relations (user, sous-pages, catégorie)"""
    user: Optional[UserResponse] = None
    children: List[PageResponse] = []
    category: Optional[PageCategory] = None

class PageRender(BaseModel):
    id: int
    slug: str
    title: str
    html: str
