from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional, List

from app.schemas.page import PageResponse

class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    parent_id: Optional[int] = None
    icon: Optional[str] = None
    order: int = 0

class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    parent_id: Optional[int] = None
    icon: Optional[str] = None
    order: Optional[int] = None

class CategoryResponse(BaseModel):
    id: int
    parent_id: Optional[int]
    name: str
    slug: str
    description: Optional[str]
    icon: Optional[str]
    order: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class CategoryWithChildren(CategoryResponse):
    children: List[CategoryResponse] = []

class CategoryTree(CategoryResponse):
    """Catégorie racine avec tout son sous-arbre et ses pages"""
    all_children: List["CategoryTree"] = []
    pages: List[PageResponse] = []
CategoryTree.model_rebuild()
