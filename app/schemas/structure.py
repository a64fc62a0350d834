from pydantic import BaseModel, ConfigDict
from typing import List, Literal

NodeType = Literal["category", "page"]


class StructureItem(BaseModel):
    """Nouveau rang d'une catégorie ou d'une page"""
    id: int
    type: NodeType
    order: int


class StructureReorder(BaseModel):
    items: List[StructureItem]


class StructureMove(BaseModel):
    id: int
    type: NodeType
    direction: Literal["up", "down"]


class StructureNodeResponse(BaseModel):
    id: int
    type: NodeType
    title: str
    order: int
    children: List["StructureNodeResponse"] = []

    model_config = ConfigDict(from_attributes=True)


class OrderItem(BaseModel):
    id: int
    order: int


class CategoryReorder(BaseModel):
    categories: List[OrderItem]


class PageReorder(BaseModel):
    pages: List[OrderItem]


class MessageResponse(BaseModel):
    message: str

StructureNodeResponse.model_rebuild()
