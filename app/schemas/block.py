"""Modèle de document en blocs.

Une page est une séquence ordonnée de blocs typés. Le champ ``type`` est
un discriminant fermé : chaque variante ne porte que les champs qui lui
sont valides (un ``todo`` a toujours ``checked``, un ``table`` toujours
``tableData``...). Les blocs ``columns`` contiennent des colonnes qui
contiennent à leur tour des séquences de blocs.

Le format JSON garde les clés camelCase du client (``tableData``,
``fontSize``).
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

BLOCK_TYPES = (
    "text", "h1", "h2", "h3", "image", "code", "quote", "divider",
    "callout", "todo", "bullet", "number", "video", "columns", "table",
)
TEXT_TYPES = ("text", "h1", "h2", "h3", "quote", "callout", "bullet", "number")
LIST_TYPES = ("bullet", "number", "todo")
FONT_SIZES = ("sm", "base", "lg", "xl", "2xl", "3xl")

MAX_COLUMNS = 5
MIN_COLUMNS = 1

BlockType = Literal[
    "text", "h1", "h2", "h3", "image", "code", "quote", "divider",
    "callout", "todo", "bullet", "number", "video", "columns", "table",
]
FontSize = Literal["sm", "base", "lg", "xl", "2xl", "3xl"]


class BaseBlock(BaseModel):
    id: str
    font_size: Optional[FontSize] = Field(default=None, alias="fontSize")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class TextBlock(BaseBlock):
    """Texte simple, titres, citation, encadré, puces et listes numérotées"""
    type: Literal["text", "h1", "h2", "h3", "quote", "callout", "bullet", "number"]
    content: str = ""


class TodoBlock(BaseBlock):
    type: Literal["todo"]
    content: str = ""
    checked: bool = False


class ImageBlock(BaseBlock):
    type: Literal["image"]
    content: str = ""  # URL de l'image


class VideoBlock(BaseBlock):
    type: Literal["video"]
    content: str = ""  # URL de la vidéo


class CodeBlock(BaseBlock):
    type: Literal["code"]
    content: str = ""


class DividerBlock(BaseBlock):
    type: Literal["divider"]


class TableBlock(BaseBlock):
    type: Literal["table"]
    table_data: List[List[str]] = Field(default_factory=lambda: [["", ""], ["", ""]], alias="tableData")


class Column(BaseModel):
    id: str
    blocks: List["Block"] = []

    model_config = ConfigDict(frozen=True)


class ColumnsBlock(BaseBlock):
    type: Literal["columns"]
    columns: List[Column] = Field(min_length=MIN_COLUMNS, max_length=MAX_COLUMNS)


Block = Annotated[
    Union[TextBlock, TodoBlock, ImageBlock, VideoBlock, CodeBlock, DividerBlock, TableBlock, ColumnsBlock],
    Field(discriminator="type"),
]

Column.model_rebuild()
ColumnsBlock.model_rebuild()

_document_adapter = TypeAdapter(List[Block])
_block_adapter = TypeAdapter(Block)


def parse_block(raw: Dict[str, Any]) -> Block:
    return _block_adapter.validate_python(raw)


def parse_document(raw: Optional[List[Any]]) -> List[Block]:
    """Valide une liste JSON brute en blocs typés (lève ValidationError)"""
    return _document_adapter.validate_python(raw or [])


def dump_block(block: Block) -> Dict[str, Any]:
    return block.model_dump(by_alias=True, exclude_none=True)


def dump_document(blocks: List[Block]) -> List[Dict[str, Any]]:
    return _document_adapter.dump_python(blocks, by_alias=True, exclude_none=True)


def is_list_block(block: Block) -> bool:
    return block.type in LIST_TYPES


# ========== SCHEMAS OPÉRATIONS ÉDITEUR ==========

class BlockInsert(BaseModel):
    """Insérer un block (à la fin si after_index est absent)"""
    type: BlockType = "text"
    after_index: Optional[int] = None
    path: List[int] = []


class BlockUpdate(BaseModel):
    """Modifier les champs d'un block"""
    content: Optional[str] = None
    checked: Optional[bool] = None
    table_data: Optional[List[List[str]]] = Field(default=None, alias="tableData")
    font_size: Optional[FontSize] = Field(default=None, alias="fontSize")
    path: List[int] = []

    model_config = ConfigDict(populate_by_name=True)


class BlockReorder(BaseModel):
    from_index: int
    to_index: int
    path: List[int] = []


class BlockOperationResponse(BaseModel):
    """Contenu de la page après l'opération"""
    page_id: int
    block_id: Optional[str] = None
    focused_id: Optional[str] = None
    content: List[Dict[str, Any]]


class EditorKey(str, Enum):
    enter = "enter"
    backspace = "backspace"


class TableAxis(str, Enum):
    rows = "rows"
    columns = "columns"
