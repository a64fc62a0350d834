"""
Éditeur de blocks.

Possède une séquence de blocks et applique les opérations d'édition
(insertion, suppression, déplacement, modifications par type, colonnes,
touches Entrée/Retour arrière).

Les colonnes imbriquées sont adressées par un chemin d'indices : une suite
plate de paires (index du block columns, index de la colonne). Le chemin
vide désigne la séquence de premier niveau. Toutes les mutations passent
par apply_at() qui reconstruit les listes touchées sans jamais modifier
les blocks existants.
"""

import logging
import uuid
from typing import Callable, List, Optional, Sequence

from app.schemas.block import (
    Block, Column, TextBlock, TodoBlock, ImageBlock, VideoBlock, CodeBlock,
    DividerBlock, TableBlock, ColumnsBlock,
    BLOCK_TYPES, TEXT_TYPES, LIST_TYPES, FONT_SIZES, MAX_COLUMNS, MIN_COLUMNS,
)

logger = logging.getLogger(__name__)

Path = Sequence[int]
Mutation = Callable[[List[Block]], List[Block]]

_VARIANTS = {
    "todo": TodoBlock,
    "image": ImageBlock,
    "video": VideoBlock,
    "code": CodeBlock,
    "divider": DividerBlock,
    "table": TableBlock,
    "columns": ColumnsBlock,
}

# blocks qui réagissent à Entrée / Retour arrière
_KEYBOARD_TYPES = TEXT_TYPES + ("todo",)


class BlockEditorError(Exception):
    """Opération refusée ou invalide, la séquence n'est pas modifiée"""


def new_block_id() -> str:
    return uuid.uuid4().hex[:9]


def new_block(block_type: str) -> Block:
    """Crée un block vide avec la forme par défaut de son type"""
    if block_type not in BLOCK_TYPES:
        raise BlockEditorError(f"Type de block inconnu: {block_type}")

    block_id = new_block_id()
    if block_type == "todo":
        return TodoBlock(id=block_id, type="todo", content="", checked=False)
    if block_type == "columns":
        return ColumnsBlock(id=block_id, type="columns", columns=[_new_column(), _new_column()])
    if block_type == "table":
        return TableBlock(id=block_id, type="table", table_data=[["", ""], ["", ""]])
    if block_type == "divider":
        return DividerBlock(id=block_id, type="divider")
    cls = _VARIANTS.get(block_type, TextBlock)
    return cls(id=block_id, type=block_type, content="")


def _new_column() -> Column:
    return Column(id=new_block_id(), blocks=[new_block("text")])


def _apply(blocks: List[Block], path: Path, mutation: Mutation) -> List[Block]:
    if not path:
        return mutation(list(blocks))
    if len(path) < 2:
        raise BlockEditorError(f"Chemin invalide: {list(path)}")

    block_index, column_index = path[0], path[1]
    if not 0 <= block_index < len(blocks):
        raise BlockEditorError(f"Index de block hors limites: {block_index}")
    target = blocks[block_index]
    if target.type != "columns":
        raise BlockEditorError(f"Le block {target.id} n'a pas de colonnes")
    if not 0 <= column_index < len(target.columns):
        raise BlockEditorError(f"Index de colonne hors limites: {column_index}")

    column = target.columns[column_index]
    columns = list(target.columns)
    columns[column_index] = column.model_copy(update={"blocks": _apply(column.blocks, path[2:], mutation)})

    result = list(blocks)
    result[block_index] = target.model_copy(update={"columns": columns})
    return result


def _find(blocks: List[Block], block_id: str) -> int:
    for i, block in enumerate(blocks):
        if block.id == block_id:
            return i
    raise BlockEditorError(f"Block introuvable: {block_id}")


class BlockEditor:
    def __init__(self, blocks: Optional[List[Block]] = None):
        self.blocks: List[Block] = list(blocks) if blocks else [new_block("text")]
        self.focused_id: Optional[str] = None

    # ---------- accès par chemin ----------

    def apply_at(self, path: Path, mutation: Mutation) -> None:
        self.blocks = _apply(self.blocks, tuple(path), mutation)

    def scope(self, path: Path = ()) -> List[Block]:
        blocks = self.blocks
        path = tuple(path)
        while path:
            if len(path) < 2 or not 0 <= path[0] < len(blocks) or blocks[path[0]].type != "columns":
                raise BlockEditorError(f"Chemin invalide: {list(path)}")
            columns = blocks[path[0]].columns
            if not 0 <= path[1] < len(columns):
                raise BlockEditorError(f"Index de colonne hors limites: {path[1]}")
            blocks = columns[path[1]].blocks
            path = path[2:]
        return blocks

    def _replace(self, block_id: str, path: Path, update: Callable[[Block], Block]) -> None:
        def mutation(blocks: List[Block]) -> List[Block]:
            i = _find(blocks, block_id)
            blocks[i] = update(blocks[i])
            return blocks
        self.apply_at(path, mutation)

    # ---------- insertion / suppression ----------

    def insert_after(self, index: int, block_type: str, path: Path = ()) -> str:
        if block_type == "columns" and path:
            raise BlockEditorError("Les colonnes imbriquées ne sont pas supportées")
        block = new_block(block_type)

        def mutation(blocks: List[Block]) -> List[Block]:
            if not -1 <= index < len(blocks):
                raise BlockEditorError(f"Index hors limites: {index}")
            blocks.insert(index + 1, block)
            return blocks

        self.apply_at(path, mutation)
        self.focused_id = block.id
        return block.id

    def append(self, block_type: str, path: Path = ()) -> str:
        return self.insert_after(len(self.scope(path)) - 1, block_type, path)

    def delete(self, block_id: str, path: Path = ()) -> None:
        def mutation(blocks: List[Block]) -> List[Block]:
            i = _find(blocks, block_id)
            # on garde toujours au moins un block au premier niveau
            if not path and len(blocks) <= 1:
                raise BlockEditorError("Impossible de supprimer le dernier block")
            del blocks[i]
            return blocks
        self.apply_at(path, mutation)

    def reorder(self, from_index: int, to_index: int, path: Path = ()) -> None:
        def mutation(blocks: List[Block]) -> List[Block]:
            if not 0 <= from_index < len(blocks) or not 0 <= to_index < len(blocks):
                raise BlockEditorError(f"Déplacement hors limites: {from_index} -> {to_index}")
            moved = blocks.pop(from_index)
            blocks.insert(to_index, moved)
            return blocks
        self.apply_at(path, mutation)

    # ---------- modifications par type ----------

    def update_content(self, block_id: str, content: str, path: Path = ()) -> None:
        def update(block: Block) -> Block:
            if block.type in ("divider", "columns", "table"):
                raise BlockEditorError(f"Le block {block.type} n'a pas de contenu texte")
            return block.model_copy(update={"content": content})
        self._replace(block_id, path, update)

    def update_checked(self, block_id: str, checked: bool, path: Path = ()) -> None:
        def update(block: Block) -> Block:
            if block.type != "todo":
                raise BlockEditorError("Seul un block todo peut être coché")
            return block.model_copy(update={"checked": checked})
        self._replace(block_id, path, update)

    def update_table_data(self, block_id: str, table_data: List[List[str]], path: Path = ()) -> None:
        def update(block: Block) -> Block:
            if block.type != "table":
                raise BlockEditorError("Seul un block table a des données de tableau")
            return block.model_copy(update={"table_data": [list(row) for row in table_data]})
        self._replace(block_id, path, update)

    def update_font_size(self, block_id: str, font_size: Optional[str], path: Path = ()) -> None:
        if font_size is not None and font_size not in FONT_SIZES:
            raise BlockEditorError(f"Taille inconnue: {font_size}")
        self._replace(block_id, path, lambda block: block.model_copy(update={"font_size": font_size}))

    def add_table_row(self, block_id: str, path: Path = ()) -> None:
        def update(block: Block) -> Block:
            if block.type != "table":
                raise BlockEditorError("Seul un block table a des lignes")
            width = len(block.table_data[0]) if block.table_data else 2
            return block.model_copy(update={"table_data": [list(row) for row in block.table_data] + [[""] * width]})
        self._replace(block_id, path, update)

    def add_table_column(self, block_id: str, path: Path = ()) -> None:
        def update(block: Block) -> Block:
            if block.type != "table":
                raise BlockEditorError("Seul un block table a des colonnes")
            rows = [list(row) + [""] for row in block.table_data] or [["", ""]]
            return block.model_copy(update={"table_data": rows})
        self._replace(block_id, path, update)

    # ---------- colonnes ----------

    def add_column(self, block_id: str, path: Path = ()) -> str:
        column = _new_column()

        def update(block: Block) -> Block:
            if block.type != "columns":
                raise BlockEditorError("Le block n'est pas un block colonnes")
            if len(block.columns) >= MAX_COLUMNS:
                raise BlockEditorError(f"Maximum {MAX_COLUMNS} colonnes")
            return block.model_copy(update={"columns": list(block.columns) + [column]})

        self._replace(block_id, path, update)
        return column.id

    def remove_column(self, block_id: str, column_id: str, path: Path = ()) -> None:
        def update(block: Block) -> Block:
            if block.type != "columns":
                raise BlockEditorError("Le block n'est pas un block colonnes")
            if len(block.columns) <= MIN_COLUMNS:
                raise BlockEditorError(f"Minimum {MIN_COLUMNS} colonne")
            columns = [c for c in block.columns if c.id != column_id]
            if len(columns) == len(block.columns):
                raise BlockEditorError(f"Colonne introuvable: {column_id}")
            return block.model_copy(update={"columns": columns})
        self._replace(block_id, path, update)

    # ---------- clavier ----------

    def press_enter(self, block_id: str, path: Path = ()) -> Optional[str]:
        """Entrée sans modificateur : nouveau block du même type juste après"""
        blocks = self.scope(path)
        index = _find(blocks, block_id)
        block = blocks[index]
        if block.type not in _KEYBOARD_TYPES:
            return None
        return self.insert_after(index, block.type, path)

    def press_backspace(self, block_id: str, path: Path = ()) -> bool:
        """Retour arrière sur un block de liste vide : redevient du texte"""
        blocks = self.scope(path)
        block = blocks[_find(blocks, block_id)]
        if block.type not in LIST_TYPES or block.content != "":
            return False

        def demote(current: Block) -> Block:
            return TextBlock(id=current.id, type="text", content="", font_size=current.font_size)

        self._replace(block_id, path, demote)
        logger.debug(f"Block {block_id} demoted to text")
        return True
