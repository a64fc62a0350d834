"""
Rendu lecture seule des blocks en HTML.

Le rendu est une fonction pure du block et de sa séquence de frères : la
séquence ne sert qu'à calculer le numéro des listes numérotées et
l'espacement entre blocks de liste adjacents.
"""

from html import escape
from typing import List, Optional, Sequence

from app.schemas.block import Block, is_list_block

# Taille par défaut quand le block n'a pas de fontSize
DEFAULT_FONT_SIZES = {"h1": "5xl", "h2": "4xl", "h3": "3xl", "quote": "xl"}

GAP_TIGHT = "tight"
GAP_WIDE = "wide"


def number_ordinal(blocks: Sequence[Block], index: int) -> int:
    # 1 + longueur de la suite de "number" juste avant index
    count = 1
    for i in range(index - 1, -1, -1):
        if blocks[i].type != "number":
            break
        count += 1
    return count


def gap_after(blocks: Sequence[Block], index: int) -> str:
    # deux blocks de liste adjacents se lisent comme une seule liste
    if index + 1 < len(blocks) and is_list_block(blocks[index]) and is_list_block(blocks[index + 1]):
        return GAP_TIGHT
    return GAP_WIDE


def font_size_class(block: Block) -> str:
    size = block.font_size or DEFAULT_FONT_SIZES.get(block.type, "base")
    return f"text-{size}"


def lightbox_source(block: Block, activation: str) -> Optional[str]:
    """URL à ouvrir en plein écran, uniquement sur double activation d'une image"""
    if block.type == "image" and activation == "double" and block.content:
        return block.content
    return None


def _index_of(block: Block, siblings: Sequence[Block]) -> int:
    for i, sibling in enumerate(siblings):
        if sibling.id == block.id:
            return i
    return -1


def render_block(block: Block, siblings: Sequence[Block] = (), index: Optional[int] = None) -> str:
    size = font_size_class(block)
    kind = block.type

    if kind in ("h1", "h2", "h3"):
        return f'<{kind} class="block-heading {size}">{escape(block.content)}</{kind}>'
    if kind == "text":
        return f'<p class="block-text {size}">{escape(block.content)}</p>'
    if kind == "quote":
        return f'<blockquote class="block-quote {size}">{escape(block.content)}</blockquote>'
    if kind == "callout":
        return f'<div class="block-callout {size}"><p>{escape(block.content)}</p></div>'
    if kind == "divider":
        return '<hr class="block-divider">'
    if kind == "todo":
        state = " is-checked" if block.checked else ""
        return (
            f'<div class="block-todo{state} {size}">'
            f'<span class="todo-box" data-checked="{str(block.checked).lower()}"></span>'
            f'<span class="todo-text">{escape(block.content)}</span></div>'
        )
    if kind == "bullet":
        return (
            f'<div class="block-bullet {size}"><span class="bullet-marker"></span>'
            f'<span>{escape(block.content)}</span></div>'
        )
    if kind == "number":
        # index fourni par render_sequence, sinon recherche par id
        if index is None:
            index = _index_of(block, siblings)
        ordinal = number_ordinal(siblings, index) if index >= 0 else 1
        return (
            f'<div class="block-number {size}"><span class="number-marker">{ordinal}.</span>'
            f'<span>{escape(block.content)}</span></div>'
        )
    if kind == "image":
        src = escape(block.content)
        zoom = lightbox_source(block, "double")
        lightbox = f' data-lightbox="dblclick" data-lightbox-src="{escape(zoom)}"' if zoom else ""
        return f'<figure class="block-image"><img src="{src}" alt="Content"{lightbox}></figure>'
    if kind == "video":
        return f'<div class="block-video" data-src="{escape(block.content)}"></div>'
    if kind == "code":
        return f'<pre class="block-code"><code>{escape(block.content)}</code></pre>'
    if kind == "columns":
        columns = "".join(
            f'<div class="block-column" data-column-id="{escape(column.id)}">{render_sequence(column.blocks)}</div>'
            for column in block.columns
        )
        return f'<div class="block-columns">{columns}</div>'
    if kind == "table":
        rows = "".join(
            "<tr>" + "".join(f"<td>{escape(cell)}</td>" for cell in row) + "</tr>"
            for row in block.table_data
        )
        return f'<table class="block-table"><tbody>{rows}</tbody></table>'
    return ""


def render_sequence(blocks: List[Block]) -> str:
    parts = []
    for index, block in enumerate(blocks):
        parts.append(
            f'<div class="block gap-{gap_after(blocks, index)}" data-block-id="{escape(block.id)}">'
            f"{render_block(block, blocks, index)}</div>"
        )
    return "".join(parts)


def render_document(blocks: List[Block]) -> str:
    return f'<article class="page-content">{render_sequence(blocks)}</article>'
