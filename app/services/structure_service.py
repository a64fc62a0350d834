"""
Structure unifiée catégories + pages.

Les catégories et les pages qui partagent un même parent forment une seule
liste de frères, triée par ``order``. L'arbre est reconstruit à chaque
lecture à partir des deux payloads de l'API :

- les catégories racines, chacune avec ``all_children`` (sous-arbre
  complet) et ``pages`` (pages rangées directement dedans) ;
- la liste plate de toutes les pages, dont on ne garde ici que les pages
  racines (sans catégorie ni page parente).

``order`` n'est pas unique entre les deux types : les égalités gardent
l'ordre de lecture (tri stable, catégories avant pages).
"""

import logging
from dataclasses import dataclass, field
from sqlalchemy.orm import Session
from typing import Any, Dict, Iterable, List, Optional

from app.models.category import Category
from app.models.page import Page
from app.schemas.structure import StructureItem

logger = logging.getLogger(__name__)


@dataclass
class StructureNode:
    id: int
    type: str  # "category" ou "page"
    title: str
    order: int
    children: List["StructureNode"] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    def matches(self, node_id: int, node_type: str) -> bool:
        return self.id == node_id and self.type == node_type


def _sorted(nodes: List[StructureNode]) -> List[StructureNode]:
    # sorted() est stable
    return sorted(nodes, key=lambda node: node.order)


def page_node(page: Dict[str, Any]) -> StructureNode:
    return StructureNode(id=page["id"], type="page", title=page.get("title", ""), order=page.get("order") or 0, raw=page)


def category_node(category: Dict[str, Any]) -> StructureNode:
    sub_categories = [category_node(child) for child in category.get("all_children") or []]
    pages = [page_node(page) for page in category.get("pages") or []]
    return StructureNode(
        id=category["id"],
        type="category",
        title=category.get("name", ""),
        order=category.get("order") or 0,
        children=_sorted(sub_categories + pages),
        raw=category
    )


def build_structure(categories: Iterable[Dict[str, Any]], pages: Iterable[Dict[str, Any]]) -> List[StructureNode]:
    root_categories = [category_node(category) for category in categories]
    root_pages = [
        page_node(page) for page in pages
        if page.get("category_id") is None and page.get("parent_id") is None
    ]
    return _sorted(root_categories + root_pages)


def find_siblings(nodes: List[StructureNode], node_id: int, node_type: str) -> Optional[List[StructureNode]]:
    """Liste des frères (noeud compris) qui contient le noeud cherché"""
    for node in nodes:
        if node.matches(node_id, node_type):
            return nodes
    for node in nodes:
        found = find_siblings(node.children, node_id, node_type)
        if found is not None:
            return found
    return None


def compute_move(siblings: List[StructureNode], node_id: int, node_type: str, direction: str) -> Optional[List[StructureItem]]:
    """
    Échange le noeud avec son voisin et renvoie TOUTE la fratrie réindexée.

    Chaque frère reçoit son index dans le nouvel ordre, ce qui efface les
    trous éventuels. Renvoie None quand il n'y a rien à faire (monter le
    premier, descendre le dernier, noeud absent).
    """
    index = next((i for i, s in enumerate(siblings) if s.matches(node_id, node_type)), -1)
    if index == -1:
        return None

    if direction == "up":
        if index == 0:
            return None
        neighbour = index - 1
    elif direction == "down":
        if index >= len(siblings) - 1:
            return None
        neighbour = index + 1
    else:
        raise ValueError(f"Unknown direction: {direction}")

    items = []
    for i, sibling in enumerate(siblings):
        new_order = i
        if i == index:
            new_order = neighbour
        elif i == neighbour:
            new_order = index
        items.append(StructureItem(id=sibling.id, type=sibling.type, order=new_order))
    return sorted(items, key=lambda item: item.order)


def apply_reorder(db: Session, items: List[StructureItem]) -> None:
    # une écriture par ligne, la dernière écriture gagne
    for item in items:
        model = Category if item.type == "category" else Page
        db.query(model).filter(model.id == item.id).update({model.order: item.order}, synchronize_session=False)
    db.commit()
    logger.info(f"Structure reordered: {len(items)} items")
