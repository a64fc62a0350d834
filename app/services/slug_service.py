import re
import unicodedata
from sqlalchemy.orm import Session
from typing import Optional


def slugify(text: str) -> str:
    # "Éléments de Docs !" -> "elements-de-docs"
    normalized = unicodedata.normalize("NFKD", str(text or "")).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")
    return slug


def unique_slug(db: Session, model, base: str, exclude_id: Optional[int] = None) -> str:
    """Ajoute -1, -2, ... tant que le slug est déjà pris"""
    slug = base
    count = 1
    while True:
        query = db.query(model).filter(model.slug == slug)
        if exclude_id is not None:
            query = query.filter(model.id != exclude_id)
        if not query.first():
            return slug
        slug = f"{base}-{count}"
        count += 1
