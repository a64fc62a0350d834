"""Contrôles de rôles.

Il n'y a pas d'objet de politique centralisé : chaque handler déclare le
contrôle qui le concerne, soit par appel direct, soit par la dépendance
``require_elevated_user`` (app/core/deps.py) qui s'exécute avant la
validation du corps de la requête.
"""

import logging
from fastapi import HTTPException, status

logger = logging.getLogger(__name__)

ROLE_ADMIN = "admin"
ROLE_DOCUMENTALISTE = "documentaliste"
ROLE_USER = "user"

ROLES = (ROLE_ADMIN, ROLE_USER, ROLE_DOCUMENTALISTE)
ELEVATED_ROLES = (ROLE_ADMIN, ROLE_DOCUMENTALISTE)


def forbidden() -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail={"message": "Unauthorized"})


def require_roles(user, *roles: str) -> None:
    if user.role not in roles:
        logger.warning(f"User {user.id} ({user.role}) refused, requires one of {roles}")
        raise forbidden()


def require_admin(user) -> None:
    require_roles(user, ROLE_ADMIN)


def require_elevated(user) -> None:
    require_roles(user, *ELEVATED_ROLES)


def is_elevated(user) -> bool:
    return user.role in ELEVATED_ROLES


def can_edit_page(user, page) -> bool:
    # le créateur, un admin ou un documentaliste
    return page.user_id == user.id or is_elevated(user)
