"""
Upload d'images pour les blocks image.

Les fichiers sont stockés dans UPLOAD_DIR/wiki-images et l'URL publique
est construite à partir de APP_URL.
"""

import logging
import time
from pathlib import Path

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from app.core.config import settings
from app.core.deps import require_site_open
from app.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(tags=["uploads"])

UPLOAD_SUBDIR = "wiki-images"


@router.post("/upload")
async def upload_image(image: UploadFile = File(...), current_user: User = Depends(require_site_open)) -> dict:
    """Enregistre l'image et renvoie son URL"""
    original_name = Path(image.filename or "").name
    content = await image.read()
    logger.info(f"Upload attempt: {original_name} ({len(content)} bytes, {image.content_type}) by user {current_user.id}")

    if not original_name or not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"message": "Aucune image trouvée"})

    target_dir = Path(settings.UPLOAD_DIR) / UPLOAD_SUBDIR
    target_dir.mkdir(parents=True, exist_ok=True)

    file_name = f"{int(time.time())}_{original_name}"
    (target_dir / file_name).write_bytes(content)

    url = f"{settings.APP_URL.rstrip('/')}/storage/{UPLOAD_SUBDIR}/{file_name}"
    return {"url": url, "message": "Image uploadée avec succès"}
