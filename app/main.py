import logging
from pathlib import Path
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from app.core.config import settings
from app.core.database import engine, Base, SessionLocal
from app.models import user, page, category, tag, system_setting  # noqa: F401 (tables)
from app.routers import health, auth, users, pages, blocks, categories, tags, structure, settings as settings_router, admin, uploads
from app.services.user_service import create_admin

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# Init DB
Base.metadata.create_all(bind=engine)

# Admin initial
if settings.BOOTSTRAP_ADMIN_USERNAME and settings.BOOTSTRAP_ADMIN_PASSWORD:
    db = SessionLocal()
    try:
        create_admin(db, settings.BOOTSTRAP_ADMIN_USERNAME, settings.BOOTSTRAP_ADMIN_PASSWORD)
    finally:
        db.close()

app = FastAPI(
    title="Wiki API",
    version="1.0.0"
)

# Routes
app.include_router(health.router, prefix="/health")
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(pages.router)
app.include_router(blocks.router)
app.include_router(categories.router)
app.include_router(tags.router)
app.include_router(structure.router)
app.include_router(settings_router.router)
app.include_router(admin.router)
app.include_router(uploads.router)

# Images uploadées
Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
app.mount("/storage", StaticFiles(directory=settings.UPLOAD_DIR), name="storage")
