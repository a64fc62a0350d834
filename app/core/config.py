from os import getenv

class Settings:
    JWT_SECRET = getenv("JWT_SECRET", "dev-secret-change-in-prod")
    JWT_EXPIRE_MIN = int(getenv("JWT_EXPIRE_MIN", "120"))  # expire au bout de 2 heures
    JWT_REFRESH_EXPIRE_MIN = int(getenv("JWT_REFRESH_EXPIRE_MIN", "43200"))  # expire au bout d'1 mois

    LOG_LEVEL = getenv("LOG_LEVEL", "INFO")

    # URL publique utilisée pour construire les liens des images uploadées
    APP_URL = getenv("APP_URL", "http://localhost:8000")
    UPLOAD_DIR = getenv("UPLOAD_DIR", "storage")

    DEFAULT_TAG_COLOR = getenv("DEFAULT_TAG_COLOR", "#6366f1")

    # Compte admin créé au démarrage si absent
    BOOTSTRAP_ADMIN_USERNAME = getenv("BOOTSTRAP_ADMIN_USERNAME")
    BOOTSTRAP_ADMIN_PASSWORD = getenv("BOOTSTRAP_ADMIN_PASSWORD")

settings = Settings()
