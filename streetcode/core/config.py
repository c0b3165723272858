"""
➡️ But : Centraliser tous les paramètres configurables (nom d'app, chemin DB, stockage des blobs, logs).

Utilise pydantic-settings pour charger automatiquement les variables d'environnement (.env, variables système…).

Fournit un objet settings unique, que tu importes ailleurs :

from streetcode.core.config import settings
print(settings.BLOB_BACKEND)


🔹 Avantages :

Le choix du backend (disque local ou S3/MinIO) se fait sans toucher au code.

Facilite le passage entre environnements (dev / prod / test).
"""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # -----------------------------
    # App
    # -----------------------------
    APP_NAME: str = "Streetcode-Media"
    ENV: str = "dev"  # dev | prod | test
    LOG_LEVEL: str = "INFO"

    # -----------------------------
    # DB
    # -----------------------------
    SQLITE_PATH: str = "streetcode.db"
    # Si tu veux forcer une URL différente (ex: Postgres), définis DATABASE_URL dans l'env.
    DATABASE_URL: Optional[str] = None

    # -----------------------------
    # Blobs
    # -----------------------------
    BLOB_BACKEND: str = "local"  # local | s3
    BLOB_ROOT: str = "blobs"     # racine disque pour le backend local
    STREAM_CHUNK_SIZE: int = 64 * 1024

    # -----------------------------
    # S3 / MinIO
    # -----------------------------
    S3_ENDPOINT: str = "http://localhost:9000"
    S3_REGION: str = "us-east-1"
    S3_KEY: str = "minioadmin"
    S3_SECRET: str = "minioadmin"   # ⚠️ change en prod
    S3_BUCKET: str = "media"
    S3_PREFIX: str = "audios/"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }

    # -----------------------------
    # Post-process values
    # -----------------------------
    def model_post_init(self, __context): # appelée automatiquement
        # DATABASE_URL par défaut depuis SQLITE_PATH si non fourni
        if not self.DATABASE_URL:
            object.__setattr__(self, "DATABASE_URL", f"sqlite:///{self.SQLITE_PATH}")


# Instance globale importable partout
settings = Settings()
