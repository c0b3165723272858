from typing import Optional
from sqlmodel import Field

from .base import BaseModelDB


class Audio(BaseModelDB, table=True):
    """Métadonnées d'un audio ; le contenu binaire vit dans le blob store."""

    # pas de réutilisation d'id après suppression (SQLite)
    __table_args__ = {"sqlite_autoincrement": True}

    title: Optional[str] = Field(default=None, description="Titre de l'audio")
    description: Optional[str] = Field(default=None, description="Description libre")
    mime_type: str = Field(description="Type MIME (audio/mpeg, audio/wav, etc.)")
    # Plusieurs lignes peuvent partager un même blob (contenu identique) : index, pas unique.
    blob_name: str = Field(index=True, description="Nom du blob : sha256 du contenu + extension")
