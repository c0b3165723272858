from typing import Optional
from sqlmodel import Field, Relationship

from .base import BaseModelDB
from .audios import Audio


class StreetcodeContent(BaseModelDB, table=True):
    """Streetcode : contenu parent auquel un audio peut (ou non) être rattaché."""

    __tablename__ = "streetcode"

    title: str = Field(index=True, description="Titre du streetcode")
    audio_id: Optional[int] = Field(default=None, foreign_key="audio.id", description="Audio lié (0 ou 1)")

    audio: Optional[Audio] = Relationship()
