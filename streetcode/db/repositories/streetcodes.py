from typing import Optional
from sqlalchemy.orm import selectinload
from sqlmodel import select

from streetcode.db.repositories.base import BaseRepository
from streetcode.db.models.streetcodes import StreetcodeContent


class StreetcodeRepository(BaseRepository[StreetcodeContent]):
    """CRUD Streetcodes + chargement optionnel de l'audio lié."""
    model = StreetcodeContent

    def get_by_id(self, streetcode_id: int, *, include_audio: bool = False) -> Optional[StreetcodeContent]:
        stmt = select(self.model).where(self.model.id == streetcode_id)
        if include_audio:
            stmt = stmt.options(selectinload(self.model.audio))
        return self.session.exec(stmt).first()

    def unlink_audio(self, audio_id: int, *, commit: bool = True) -> int:
        """
        Détache l'audio de tous les streetcodes qui le référencent.
        Retourne le nombre de streetcodes modifiés.
        """
        streetcodes = self.session.exec(select(self.model).where(self.model.audio_id == audio_id)).all()
        for streetcode in streetcodes:
            streetcode.audio_id = None
            streetcode.audio = None
            self.session.add(streetcode)
        if commit:
            self.session.commit()
        else:
            self.session.flush()
        return len(streetcodes)
