from typing import Optional, Sequence
from sqlmodel import select, func

from streetcode.db.repositories.base import BaseRepository
from streetcode.db.models.audios import Audio


class AudioRepository(BaseRepository[Audio]):
    """CRUD Audios + requêtes spécifiques."""
    model = Audio

    def list_all(self) -> Optional[Sequence[Audio]]:
        """Tous les audios, par id croissant (sans pagination)."""
        return self.session.exec(select(self.model).order_by(self.model.id)).all()

    def count_by_blob_name(self, blob_name: str) -> int:
        """Nombre de lignes qui référencent encore ce blob (contenu dédupliqué)."""
        stmt = select(func.count(self.model.id)).where(self.model.blob_name == blob_name)
        return int(self.session.exec(stmt).one())
