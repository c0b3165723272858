from typing import Any, Generic, Optional, Sequence, Type, TypeVar
from sqlalchemy import event
from sqlmodel import SQLModel, Session, select, func

# Type générique pour le modèle (Audio, StreetcodeContent, etc.)
ModelT = TypeVar("ModelT", bound=SQLModel)

AFFECTED_ROWS_KEY = "affected_rows"


class TrackedSession(Session):
    """
    Session qui compte les lignes écrites entre deux commits (voir save_changes()).
    Seules les sessions de cette classe portent les listeners ; une Session SQLModel
    ordinaire n'est pas touchée.
    """


@event.listens_for(TrackedSession, "after_flush")
def _count_flushed_rows(session: TrackedSession, flush_context) -> None:
    # after_flush voit encore l'état d'avant le flush (new / dirty / deleted)
    dirty = sum(1 for obj in session.dirty if session.is_modified(obj))
    flushed = len(session.new) + dirty + len(session.deleted)
    session.info[AFFECTED_ROWS_KEY] = session.info.get(AFFECTED_ROWS_KEY, 0) + flushed


@event.listens_for(TrackedSession, "after_commit")
@event.listens_for(TrackedSession, "after_rollback")
def _reset_flushed_rows(session: TrackedSession) -> None:
    session.info.pop(AFFECTED_ROWS_KEY, None)


class BaseRepository(Generic[ModelT]):
    """
    Repository de base pour les opérations CRUD standards.

    👉 Ne contient aucune logique métier.
    👉 Gère la persistance générique : create, read, update, delete, count, list.
    👉 Les repositories concrets définissent `model = MaClasseSQLModel`.
    👉 save_changes() est la frontière de transaction : commit + nombre de lignes touchées.
    """

    model: Type[ModelT]

    def __init__(self, session: Session):
        self.session = session

    # ---------- READ ----------

    def list(self, offset: int = 0, limit: int = 100) -> Sequence[ModelT]:
        """Retourne une liste paginée des enregistrements."""
        statement = select(self.model).offset(offset).limit(limit)
        return self.session.exec(statement).all()

    def count(self) -> int:
        """Retourne le nombre total d’enregistrements."""
        return self.session.exec(select(func.count(self.model.id))).one()

    def get(self, id_: Any) -> Optional[ModelT]:
        """Retourne un enregistrement par son identifiant, ou None."""
        return self.session.get(self.model, id_)

    # ---------- CREATE ----------

    def create(self, *, commit: bool = True, **fields) -> ModelT:
        """
        Crée et persiste un nouvel enregistrement.
        commit=False permet d'orchestrer une transaction globale au niveau handler.
        """
        entity = self.model(**fields)
        self.session.add(entity)
        if commit:
            self.session.commit()
            self.session.refresh(entity)
        else:
            # flush pour obtenir l'ID sans commit (utile pour FKs)
            self.session.flush()
        return entity

    # ---------- UPDATE ----------

    def update(self, entity: ModelT, *, commit: bool = True, **changes) -> ModelT:
        """
        Met à jour un enregistrement existant.
        commit=False permet d'orchestrer une transaction globale au niveau handler.
        """
        for key, value in changes.items():
            setattr(entity, key, value)
        self.session.add(entity)
        if commit:
            self.session.commit()
            self.session.refresh(entity)
        else:
            self.session.flush()
        return entity

    # ---------- DELETE ----------

    def delete(self, entity: ModelT, *, commit: bool = True) -> None:
        """
        Supprime un enregistrement.
        commit=False permet d'orchestrer une transaction globale au niveau handler.
        """
        self.session.delete(entity)
        if commit:
            self.session.commit()
        else:
            self.session.flush()

    # ---------- TRANSACTION ----------

    def save_changes(self) -> int:
        """
        Valide la transaction en cours.
        Retourne le nombre de lignes insérées / modifiées / supprimées depuis le dernier commit ;
        0 signifie que rien n'a été écrit (à traiter comme un échec par l'appelant).
        """
        if not isinstance(self.session, TrackedSession):
            raise TypeError("save_changes() needs a TrackedSession to count written rows")
        self.session.flush()
        affected = self.session.info.pop(AFFECTED_ROWS_KEY, 0)
        self.session.commit()
        return affected
