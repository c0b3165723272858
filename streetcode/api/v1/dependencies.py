"""
➡️ But : Centraliser les dépendances réutilisables des routes.

Exemples :

get_audio_repository() : crée un AudioRepository à partir d'une session DB.

get_create_audio_handler() : assemble repository + blob store pour l'opération.

🔹 Avantages :

Routes plus propres (pas de code dupliqué).

Facile à remplacer dans les tests (app.dependency_overrides).
"""

from functools import lru_cache

from fastapi import Depends
from sqlmodel import Session

from streetcode.db.session import get_session

from streetcode.db.repositories.audios import AudioRepository
from streetcode.db.repositories.streetcodes import StreetcodeRepository

from streetcode.features.blobs.storage import BlobStore, make_blob_store
from streetcode.features.audios.handlers import (
    CreateAudioHandler,
    DeleteAudioHandler,
    GetAllAudiosHandler,
    GetAudioByIdHandler,
    GetAudioByStreetcodeIdHandler,
    GetBaseAudioHandler,
)


# -----------------------------
# Repositories
# -----------------------------
def get_audio_repository(session: Session = Depends(get_session)) -> AudioRepository:
    return AudioRepository(session)

def get_streetcode_repository(session: Session = Depends(get_session)) -> StreetcodeRepository:
    return StreetcodeRepository(session)


# -----------------------------
# Blob store (un seul par process)
# -----------------------------
@lru_cache(maxsize=1)
def get_blob_store() -> BlobStore:
    return make_blob_store()


# -----------------------------
# Audio handlers
# -----------------------------
def get_create_audio_handler(
    repo: AudioRepository = Depends(get_audio_repository),
    blob_store: BlobStore = Depends(get_blob_store),
) -> CreateAudioHandler:
    return CreateAudioHandler(blob_store=blob_store, repo=repo)

def get_delete_audio_handler(
    repo: AudioRepository = Depends(get_audio_repository),
    streetcode_repo: StreetcodeRepository = Depends(get_streetcode_repository),
    blob_store: BlobStore = Depends(get_blob_store),
) -> DeleteAudioHandler:
    return DeleteAudioHandler(repo=repo, streetcode_repo=streetcode_repo, blob_store=blob_store)

def get_all_audios_handler(
    repo: AudioRepository = Depends(get_audio_repository),
    blob_store: BlobStore = Depends(get_blob_store),
) -> GetAllAudiosHandler:
    return GetAllAudiosHandler(repo=repo, blob_store=blob_store)

def get_audio_by_id_handler(
    repo: AudioRepository = Depends(get_audio_repository),
    blob_store: BlobStore = Depends(get_blob_store),
) -> GetAudioByIdHandler:
    return GetAudioByIdHandler(repo=repo, blob_store=blob_store)

def get_base_audio_handler(
    repo: AudioRepository = Depends(get_audio_repository),
    blob_store: BlobStore = Depends(get_blob_store),
) -> GetBaseAudioHandler:
    return GetBaseAudioHandler(blob_store=blob_store, repo=repo)

def get_audio_by_streetcode_id_handler(
    streetcode_repo: StreetcodeRepository = Depends(get_streetcode_repository),
    blob_store: BlobStore = Depends(get_blob_store),
) -> GetAudioByStreetcodeIdHandler:
    return GetAudioByStreetcodeIdHandler(streetcode_repo=streetcode_repo, blob_store=blob_store)
