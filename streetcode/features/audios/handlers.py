"""
➡️ But : Orchestrer repositories + blob store pour chaque opération sur les audios.

Un handler = une opération (create, delete, get all, get by id, get base, get by streetcode id).
Aucune exception pour les cas prévus : chaque handler renvoie un Result, et tout échec est
journalisé avec exactement le message renvoyé.

Les appels au blob store (I/O disque ou réseau) passent par le threadpool pour ne pas bloquer la boucle.
"""

import logging
from typing import BinaryIO, List, Optional

from fastapi.concurrency import run_in_threadpool

from streetcode.core.results import NullResult, Result, log_and_fail
from streetcode.db.repositories.audios import AudioRepository
from streetcode.db.repositories.streetcodes import StreetcodeRepository
from streetcode.features.audios.mapping import audio_fields, to_audio_out
from streetcode.features.audios.schemas import (
    AudioOut,
    CreateAudioCommand,
    DeleteAudioCommand,
    GetAllAudiosQuery,
    GetAudioByIdQuery,
    GetAudioByStreetcodeIdQuery,
    GetBaseAudioQuery,
)
from streetcode.features.blobs.storage import BlobStore

_logger = logging.getLogger(__name__)


def _audio_not_found(audio_id: int) -> str:
    return f"Cannot find an audio with corresponding id: {audio_id}"


class CreateAudioHandler:
    def __init__(self, *, blob_store: BlobStore, repo: AudioRepository, logger: Optional[logging.Logger] = None):
        self.blob_store = blob_store
        self.repo = repo
        self.logger = logger or _logger

    async def handle(self, request: CreateAudioCommand) -> Result[AudioOut]:
        payload = request.audio
        blob_name = await run_in_threadpool(
            self.blob_store.save, payload.base_format, payload.title, payload.extension
        )

        audio = self.repo.create(commit=False, **audio_fields(payload, blob_name=blob_name))
        if self.repo.save_changes() == 0:
            return log_and_fail(self.logger, request, "Failed to create an audio")

        return Result.ok(to_audio_out(audio, base64=payload.base_format))


class DeleteAudioHandler:
    def __init__(
        self,
        *,
        repo: AudioRepository,
        streetcode_repo: StreetcodeRepository,
        blob_store: BlobStore,
        logger: Optional[logging.Logger] = None,
    ):
        self.repo = repo
        self.streetcode_repo = streetcode_repo
        self.blob_store = blob_store
        self.logger = logger or _logger

    async def handle(self, request: DeleteAudioCommand) -> Result[None]:
        audio = self.repo.get(request.id)
        if audio is None:
            return log_and_fail(
                self.logger, request, f"Cannot find an audio with corresponding categoryId: {request.id}"
            )

        blob_name = audio.blob_name
        # les streetcodes liés retombent sur "pas d'audio" dans la même transaction
        self.streetcode_repo.unlink_audio(audio.id, commit=False)
        self.repo.delete(audio, commit=False)

        # le blob part avant le commit, sauf s'il est encore partagé par une autre ligne
        if self.repo.count_by_blob_name(blob_name) == 0:
            await run_in_threadpool(self.blob_store.delete, blob_name)

        if self.repo.save_changes() == 0:
            return log_and_fail(self.logger, request, "Failed to delete an audio")

        self.logger.info("DeleteAudioCommand handled successfully")
        return Result.ok()


class GetAllAudiosHandler:
    def __init__(self, *, repo: AudioRepository, blob_store: BlobStore, logger: Optional[logging.Logger] = None):
        self.repo = repo
        self.blob_store = blob_store
        self.logger = logger or _logger

    async def handle(self, request: GetAllAudiosQuery) -> Result[List[AudioOut]]:
        audios = self.repo.list_all()
        if audios is None:
            return log_and_fail(self.logger, request, "Cannot find any audios")

        # une lecture de blob en échec fait échouer toute la liste (pas de résultat partiel)
        items: List[AudioOut] = []
        for audio in audios:
            encoded = await run_in_threadpool(self.blob_store.read_encoded, audio.blob_name)
            items.append(to_audio_out(audio, base64=encoded))
        return Result.ok(items)


class GetAudioByIdHandler:
    def __init__(self, *, repo: AudioRepository, blob_store: BlobStore, logger: Optional[logging.Logger] = None):
        self.repo = repo
        self.blob_store = blob_store
        self.logger = logger or _logger

    async def handle(self, request: GetAudioByIdQuery) -> Result[AudioOut]:
        audio = self.repo.get(request.id)
        if audio is None:
            return log_and_fail(self.logger, request, _audio_not_found(request.id))

        encoded = await run_in_threadpool(self.blob_store.read_encoded, audio.blob_name)
        return Result.ok(to_audio_out(audio, base64=encoded))


class GetBaseAudioHandler:
    """Flux binaire brut, sans DTO ni base64 ; l'appelant ferme le flux."""

    def __init__(self, *, blob_store: BlobStore, repo: AudioRepository, logger: Optional[logging.Logger] = None):
        self.blob_store = blob_store
        self.repo = repo
        self.logger = logger or _logger

    async def handle(self, request: GetBaseAudioQuery) -> Result[BinaryIO]:
        audio = self.repo.get(request.id)
        if audio is None:
            return log_and_fail(self.logger, request, _audio_not_found(request.id))

        stream = await run_in_threadpool(self.blob_store.read_stream, audio.blob_name)
        return Result.ok(stream)


class GetAudioByStreetcodeIdHandler:
    def __init__(
        self,
        *,
        streetcode_repo: StreetcodeRepository,
        blob_store: BlobStore,
        logger: Optional[logging.Logger] = None,
    ):
        self.streetcode_repo = streetcode_repo
        self.blob_store = blob_store
        self.logger = logger or _logger

    async def handle(self, request: GetAudioByStreetcodeIdQuery) -> Result[AudioOut]:
        streetcode = self.streetcode_repo.get_by_id(request.streetcode_id, include_audio=True)
        if streetcode is None:
            return log_and_fail(
                self.logger,
                request,
                f"Cannot find an audio with the corresponding streetcode id: {request.streetcode_id}",
            )

        # streetcode sans audio : état valide, pas une erreur
        if streetcode.audio is None:
            return NullResult()

        encoded = await run_in_threadpool(self.blob_store.read_encoded, streetcode.audio.blob_name)
        return Result.ok(to_audio_out(streetcode.audio, base64=encoded))
