from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, status
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from streetcode.api.v1.dependencies import (
    get_all_audios_handler,
    get_audio_by_id_handler,
    get_audio_by_streetcode_id_handler,
    get_base_audio_handler,
    get_create_audio_handler,
    get_delete_audio_handler,
)
from streetcode.core.config import settings
from streetcode.core.results import Result
from streetcode.features.audios.handlers import (
    CreateAudioHandler,
    DeleteAudioHandler,
    GetAllAudiosHandler,
    GetAudioByIdHandler,
    GetAudioByStreetcodeIdHandler,
    GetBaseAudioHandler,
)
from streetcode.features.audios.schemas import (
    AudioFileBaseCreateIn,
    AudioOut,
    CreateAudioCommand,
    DeleteAudioCommand,
    GetAllAudiosQuery,
    GetAudioByIdQuery,
    GetAudioByStreetcodeIdQuery,
    GetBaseAudioQuery,
)

router = APIRouter(
    prefix="/audios",
    tags=["audios"],
    responses={400: {"description": "Opération refusée (messages dans detail)"}},
)


def _unwrap(result: Result):
    """Échec → 400 avec la liste des messages ; succès (y compris NullResult) → valeur."""
    if result.is_failed:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.messages)
    return result.value


# -----------------------------
# Lecture
# -----------------------------
@router.get(
    "",
    summary="Lister tous les audios (contenu en base64)",
    response_model=List[AudioOut],
)
async def get_all_audios(handler: GetAllAudiosHandler = Depends(get_all_audios_handler)):
    return _unwrap(await handler.handle(GetAllAudiosQuery()))

@router.get(
    "/by-streetcode/{streetcode_id}",
    summary="Audio lié à un streetcode (null si le streetcode n'a pas d'audio)",
    response_model=Optional[AudioOut],
)
async def get_audio_by_streetcode_id(
    streetcode_id: int = Path(..., ge=1),
    handler: GetAudioByStreetcodeIdHandler = Depends(get_audio_by_streetcode_id_handler),
):
    return _unwrap(await handler.handle(GetAudioByStreetcodeIdQuery(streetcode_id)))

@router.get(
    "/{audio_id}",
    summary="Obtenir un audio (contenu en base64)",
    response_model=AudioOut,
)
async def get_audio_by_id(
    audio_id: int = Path(..., ge=1),
    handler: GetAudioByIdHandler = Depends(get_audio_by_id_handler),
):
    return _unwrap(await handler.handle(GetAudioByIdQuery(audio_id)))

@router.get(
    "/{audio_id}/base",
    summary="Télécharger le flux binaire brut d'un audio",
    response_class=StreamingResponse,
)
async def get_base_audio(
    audio_id: int = Path(..., ge=1),
    handler: GetBaseAudioHandler = Depends(get_base_audio_handler),
):
    stream = _unwrap(await handler.handle(GetBaseAudioQuery(audio_id)))
    chunk_size = settings.STREAM_CHUNK_SIZE
    # le flux est fermé une fois la réponse envoyée
    return StreamingResponse(
        iter(lambda: stream.read(chunk_size), b""),
        media_type="application/octet-stream",
        background=BackgroundTask(stream.close),
    )

# -----------------------------
# Écriture
# -----------------------------
@router.post(
    "",
    summary="Créer un audio (base64 → blob store → DB)",
    status_code=status.HTTP_201_CREATED,
    response_model=AudioOut,
)
async def create_audio(
    payload: AudioFileBaseCreateIn,
    handler: CreateAudioHandler = Depends(get_create_audio_handler),
):
    return _unwrap(await handler.handle(CreateAudioCommand(payload)))

@router.delete(
    "/{audio_id}",
    summary="Supprimer un audio (ligne DB + blob)",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_audio(
    audio_id: int = Path(..., ge=1),
    handler: DeleteAudioHandler = Depends(get_delete_audio_handler),
):
    _unwrap(await handler.handle(DeleteAudioCommand(audio_id)))
    return None
