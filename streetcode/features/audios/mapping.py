from typing import Any, Dict, Optional

from streetcode.db.models.audios import Audio
from streetcode.features.audios.schemas import AudioFileBaseCreateIn, AudioOut


def audio_fields(payload: AudioFileBaseCreateIn, *, blob_name: str) -> Dict[str, Any]:
    """Colonnes à persister pour un nouvel audio (le contenu reste dans le blob store)."""
    return {
        "title": payload.title,
        "description": payload.description,
        "mime_type": payload.mime_type,
        "blob_name": blob_name,
    }


def to_audio_out(audio: Audio, *, base64: Optional[str] = None) -> AudioOut:
    out = AudioOut.model_validate(audio)
    out.base64 = base64
    return out
