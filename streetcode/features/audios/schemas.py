from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from streetcode.utils.media_files import EXTENSION_PATTERN, decode_payload


class AudioFileBaseCreateIn(BaseModel):
    title: str = Field(..., min_length=1, examples=["Hymne de la ville"])
    description: Optional[str] = Field(None, examples=["Enregistrement de 1998"])
    mime_type: str = Field(..., min_length=1, examples=["audio/mpeg"])
    base_format: str = Field(..., min_length=1, description="Contenu audio encodé en base64")
    extension: str = Field(..., pattern=EXTENSION_PATTERN, examples=["mp3"])

    @field_validator("base_format")
    @classmethod
    def _must_be_base64(cls, v: str) -> str:
        try:
            decode_payload(v)
        except ValueError:
            raise ValueError("base_format must be valid base64")
        return v


class AudioOut(BaseModel):
    id: int
    title: Optional[str] = None
    mime_type: str
    blob_name: str
    base64: Optional[str] = Field(None, description="Contenu lu depuis le blob store, jamais depuis la DB")

    model_config = {"from_attributes": True}


# -----------------------------
# Requêtes des handlers
# -----------------------------
@dataclass(frozen=True)
class CreateAudioCommand:
    audio: AudioFileBaseCreateIn


@dataclass(frozen=True)
class DeleteAudioCommand:
    id: int


@dataclass(frozen=True)
class GetAllAudiosQuery:
    pass


@dataclass(frozen=True)
class GetAudioByIdQuery:
    id: int


@dataclass(frozen=True)
class GetBaseAudioQuery:
    id: int


@dataclass(frozen=True)
class GetAudioByStreetcodeIdQuery:
    streetcode_id: int
