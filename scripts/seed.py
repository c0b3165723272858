import asyncio
import base64
import os
import sys

from streetcode.db.session import engine, init_db
from streetcode.db.repositories.base import TrackedSession

from streetcode.db.repositories.audios import AudioRepository
from streetcode.db.repositories.streetcodes import StreetcodeRepository

from streetcode.features.audios.handlers import CreateAudioHandler
from streetcode.features.audios.schemas import AudioFileBaseCreateIn, CreateAudioCommand
from streetcode.features.blobs.storage import make_blob_store
from streetcode.utils.media_files import guess_content_type

# Usage : python scripts/seed.py <fichier audio> [titre du streetcode]

async def run_seed(audio_path: str, streetcode_title: str):
    init_db()
    with open(audio_path, "rb") as f:
        encoded = base64.b64encode(f.read()).decode("ascii")

    name, ext = os.path.splitext(os.path.basename(audio_path))
    with TrackedSession(engine) as session:
        audio_repo = AudioRepository(session)
        streetcode_repo = StreetcodeRepository(session)
        handler = CreateAudioHandler(blob_store=make_blob_store(), repo=audio_repo)

        result = await handler.handle(CreateAudioCommand(AudioFileBaseCreateIn(
            title=name,
            mime_type=guess_content_type(audio_path),
            base_format=encoded,
            extension=ext.lstrip(".") or "bin",
        )))
        if result.is_failed:
            sys.exit("; ".join(result.messages))

        streetcode = streetcode_repo.create(title=streetcode_title, audio_id=result.value.id)
        print(f"streetcode {streetcode.id} -> audio {result.value.id} ({result.value.blob_name})")

if __name__ == "__main__":
    if len(sys.argv) < 2:
        sys.exit("usage: python scripts/seed.py <audio file> [streetcode title]")
    asyncio.run(run_seed(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else "Streetcode de démo"))
