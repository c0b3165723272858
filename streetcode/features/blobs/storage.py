import logging
import os
import tempfile
from typing import BinaryIO, Callable, Optional, Protocol
from urllib.parse import quote

from botocore.exceptions import ClientError

from streetcode.core.config import settings
from streetcode.utils.media_files import (
    build_blob_name,
    decode_payload,
    encode_payload,
    guess_content_type,
)
from streetcode.utils.s3 import make_s3_internal

logger = logging.getLogger(__name__)


class BlobNotFoundError(LookupError):
    pass


class BlobStore(Protocol):
    """
    Stockage adressé par le contenu.
    - save() renvoie "<sha256>.<extension>" ; sauvegarder deux fois le même contenu ne duplique rien.
    - read_stream() renvoie un flux binaire que l'appelant doit fermer.
    - delete() ne lève pas si le blob n'existe déjà plus.
    """

    def save(self, encoded: str, title: str, extension: str) -> str: ...

    def read_encoded(self, blob_name: str) -> str: ...

    def read_stream(self, blob_name: str) -> BinaryIO: ...

    def delete(self, blob_name: str) -> None: ...


# -----------------------------
# Disque local
# -----------------------------
class LocalBlobStore:
    """Blobs sur disque, répartis en sous-dossiers root/ab/cd/<blob_name>."""

    def __init__(self, root: str):
        self.root = root
        os.makedirs(self.root, exist_ok=True)

    def _path(self, blob_name: str) -> str:
        # un nom de blob ne doit jamais sortir de root
        if blob_name in ("", ".", "..") or any(sep in blob_name for sep in ("/", "\\", os.sep)):
            raise ValueError(f"Invalid blob name: {blob_name!r}")
        return os.path.join(self.root, blob_name[:2], blob_name[2:4], blob_name)

    def save(self, encoded: str, title: str, extension: str) -> str:
        raw = decode_payload(encoded)
        blob_name = build_blob_name(raw, extension)
        path = self._path(blob_name)
        if os.path.exists(path):
            logger.debug("Blob %s already stored, skipping write", blob_name)
            return blob_name

        directory = os.path.dirname(path)
        os.makedirs(directory, exist_ok=True)
        # écriture dans un fichier temporaire puis os.replace : deux sauvegardes
        # concurrentes du même contenu aboutissent au même fichier complet
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(raw)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        logger.info("Stored blob %s (%d bytes) for %r", blob_name, len(raw), title)
        return blob_name

    def read_encoded(self, blob_name: str) -> str:
        with self.read_stream(blob_name) as stream:
            return encode_payload(stream.read())

    def read_stream(self, blob_name: str) -> BinaryIO:
        try:
            return open(self._path(blob_name), "rb")
        except FileNotFoundError as e:
            raise BlobNotFoundError(f"blob not found: {blob_name}") from e

    def delete(self, blob_name: str) -> None:
        try:
            os.remove(self._path(blob_name))
        except FileNotFoundError:
            logger.debug("Blob %s already absent", blob_name)


# -----------------------------
# S3 / MinIO
# -----------------------------
def _is_missing(error: ClientError) -> bool:
    code = error.response.get("Error", {}).get("Code")
    return code in ("404", "NoSuchKey", "NotFound")


class S3BlobStore:
    """Blobs dans un bucket S3/MinIO, clé = préfixe + blob_name."""

    def __init__(self, *, client, bucket: str, prefix: str = ""):
        self.client = client
        self.bucket = bucket
        self.prefix = prefix

    def _key(self, blob_name: str) -> str:
        return f"{self.prefix}{blob_name}"

    def _exists(self, key: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if _is_missing(e):
                return False
            raise
        return True

    def save(self, encoded: str, title: str, extension: str) -> str:
        raw = decode_payload(encoded)
        blob_name = build_blob_name(raw, extension)
        key = self._key(blob_name)
        if self._exists(key):
            logger.debug("Blob %s already stored, skipping upload", blob_name)
            return blob_name

        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=raw,
            ContentType=guess_content_type(blob_name),
            # les métadonnées S3 doivent rester ASCII
            Metadata={"title": quote(title or "")},
        )
        logger.info("Uploaded blob %s (%d bytes) to %s", blob_name, len(raw), self.bucket)
        return blob_name

    def read_encoded(self, blob_name: str) -> str:
        body = self.read_stream(blob_name)
        try:
            return encode_payload(body.read())
        finally:
            body.close()

    def read_stream(self, blob_name: str) -> BinaryIO:
        try:
            obj = self.client.get_object(Bucket=self.bucket, Key=self._key(blob_name))
        except ClientError as e:
            if _is_missing(e):
                raise BlobNotFoundError(f"blob not found: {blob_name}") from e
            raise
        return obj["Body"]

    def delete(self, blob_name: str) -> None:
        self.client.delete_object(Bucket=self.bucket, Key=self._key(blob_name))


def make_blob_store(
    backend: Optional[str] = None,
    *,
    s3_client_factory: Callable[[], object] = make_s3_internal,
) -> BlobStore:
    backend = backend or settings.BLOB_BACKEND
    if backend == "local":
        return LocalBlobStore(settings.BLOB_ROOT)
    if backend == "s3":
        return S3BlobStore(client=s3_client_factory(), bucket=settings.S3_BUCKET, prefix=settings.S3_PREFIX)
    raise ValueError(f"Unknown blob backend: {backend}")
