import base64
import hashlib
import mimetypes
import re

# extension simple : lettres et chiffres, point initial toléré
EXTENSION_PATTERN = r"^\.?[A-Za-z0-9]{1,10}$"
_EXTENSION_RE = re.compile(EXTENSION_PATTERN)


def decode_payload(encoded: str) -> bytes:
    """
    Décode un contenu base64 (texte) en octets.
    Lève ValueError (binascii.Error) si le texte n'est pas du base64 valide.
    """
    return base64.b64decode(encoded, validate=True)


def encode_payload(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


def content_hash(raw: bytes) -> str:
    return hashlib.sha256(raw).hexdigest()


def build_blob_name(raw: bytes, extension: str) -> str:
    """
    Nom adressé par le contenu : même contenu + même extension → même nom.
    Exemple: build_blob_name(b"...", "mp3") -> "9f86d0…0f00a08.mp3"
    Lève ValueError si l'extension n'est pas alphanumérique (pas de séparateur de chemin).
    """
    if not _EXTENSION_RE.fullmatch(extension):
        raise ValueError(f"Invalid extension: {extension!r}")
    ext = extension.lstrip(".")
    return f"{content_hash(raw)}.{ext}"


def guess_content_type(blob_name: str) -> str:
    mime, _ = mimetypes.guess_type(blob_name)
    return mime or "application/octet-stream"
