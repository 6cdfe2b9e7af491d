"""Utility functions for audio upload handling."""

import re
import secrets
import string
from datetime import datetime
from pathlib import PurePosixPath

AUDIO_KEY_PREFIX = "audio/"
DEFAULT_AUDIO_EXTENSION = "webm"

ALLOWED_AUDIO_TYPES = frozenset(
    {
        "audio/webm",
        "audio/mpeg",
        "audio/wav",
        "audio/ogg",
        "audio/mp4",
        "audio/m4a",
    }
)

_EXTENSION_RE = re.compile(r"^[a-z0-9]{1,10}$")
_AUDIO_NAME_RE = re.compile(r"^[A-Za-z0-9-]+\.[a-z0-9]{1,10}$")
_RANDOM_ALPHABET = string.ascii_lowercase + string.digits


def normalize_content_type(content_type: str | None) -> str:
    """Strip parameters and case from a MIME type ("audio/webm;codecs=opus" -> "audio/webm")."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def is_allowed_audio_type(mime_type: str) -> bool:
    return mime_type in ALLOWED_AUDIO_TYPES


def extract_extension(filename: str | None) -> str:
    """Get a safe, lower-cased extension from the original filename.

    Falls back to "webm" (the browser recorder format) when the name has no
    usable extension.
    """
    suffix = PurePosixPath(filename or "").suffix.lstrip(".").lower()
    if _EXTENSION_RE.fullmatch(suffix):
        return suffix
    return DEFAULT_AUDIO_EXTENSION


def generate_audio_key(filename: str | None, timestamp: datetime) -> str:
    """Build a collision-resistant storage key: audio/<epoch-ms>-<8 random chars>.<ext>."""
    millis = int(timestamp.timestamp() * 1000)
    suffix = "".join(secrets.choice(_RANDOM_ALPHABET) for _ in range(8))
    return f"{AUDIO_KEY_PREFIX}{millis}-{suffix}.{extract_extension(filename)}"


def audio_url_for_key(key: str) -> str:
    """Public URL path of a stored clip."""
    return "/" + key


def audio_key_for_name(name: str) -> str:
    """Map the file name from a public URL back to its storage key.

    Raises:
        ValueError: If name is not a generated audio file name
    """
    if not _AUDIO_NAME_RE.fullmatch(name):
        raise ValueError(f"Invalid audio name: {name!r}")
    return AUDIO_KEY_PREFIX + name
