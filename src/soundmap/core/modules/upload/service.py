from datetime import timedelta
from uuid import UUID

import structlog

from soundmap.core.core import Service
from soundmap.core.kv import KeyValueUnavailableError
from soundmap.core.modules.upload.models import UploadedAudio
from soundmap.core.modules.upload.utils import (
    audio_key_for_name,
    audio_url_for_key,
    generate_audio_key,
    is_allowed_audio_type,
    normalize_content_type,
)
from soundmap.core.objects import ObjectStoreError, StoredObject
from soundmap.errors import InternalError, NotFoundError, RateLimitError, ValidationError

logger = structlog.get_logger(__name__)


class UploadService(Service):
    """Validates audio clips and writes them to the object store under a per-user quota."""

    async def upload_audio(self, user_id: UUID, filename: str, content: bytes, content_type: str) -> UploadedAudio:
        """Store an audio clip for an authenticated user.

        Checks run in order: quota, empty file, format, size. The quota is
        consumed even when a later check rejects the file.

        Args:
            user_id: Uploading user
            filename: Original filename (only its extension is kept)
            content: File bytes
            content_type: MIME type reported by the client

        Returns:
            Storage key and public URL of the clip

        Raises:
            RateLimitError: If the user's upload quota for the window is used up
            ValidationError: If the file is empty, not audio, or too large
            InternalError: If the quota or object store cannot be reached
        """
        config = self.core.config
        try:
            quota = await self.core.services.ratelimit.check_and_consume(
                f"upload:{user_id}", config.upload_max_requests, timedelta(seconds=config.upload_window_seconds)
            )
        except KeyValueUnavailableError as e:
            logger.error("upload_quota_unavailable", user_id=user_id, error=str(e))
            raise InternalError("Upload failed") from e
        if not quota.allowed:
            raise RateLimitError(quota.reset_at)

        if not content:
            raise ValidationError("No audio file was provided")

        mime_type = normalize_content_type(content_type)
        if not is_allowed_audio_type(mime_type):
            raise ValidationError("Unsupported audio format")

        if len(content) > config.max_upload_bytes:
            raise ValidationError(f"File is too large (max {config.max_upload_bytes // (1024 * 1024)} MB)")

        key = generate_audio_key(filename, self.core.clock())
        try:
            await self.core.objects.put(key, content, mime_type)
        except ObjectStoreError as e:
            logger.error(
                "upload_failed",
                error=str(e),
                filename=filename,
                size=len(content),
                content_type=mime_type,
            )
            raise InternalError("Upload failed") from e

        logger.info("audio_uploaded", user_id=user_id, key=key, size=len(content), remaining=quota.remaining)
        return UploadedAudio(key=key, url=audio_url_for_key(key), content_type=mime_type, size=len(content))

    async def get_audio(self, name: str) -> StoredObject:
        """Get a stored clip by the file name used in its public URL.

        Raises:
            NotFoundError: If the clip does not exist
            InternalError: If the object store cannot be read
        """
        try:
            key = audio_key_for_name(name)
        except ValueError as e:
            raise NotFoundError("Audio not found") from e

        try:
            stored = await self.core.objects.get(key)
        except ObjectStoreError as e:
            logger.error("audio_read_failed", name=name, error=str(e))
            raise InternalError("Failed to load audio") from e
        if stored is None:
            raise NotFoundError("Audio not found")
        return stored
