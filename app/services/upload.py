"""Image uploads: validate type and size, then hand the blob to object storage."""

from __future__ import annotations

import logging
import os
import re
import time

from app.core.errors import UploadFailed, ValidationError
from app.repositories.objects import ObjectStorage, StorageError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_MIME = re.compile(r"^image/(jpeg|png|gif|webp)$")
UPLOAD_FOLDER = "images"
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _safe_filename(filename: str | None) -> str:
    base = os.path.basename((filename or "").replace("\\", "/"))
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", base).strip("._")
    return cleaned or "image"


class UploadService:
    def __init__(self, storage: ObjectStorage, max_bytes: int) -> None:
        self.storage = storage
        self.max_bytes = max_bytes

    def validate(self, size: int, mime_type: str | None) -> None:
        """Reject non-image MIME types and payloads above the configured ceiling."""
        if not mime_type or not ALLOWED_IMAGE_MIME.match(mime_type.lower()):
            raise ValidationError("Only image files are allowed (jpeg, png, gif, webp).")
        if size <= 0:
            raise ValidationError("No file uploaded.")
        if size > self.max_bytes:
            raise ValidationError(
                f"File size must not exceed {self.max_bytes // (1024 * 1024) or 1} MB."
            )

    async def store(self, data: bytes, filename: str | None, mime_type: str | None) -> str:
        """Store an image and return its public URL. Validation runs before any storage call."""
        self.validate(len(data), mime_type)
        path = f"{UPLOAD_FOLDER}/{int(time.time() * 1000)}-{_safe_filename(filename)}"
        try:
            url = await self.storage.put(path, data, mime_type.lower())
        except StorageError as e:
            logger.error("Upload of %s failed: %s", path, e.message)
            raise UploadFailed(f"Upload failed: {e.message}") from e
        logger.info("Stored image %s (%s bytes)", path, len(data))
        return url

    async def delete(self, url: str | None) -> None:
        """Best effort: URLs that do not parse into a storage path are ignored."""
        if not url:
            return
        path = self.storage.path_from_url(url)
        if path is None:
            return
        try:
            await self.storage.remove(path)
        except StorageError as e:
            logger.warning("Could not remove %s: %s", path, e.message)
