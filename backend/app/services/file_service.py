"""
Folio Backend — Image Upload Service
======================================

What:  Validates and stores project images (thumbnails and gallery shots).
Why:   Centralizes all file system operations with security checks.
How:   Checks extension, declared content type, and size, then writes the
       bytes into a date-organized directory under a UUID filename.
Who:   Called by the POST /api/projects/upload route.

Security Model:
    1. Extension check:     jpeg, jpg, png, webp only
    2. Content-type check:  the declared type must also be an allowed image type
    3. Size check:          5MB ceiling, empty files rejected
    4. UUID filename:       no user input ever reaches the file system path

    Both the extension and the declared content type must pass; a
    `photo.png` sent as `application/pdf` is rejected, as is a
    `script.js` sent as `image/png`.
"""

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple

import aiofiles

from app.exceptions import FileStorageError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".webp"}

ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp"}

# Public prefix the frontend joins with the relative path
PUBLIC_PREFIX = "/uploads"


class FileService:
    """
    Manages image validation and storage.

    Directory Structure:
        uploads/
        └── 2024/
            └── 01/
                └── 15/
                    ├── a1b2c3d4-5678.jpg
                    └── e5f6g7h8-9012.webp
    """

    def __init__(self, storage_root: str, max_size: int):
        self.storage_root = Path(storage_root).resolve()
        self.max_size = max_size

    def ensure_storage(self) -> None:
        """Create the storage root if missing (called on startup)."""
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("Upload storage: %s", self.storage_root)

    def _validate_extension(self, filename: str) -> str:
        """Returns the normalized extension (lowercase with dot)."""
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext or filename}' is not supported. "
                    f"Allowed types: {', '.join(sorted(e.lstrip('.') for e in ALLOWED_EXTENSIONS))}"
                ),
                field="image",
                context={"extension": ext},
            )
        return ext

    def _validate_content_type(self, content_type: Optional[str]) -> str:
        # Drop parameters such as "; charset=binary"
        declared = (content_type or "").split(";")[0].strip().lower()
        if declared not in ALLOWED_CONTENT_TYPES:
            raise ValidationError(
                message=f"Content type '{declared or 'unknown'}' is not supported. Please upload an image file",
                field="image",
                context={"content_type": declared},
            )
        return declared

    def _validate_size(self, content: bytes, content_length: Optional[int]) -> None:
        """
        Checks the reported size first, then the actual byte count
        (clients can send a misleading size).
        """
        max_mb = self.max_size / (1024 * 1024)
        if not content:
            raise ValidationError(message="Uploaded file is empty", field="image")

        if content_length and content_length > self.max_size:
            raise ValidationError(
                message=f"File too large. Please upload an image less than {max_mb:.0f}MB",
                field="image",
                context={"reported_size": content_length},
            )

        if len(content) > self.max_size:
            raise ValidationError(
                message=f"File too large. Please upload an image less than {max_mb:.0f}MB",
                field="image",
                context={"actual_size": len(content)},
            )

    def _generate_storage_path(self, extension: str) -> Tuple[Path, str]:
        """Returns (absolute_path, relative_path) for a new YYYY/MM/DD/<uuid>.<ext> file."""
        now = datetime.now(timezone.utc)
        relative_path = f"{now.strftime('%Y/%m/%d')}/{uuid.uuid4()}{extension}"
        return self.storage_root / relative_path, relative_path

    async def store_file(self, content: bytes, extension: str) -> Tuple[str, str]:
        """
        Write validated content to disk.

        Raises:
            FileStorageError if directory creation or the write fails.
        """
        absolute_path, relative_path = self._generate_storage_path(extension)

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

        logger.info("File stored: %s (%d bytes)", relative_path, len(content))
        return str(absolute_path), relative_path

    async def save_image(
        self,
        filename: str,
        content_type: Optional[str],
        content: bytes,
        content_length: Optional[int] = None,
    ) -> str:
        """
        Complete validation and storage pipeline for one image.

        Validation order (cheapest first):
            1. Extension
            2. Declared content type
            3. Size
            4. Write to disk

        Returns:
            Public reference, e.g. "/uploads/2024/01/15/<uuid>.png", suitable
            for a project's thumbnailImage or galleryImages.
        """
        ext = self._validate_extension(filename)
        self._validate_content_type(content_type)
        self._validate_size(content, content_length)

        _, relative_path = await self.store_file(content, ext)
        return f"{PUBLIC_PREFIX}/{relative_path}"
