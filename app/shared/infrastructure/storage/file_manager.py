# 📄 File: app/shared/infrastructure/storage/file_manager.py

# 🧭 Purpose (Layman Explanation):
# This file checks that an uploaded plant photo is a real picture of an allowed kind and size,
# shrinks it to a sensible size before it is sent to the identification services, and keeps a copy.

# 🧪 Purpose (Technical Summary):
# Image upload handling: content-type and size validation, Pillow decode verification,
# downscaling to a bounded box with JPEG re-encoding, and local disk storage with
# timestamped random filenames.

# 🔗 Dependencies:
# - PIL (Pillow): Image validation, resizing and re-encoding
# - hashlib: File integrity checksum
# - asyncio: Off-loop image processing and disk writes

# 🔄 Connected Modules / Calls From:
# Called by: Plant identification command handler (identify endpoint)

import asyncio
import hashlib
import io
import secrets
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from PIL import Image, UnidentifiedImageError

from app.shared.config.settings import get_settings
from app.shared.core.exceptions import (
    FileStorageError,
    FileTooLargeError,
    InvalidFileTypeError,
    MissingImageError,
)
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)

# Pillow format name for each accepted content type
_FORMAT_BY_MIME = {
    'image/jpeg': 'JPEG',
    'image/jpg': 'JPEG',
    'image/png': 'PNG',
    'image/webp': 'WEBP',
}


class FileManager:
    """
    File management service for plant identification uploads.

    Provides:
    - Upload validation (presence, content type, size, decodability)
    - Downscaling and JPEG re-encoding for provider calls
    - Local storage of the processed image
    """

    def __init__(
        self,
        upload_dir: Optional[str] = None,
        max_size_bytes: Optional[int] = None,
        allowed_types: Optional[List[str]] = None,
        max_dimension: Optional[int] = None,
        quality: Optional[int] = None
    ):
        """Initialize file manager with configuration, defaulting to settings."""
        settings = get_settings()
        self.upload_dir = Path(upload_dir or settings.UPLOAD_DIR)
        self.max_size_bytes = max_size_bytes or settings.MAX_IMAGE_SIZE
        self.allowed_types = allowed_types or settings.allowed_image_types
        self.max_dimension = max_dimension or settings.IMAGE_MAX_DIMENSION
        self.quality = quality or settings.IMAGE_QUALITY

    def validate_upload(
        self,
        file_data: Optional[bytes],
        filename: Optional[str],
        content_type: Optional[str]
    ) -> None:
        """
        Validate an uploaded image before any processing.

        Raises:
            MissingImageError: No bytes were uploaded
            InvalidFileTypeError: Content type is not an accepted image type
            FileTooLargeError: Upload exceeds the configured size limit
        """
        if not file_data:
            raise MissingImageError()

        mime_type = (content_type or '').lower()
        if mime_type not in self.allowed_types and mime_type != 'image/jpg':
            raise InvalidFileTypeError(
                "Only image files (jpeg, jpg, png, webp) are allowed",
                filename=filename,
                expected_types=self.allowed_types,
                actual_type=content_type
            )

        if len(file_data) > self.max_size_bytes:
            raise FileTooLargeError(
                f"Image exceeds the {self.max_size_bytes // (1024 * 1024)}MB limit",
                max_size_mb=round(self.max_size_bytes / (1024 * 1024), 2),
                actual_size_mb=round(len(file_data) / (1024 * 1024), 2),
                filename=filename
            )

    async def process_image(self, file_data: bytes, content_type: str) -> Dict[str, Any]:
        """
        Decode, downscale and re-encode an image as JPEG.

        The image is fitted inside a max_dimension square, keeping its aspect
        ratio, and is never enlarged.

        Returns:
            Dict with 'data', 'mime_type', 'width', 'height', 'size_bytes',
            'original_size_bytes' and 'checksum'

        Raises:
            InvalidFileTypeError: If Pillow cannot decode the bytes
        """
        return await asyncio.to_thread(self._process_image_sync, file_data, content_type)

    def _process_image_sync(self, file_data: bytes, content_type: str) -> Dict[str, Any]:
        try:
            with Image.open(io.BytesIO(file_data)) as probe:
                probe.verify()

            # verify() leaves the image unusable, so reopen for the real work
            with Image.open(io.BytesIO(file_data)) as img:
                declared = _FORMAT_BY_MIME.get(content_type.lower())
                if declared and img.format and img.format != declared:
                    logger.warning(
                        f"Declared type {content_type} does not match decoded format {img.format}"
                    )

                img.thumbnail((self.max_dimension, self.max_dimension))
                if img.mode != 'RGB':
                    img = img.convert('RGB')

                output = io.BytesIO()
                img.save(output, format='JPEG', quality=self.quality)
                width, height = img.size

        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
            raise InvalidFileTypeError(
                f"Invalid image file: {e}",
                actual_type=content_type
            )

        processed = output.getvalue()
        logger.debug(
            f"Image processed: {len(file_data)} -> {len(processed)} bytes, {width}x{height}"
        )
        return {
            'data': processed,
            'mime_type': 'image/jpeg',
            'width': width,
            'height': height,
            'size_bytes': len(processed),
            'original_size_bytes': len(file_data),
            'checksum': hashlib.sha256(processed).hexdigest(),
        }

    def _generate_filename(self) -> str:
        """Timestamped random filename, e.g. 1718000000000-3f9a...c2.jpg"""
        return f"{int(time.time() * 1000)}-{secrets.token_hex(8)}.jpg"

    async def store_image(self, image_data: bytes) -> str:
        """
        Write a processed image to the upload directory.

        Returns:
            str: Stored image reference (relative path under the upload dir)

        Raises:
            FileStorageError: If the file cannot be written
        """
        filename = self._generate_filename()
        target = self.upload_dir / filename

        try:
            await asyncio.to_thread(self._write_file, target, image_data)
        except OSError as e:
            logger.error(f"Failed to store image {filename}: {e}")
            raise FileStorageError(
                "Failed to store uploaded image",
                operation="write",
                filename=filename
            )

        logger.info(f"Stored uploaded image {filename} ({len(image_data)} bytes)")
        return str(target)

    @staticmethod
    def _write_file(target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)


def get_file_manager() -> FileManager:
    """Dependency provider for the file manager."""
    return FileManager()
