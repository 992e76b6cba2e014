"""
File upload utilities for handling image validation and storage.
Provides common file operations and validation functions.
"""

import io
import logging
import random
import time
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional

import aiofiles
from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from listings_api.config import get_settings
from listings_api.utils.exceptions import (
    FileUploadError,
    FileSizeExceededError,
    UnsupportedFileTypeError,
)

settings = get_settings()
logger = logging.getLogger(__name__)


class FileValidator:
    """Validates uploaded image files against a MIME/extension allow-list and a size limit."""

    # Supported image formats and their extensions
    SUPPORTED_FORMATS: Dict[str, List[str]] = {
        'image/jpeg': ['.jpg', '.jpeg'],
        'image/png': ['.png'],
        'image/webp': ['.webp'],
        'image/gif': ['.gif'],
    }

    # Pillow format names accepted for each MIME type
    PIL_FORMATS: Dict[str, List[str]] = {
        'image/jpeg': ['jpeg', 'mpo'],
        'image/png': ['png'],
        'image/webp': ['webp'],
        'image/gif': ['gif'],
    }

    def __init__(self, max_file_size: int, allowed_types: Optional[List[str]] = None):
        self.max_file_size = max_file_size
        allowed = allowed_types if allowed_types is not None else settings.allowed_file_types
        self.allowed_types = [t for t in allowed if t in self.SUPPORTED_FORMATS]

    @property
    def supported_extensions(self) -> List[str]:
        extensions = []
        for mime_type in self.allowed_types:
            extensions.extend(self.SUPPORTED_FORMATS[mime_type])
        return extensions

    def validate_file_extension(self, filename: str) -> str:
        """
        Validate file extension.

        Returns:
            Lowercase file extension

        Raises:
            FileUploadError: If the filename is missing or has no extension
            UnsupportedFileTypeError: If extension is not supported
        """
        if not filename:
            raise FileUploadError("Filename is required")

        extension = Path(filename).suffix.lower()
        if not extension:
            raise FileUploadError("File must have an extension")

        if extension not in self.supported_extensions:
            raise UnsupportedFileTypeError(extension, self.supported_extensions)

        return extension

    def validate_mime_type(self, mime_type: str) -> str:
        """
        Validate MIME type.

        Raises:
            UnsupportedFileTypeError: If MIME type is not supported
        """
        if mime_type not in self.allowed_types:
            raise UnsupportedFileTypeError(mime_type or "unknown", self.allowed_types)
        return mime_type

    def validate_file_size(self, file_size: int) -> int:
        """
        Validate file size.

        Raises:
            FileUploadError: If the file is empty
            FileSizeExceededError: If file size exceeds limit
        """
        if file_size <= 0:
            raise FileUploadError("File is empty")

        if file_size > self.max_file_size:
            raise FileSizeExceededError(file_size, self.max_file_size)

        return file_size

    def validate_image_content(self, content: bytes, mime_type: str) -> None:
        """
        Check that the bytes decode as an image of the declared type.

        Raises:
            FileUploadError: If the content is not a readable image
        """
        try:
            with Image.open(io.BytesIO(content)) as img:
                pil_format = (img.format or "").lower()
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise FileUploadError(f"Invalid image file: {e}")

        if pil_format not in self.PIL_FORMATS.get(mime_type, []):
            raise FileUploadError(f"Image format '{pil_format}' doesn't match MIME type '{mime_type}'")

    async def validate_upload_file(self, file: UploadFile) -> bytes:
        """
        Comprehensive validation of an uploaded file.

        Returns:
            The file content

        Raises:
            FileUploadError, UnsupportedFileTypeError, FileSizeExceededError
        """
        extension = self.validate_file_extension(file.filename)
        mime_type = self.validate_mime_type(file.content_type or "")

        if extension not in self.SUPPORTED_FORMATS[mime_type]:
            raise UnsupportedFileTypeError(f"{extension} ({mime_type})", self.supported_extensions)

        # Reject early when the multipart parser already knows the size
        if file.size is not None and file.size > self.max_file_size:
            raise FileSizeExceededError(file.size, self.max_file_size)

        await file.seek(0)
        content = await file.read()
        await file.seek(0)

        self.validate_file_size(len(content))
        self.validate_image_content(content, mime_type)
        return content


class FileStorage:
    """Stores and removes files inside a single upload directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def generate_unique_filename(prefix: str, original_filename: str) -> str:
        """
        Generate a collision-resistant filename preserving the extension.

        Format: ``<prefix>-<epoch millis>-<random>.<ext>``
        """
        extension = Path(original_filename).suffix.lower()
        timestamp = int(time.time() * 1000)
        suffix = random.randint(0, 10 ** 9)
        return f"{prefix}-{timestamp}-{suffix}{extension}"

    def resolve(self, reference: str) -> Path:
        """
        Map a stored reference to a path inside the directory.
        Only the final path component is used.
        """
        return self.directory / PurePosixPath(reference).name

    async def save_file(self, content: bytes, filename: str) -> Path:
        """
        Write content under the directory.

        Raises:
            FileUploadError: If the file cannot be written
        """
        file_path = self.directory / filename
        try:
            async with aiofiles.open(file_path, 'wb') as f:
                await f.write(content)
        except OSError as e:
            # Clean up partial file if it exists
            self.delete_file(filename)
            raise FileUploadError(f"Failed to save file: {e}")

        logger.debug(f"Saved file {file_path} ({len(content)} bytes)")
        return file_path

    def delete_file(self, reference: str) -> bool:
        """
        Delete the file a reference points to.

        Missing files and OS errors are logged, never raised.

        Returns:
            True if a file was deleted
        """
        if not PurePosixPath(reference).name:
            logger.warning(f"Ignoring image reference without a filename: {reference!r}")
            return False

        file_path = self.resolve(reference)
        try:
            file_path.unlink()
        except FileNotFoundError:
            logger.warning(f"Image file not found, nothing to delete: {file_path}")
            return False
        except OSError as e:
            logger.error(f"Error deleting image {file_path}: {e}")
            return False

        logger.info(f"Deleted image: {file_path}")
        return True
