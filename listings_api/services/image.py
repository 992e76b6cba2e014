"""
Image service for handling uploaded images across a record's lifecycle.
Keeps a record's stored reference list consistent with the files on disk.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence
import logging

from fastapi import UploadFile

from listings_api.config import get_settings
from listings_api.utils.exceptions import TooManyFilesError
from listings_api.utils.file_utils import FileStorage, FileValidator
from listings_api.utils.image_paths import RawPathList, normalize_reference, normalize_reference_list

settings = get_settings()
logger = logging.getLogger(__name__)


@dataclass
class ImageReconciliation:
    """Outcome of reconciling a record's images with an update request."""

    paths: List[str]
    to_delete: List[str] = field(default_factory=list)
    added: List[str] = field(default_factory=list)


class ImageService:
    """
    Service for managing the images of one upload area (property or agent images).

    Stored references are relative URL paths, ``<url_prefix><filename>``; the
    file itself lives in ``directory``.
    """

    def __init__(
        self,
        directory: Path,
        url_prefix: str,
        filename_prefix: str,
        max_file_size: int,
        max_files: Optional[int] = None,
        allowed_types: Optional[List[str]] = None
    ):
        self.storage = FileStorage(directory)
        self.validator = FileValidator(max_file_size, allowed_types)
        self.url_prefix = url_prefix if url_prefix.endswith("/") else f"{url_prefix}/"
        self.filename_prefix = filename_prefix
        self.max_files = max_files

    @property
    def directory(self) -> Path:
        return self.storage.directory

    def reference_for(self, filename: str) -> str:
        """Relative path stored for a file in this area."""
        return f"{self.url_prefix}{filename}"

    async def attach(self, files: Sequence[UploadFile]) -> List[str]:
        """
        Validate and store uploaded files.

        Every file is validated before anything is written. If a write fails
        part-way, files already written by this call are removed.

        Args:
            files: Uploaded files, in upload order

        Returns:
            Relative paths of the stored files, in upload order

        Raises:
            TooManyFilesError: If more files than allowed were sent
            FileUploadError, UnsupportedFileTypeError, FileSizeExceededError:
                If any file fails validation or cannot be written
        """
        files = [f for f in files if f is not None and f.filename]
        if not files:
            return []

        if self.max_files is not None and len(files) > self.max_files:
            raise TooManyFilesError(len(files), self.max_files)

        contents = [await self.validator.validate_upload_file(f) for f in files]

        references = []
        try:
            for file, content in zip(files, contents):
                filename = self.storage.generate_unique_filename(self.filename_prefix, file.filename)
                await self.storage.save_file(content, filename)
                references.append(self.reference_for(filename))
        except Exception:
            self.discard(references)
            raise

        logger.info(f"Stored {len(references)} image(s) in {self.directory}")
        return references

    async def attach_single(self, file: Optional[UploadFile]) -> Optional[str]:
        """Store a single optional upload and return its relative path."""
        if file is None or not file.filename:
            return None
        references = await self.attach([file])
        return references[0]

    def reconcile_paths(
        self,
        current: Sequence[str],
        retained: Optional[RawPathList],
        new_paths: Sequence[str] = ()
    ) -> ImageReconciliation:
        """
        Work out a record's new reference list.

        ``retained`` is the caller's subset of the current images to keep, in
        the order to keep them. Full URLs are reduced to relative paths and
        entries not currently attached are ignored. ``None`` keeps nothing.

        Returns:
            The merged list (retained then new), the paths to delete
            (current minus retained) and the new paths
        """
        current = list(current)
        current_set = set(current)
        kept = []
        for path in normalize_reference_list(retained):
            if path not in current_set:
                logger.warning(f"Ignoring retained image not attached to the record: {path}")
                continue
            if path not in kept:
                kept.append(path)

        kept_set = set(kept)
        to_delete = [path for path in current if path not in kept_set]

        return ImageReconciliation(
            paths=kept + list(new_paths),
            to_delete=to_delete,
            added=list(new_paths)
        )

    async def reconcile(
        self,
        current: Sequence[str],
        retained: Optional[RawPathList],
        files: Sequence[UploadFile] = ()
    ) -> ImageReconciliation:
        """
        Store new uploads and reconcile them with the current reference list.

        Files in ``to_delete`` are not removed here; callers remove them once
        the record update has been persisted.
        """
        added = await self.attach(files)
        return self.reconcile_paths(current, retained, added)

    async def replace(
        self,
        current: Optional[str],
        file: Optional[UploadFile]
    ) -> ImageReconciliation:
        """
        Single-image variant of reconcile.

        A new upload replaces the current image, which is then scheduled for
        deletion. Without an upload the current image is kept.
        """
        new_path = await self.attach_single(file)
        current_paths = [current] if current else []
        if new_path is None:
            return ImageReconciliation(paths=current_paths)
        return ImageReconciliation(paths=[new_path], to_delete=current_paths, added=[new_path])

    def remove(self, reference: Optional[str]) -> bool:
        """Best-effort removal of the file behind a reference."""
        path = normalize_reference(reference)
        if path is None:
            return False
        return self.storage.delete_file(path)

    def remove_all(self, references: Sequence[str]) -> int:
        """
        Best-effort removal of several files.

        Returns:
            Number of files actually deleted
        """
        return sum(1 for reference in references if self.remove(reference))

    def discard(self, references: Sequence[str]) -> None:
        """Remove files stored for a mutation that did not persist."""
        if references:
            logger.warning(f"Discarding {len(references)} unpersisted image(s)")
            self.remove_all(references)


def create_property_image_service() -> ImageService:
    """Image service for property galleries."""
    return ImageService(
        directory=settings.property_upload_path,
        url_prefix=settings.property_url_prefix,
        filename_prefix="property",
        max_file_size=settings.property_max_file_size,
        max_files=settings.max_images_per_upload
    )


def create_agent_image_service() -> ImageService:
    """Image service for agent profile pictures."""
    return ImageService(
        directory=settings.agent_upload_path,
        url_prefix=settings.agent_url_prefix,
        filename_prefix="agent",
        max_file_size=settings.agent_max_file_size,
        max_files=1
    )
