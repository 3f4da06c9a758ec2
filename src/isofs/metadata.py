"""
Metadata and quota handling.

Covers modification times, full file metadata, free-space checks and the
lookup of the four logical filesystem roots.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from .config import FileSystemConfig
from .data_models import FileMetadata, FileSystemInfo, FileSystemType, ModificationMetadata
from .exceptions import NoModificationAllowedError, NotFoundError, QuotaExceededError
from .mime import get_mime_type
from .paths import canonicalize, last_segment
from .resolver import EntryResolver
from .storage.base import StorageBackend

logger = logging.getLogger(__name__)


class MetadataEngine:
    """
    Reads metadata from the store and grants filesystem roots.

    Args:
        store: Storage backend
        config: Filesystem configuration (temp directory, timestamp format)
        resolver: Entry resolver, built from ``store`` when omitted
        mime_lookup: Callable mapping a path to a MIME type
    """

    def __init__(
        self,
        store: StorageBackend,
        config: Optional[FileSystemConfig] = None,
        resolver: Optional[EntryResolver] = None,
        mime_lookup: Callable[[str], str] = get_mime_type,
    ):
        self.store = store
        self.config = config or FileSystemConfig()
        self.resolver = resolver or EntryResolver(store)
        self.mime_lookup = mime_lookup

    def format_time(self, value: datetime) -> str:
        return value.strftime(self.config.timestamp_format)

    def get_metadata(self, path: Optional[str]) -> ModificationMetadata:
        """Last-write time of the file or directory at ``path``."""
        if path and (self.store.file_exists(path) or self.store.directory_exists(path)):
            return ModificationMetadata(
                modification_time=self.format_time(self.store.last_write_time(path))
            )
        raise NotFoundError("No file or directory at path", path=path)

    def get_file_metadata(self, path: Optional[str]) -> FileMetadata:
        """Name, MIME type, last-write time and exact size of a file."""
        if not path or not self.store.file_exists(path):
            raise NotFoundError("File doesn't exist", path=path)

        size = self.store.size_of(path)
        full_path = canonicalize(path)
        return FileMetadata(
            file_name=last_segment(full_path),
            full_path=full_path,
            type=self.mime_lookup(full_path),
            last_modified_date=self.format_time(self.store.last_write_time(path)),
            size=size,
        )

    def free_space(self) -> int:
        return self.store.available_free_space()

    def check_quota(self, requested_size: int) -> None:
        """
        Make sure ``requested_size`` bytes are available.

        A size of zero means no check was requested.

        Raises:
            QuotaExceededError: If the store has less free space than requested
        """
        if requested_size == 0:
            return
        available = self.free_space()
        if requested_size > available:
            raise QuotaExceededError(
                f"Requested {requested_size} bytes but only {available} are available",
                context={"requested": requested_size, "available": available},
            )

    def request_file_system(self, fs_type: int, size: int = 0) -> FileSystemInfo:
        """
        Grant one of the logical filesystem roots.

        PERSISTENT is rooted at '/', TEMPORARY at the temp directory (created
        on first request), RESOURCE and APPLICATION carry no root.

        Raises:
            QuotaExceededError: If ``size`` exceeds the free space
            NoModificationAllowedError: If ``fs_type`` is not a known type
        """
        self.check_quota(size)

        try:
            kind = FileSystemType(fs_type)
        except ValueError as exc:
            raise NoModificationAllowedError(f"Unknown filesystem type: {fs_type}") from exc

        if kind is FileSystemType.PERSISTENT:
            return FileSystemInfo(kind.label, self.resolver.get_entry("/"))

        if kind is FileSystemType.TEMPORARY:
            temp_root = self.config.temp_root
            if not self.store.directory_exists(temp_root):
                logger.info(f"Creating temporary root {temp_root}")
                self.store.create_directory(temp_root)
            return FileSystemInfo(kind.label, self.resolver.get_entry(temp_root))

        return FileSystemInfo(kind.label)
