"""Entry resolution: turn a path into an EntryDescriptor from live store state."""

import logging
from typing import Optional

from .data_models import EntryDescriptor
from .exceptions import EncodingError, FileSystemError, NotFoundError
from .paths import canonicalize, last_segment
from .storage.base import StorageBackend

logger = logging.getLogger(__name__)


class EntryResolver:
    """Builds entry descriptors by asking the store what a path currently is."""

    def __init__(self, store: StorageBackend):
        self.store = store

    def resolve(self, path: Optional[str]) -> EntryDescriptor:
        """
        Resolve ``path`` strictly.

        The file check runs before the directory check, so a backend that
        reports both for one path yields a file entry.

        Raises:
            EncodingError: If ``path`` is empty
            NotFoundError: If nothing exists at ``path``
            SandboxEscapeError: If ``path`` climbs above the root
        """
        if not path:
            raise EncodingError("Path must not be empty")

        full_path = canonicalize(path)

        if self.store.file_exists(full_path):
            return EntryDescriptor(
                is_file=True,
                is_directory=False,
                name=last_segment(full_path),
                full_path=full_path,
            )

        if self.store.directory_exists(full_path):
            return EntryDescriptor(
                is_file=False,
                is_directory=True,
                name=last_segment(full_path) or "/",
                full_path=full_path,
            )

        raise NotFoundError("No file or directory at path", path=path)

    def get_entry(self, path: Optional[str]) -> Optional[EntryDescriptor]:
        """Resolve ``path``, returning None instead of raising on any failure."""
        try:
            return self.resolve(path)
        except (FileSystemError, OSError) as e:
            logger.debug(f"Could not resolve entry for {path!r}: {e}")
            return None
