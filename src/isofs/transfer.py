"""
Copy and move of files and directories.

Transfers are not transactional: a recursive copy that fails halfway leaves
the entries it already copied in place.
"""

import logging
from typing import List, Optional, Tuple

from .data_models import EntryDescriptor
from .exceptions import InvalidModificationError, NotFoundError
from .paths import ensure_trailing_separator, is_within, join_path, last_segment, same_path
from .resolver import EntryResolver
from .storage.base import StorageBackend

logger = logging.getLogger(__name__)


class TransferEngine:
    """Implements copyTo / moveTo against a storage backend."""

    def __init__(self, store: StorageBackend, resolver: Optional[EntryResolver] = None):
        self.store = store
        self.resolver = resolver or EntryResolver(store)

    def transfer(
        self,
        source_path: Optional[str],
        destination_parent: Optional[str],
        new_name: Optional[str] = None,
        move: bool = False,
    ) -> EntryDescriptor:
        """
        Copy or move ``source_path`` into ``destination_parent``.

        Without ``new_name`` a file keeps its own name while a directory uses
        its full source path as the name. Joining a rooted name replaces the
        parent, so an unnamed directory transfer targets the source itself and
        is a no-op.

        An existing destination file is replaced. An existing destination
        directory is deleted before a move (it must be empty) and merged into
        on a copy.

        Args:
            source_path: File or directory to transfer
            destination_parent: Existing directory receiving the entry
            new_name: Optional name at the destination
            move: Move instead of copy

        Returns:
            Entry at the destination

        Raises:
            NotFoundError: If an argument is empty, the source is missing or
                the destination parent is not a directory
            InvalidModificationError: If a directory would be placed inside itself
        """
        if not destination_parent or not source_path:
            raise NotFoundError("Source path and destination parent are required")

        parent_path = ensure_trailing_separator(destination_parent)

        is_file = self.store.file_exists(source_path)
        is_directory = self.store.directory_exists(source_path)
        parent_exists = self.store.directory_exists(parent_path)

        if (not is_file and not is_directory) or not parent_exists:
            raise NotFoundError(
                "Source or destination parent does not exist",
                path=source_path,
                context={"parent": destination_parent},
            )

        if is_file:
            destination = join_path(parent_path, new_name or last_segment(source_path))
            self._transfer_file(source_path, destination, move)
        else:
            destination = join_path(parent_path, new_name or source_path)
            self._transfer_directory(source_path, destination, move)

        logger.debug(f"{'Moved' if move else 'Copied'} {source_path} -> {destination}")

        entry = self.resolver.get_entry(destination)
        if entry is None:
            raise NotFoundError("Destination missing after transfer", path=destination)
        return entry

    def _transfer_file(self, source: str, destination: str, move: bool) -> None:
        if not same_path(source, destination) and self.store.file_exists(destination):
            self.store.delete_file(destination)

        if move:
            self.store.move_file(source, destination)
        else:
            self.store.copy_file(source, destination, overwrite=True)

    def _transfer_directory(self, source: str, destination: str, move: bool) -> None:
        if same_path(source, destination):
            return

        if is_within(destination, source):
            raise InvalidModificationError(
                "Cannot place a directory inside itself",
                path=destination,
                context={"source": source},
            )

        if move:
            if self.store.directory_exists(destination):
                self.store.delete_directory(destination)
            self.store.move_directory(source, destination)
        else:
            self.copy_tree(source, destination)

    def copy_tree(self, source: str, destination: str) -> int:
        """
        Recursively copy a directory, merging into an existing destination.

        Each level is listed before its destination directory is created.

        Returns:
            Number of files copied
        """
        copied = 0
        pending: List[Tuple[str, str]] = [(source, destination)]

        while pending:
            src_dir, dst_dir = pending.pop()
            files = self.store.list_files(src_dir)
            directories = self.store.list_directories(src_dir)

            if not self.store.directory_exists(dst_dir):
                self.store.create_directory(dst_dir)

            src_prefix = ensure_trailing_separator(src_dir)
            dst_prefix = ensure_trailing_separator(dst_dir)

            for name in files:
                self.store.copy_file(src_prefix + name, dst_prefix + name, overwrite=True)
                copied += 1

            for name in reversed(directories):
                pending.append((src_prefix + name, dst_prefix + name))

        return copied
