"""Bottom-up removal of directory subtrees."""

import logging

from .exceptions import NoModificationAllowedError, NotFoundError, StorageError
from .paths import canonicalize, ensure_trailing_separator, is_root
from .storage.base import StorageBackend

logger = logging.getLogger(__name__)


class RecursiveRemover:
    """
    Deletes a directory and everything below it.

    Children are removed before their parent so stores that refuse to delete
    non-empty directories are satisfied. Nothing is rolled back when a step
    fails.
    """

    def __init__(self, store: StorageBackend):
        self.store = store

    def remove_tree(self, path: str) -> int:
        """
        Remove the directory at ``path`` and its whole subtree.

        Returns:
            Number of entries deleted, the directory itself included

        Raises:
            NotFoundError: If ``path`` is not an existing directory
            NoModificationAllowedError: If ``path`` is the root or a deletion fails
        """
        if not path or not self.store.directory_exists(path):
            raise NotFoundError("Directory does not exist", path=path)
        if is_root(canonicalize(path)):
            raise NoModificationAllowedError("The filesystem root cannot be removed", path=path)

        try:
            removed = self._remove(path)
        except (StorageError, OSError) as exc:
            raise NoModificationAllowedError(
                f"Recursive removal aborted: {exc}", path=path
            ) from exc

        logger.debug(f"Removed {removed} entries under {path}")
        return removed

    def _remove(self, path: str) -> int:
        prefix = ensure_trailing_separator(path)
        removed = 0

        for name in self.store.list_files(prefix):
            self.store.delete_file(prefix + name)
            removed += 1

        for name in self.store.list_directories(prefix):
            removed += self._remove(prefix + name + "/")

        self.store.delete_directory(path)
        return removed + 1
