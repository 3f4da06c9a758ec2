"""Storage backends for the isolated filesystem.

Example:
    >>> from isofs.storage import MemoryStorage
    >>> store = MemoryStorage()
    >>> store.create_directory("/docs")
    >>> store.directory_exists("/docs/")
    True
"""

from .base import READ_MODE, UPDATE_MODE, StorageBackend
from .local import LocalStorage
from .memory import MemoryStorage

__all__ = ["StorageBackend", "LocalStorage", "MemoryStorage", "READ_MODE", "UPDATE_MODE"]
