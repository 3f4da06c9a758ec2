"""
StorageBackend: the contract the filesystem engine is written against.

A backend is a hierarchical byte store addressed by virtual paths rooted at
'/'. Backends report failures with builtin ``OSError`` subclasses
(``FileNotFoundError`` for missing entries or parents) or ``StorageError`` for
structural violations such as deleting a non-empty directory.

read_bytes and size_of have default implementations built on open_file, so a
new backend only needs the abstract methods.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import BinaryIO, List

READ_MODE = "rb"
UPDATE_MODE = "r+b"


class StorageBackend(ABC):
    """Abstract isolated store."""

    # --- Existence ---

    @abstractmethod
    def file_exists(self, path: str) -> bool:
        """True if ``path`` exists and is a file."""

    @abstractmethod
    def directory_exists(self, path: str) -> bool:
        """True if ``path`` exists and is a directory."""

    # --- Enumeration ---

    @abstractmethod
    def list_files(self, directory: str) -> List[str]:
        """Names (not paths) of the files directly inside ``directory``."""

    @abstractmethod
    def list_directories(self, directory: str) -> List[str]:
        """Names (not paths) of the directories directly inside ``directory``."""

    # --- Byte I/O ---

    @abstractmethod
    def open_file(self, path: str, mode: str = READ_MODE) -> BinaryIO:
        """
        Open an existing file.

        Args:
            path: File to open
            mode: READ_MODE or UPDATE_MODE (read/write without truncation)

        Returns:
            A binary stream; use it as a context manager so it is always closed
        """

    # --- Creation / deletion ---

    @abstractmethod
    def create_file(self, path: str) -> None:
        """Create an empty file (truncating an existing one), creating parents as needed."""

    @abstractmethod
    def create_directory(self, path: str) -> None:
        """Create a directory and any missing parents; existing directories are left alone."""

    @abstractmethod
    def delete_file(self, path: str) -> None:
        ...

    @abstractmethod
    def delete_directory(self, path: str) -> None:
        """Delete an empty directory; raises DirectoryNotEmptyError otherwise."""

    # --- Rename / copy ---

    @abstractmethod
    def move_file(self, source: str, destination: str) -> None:
        """Rename a file. The destination must not exist."""

    @abstractmethod
    def move_directory(self, source: str, destination: str) -> None:
        """Rename a directory together with its subtree. The destination must not exist."""

    @abstractmethod
    def copy_file(self, source: str, destination: str, overwrite: bool = False) -> None:
        ...

    # --- Metadata ---

    @abstractmethod
    def last_write_time(self, path: str) -> datetime:
        ...

    @abstractmethod
    def available_free_space(self) -> int:
        """Bytes that may still be written to the store."""

    # --- Default helpers ---

    def read_bytes(self, path: str) -> bytes:
        with self.open_file(path, READ_MODE) as stream:
            return stream.read()

    def size_of(self, path: str) -> int:
        """Exact byte length of a file, measured through an open stream."""
        with self.open_file(path, READ_MODE) as stream:
            return stream.seek(0, 2)
