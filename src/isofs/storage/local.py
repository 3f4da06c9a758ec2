"""Local storage backend rooted at a host directory.

Virtual paths are mapped below the root with traversal protection, so no
request can reach files outside of it.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, List, Optional

import psutil

from ..exceptions import DirectoryNotEmptyError, SandboxEscapeError, StorageError
from ..paths import canonicalize, is_root, split_parts
from .base import READ_MODE, UPDATE_MODE, StorageBackend

logger = logging.getLogger(__name__)


class LocalStorage(StorageBackend):
    """Isolated store backed by a directory on the host filesystem.

    Example:
        >>> store = LocalStorage(Path("/tmp/isofs-123"))
        >>> store.create_file("/docs/a.txt")
        >>> store.file_exists("docs/a.txt")
        True
    """

    def __init__(
        self,
        root: Path,
        allow_symlink_escape: bool = False,
        quota_bytes: Optional[int] = None,
    ) -> None:
        """Initialize the local backend.

        Args:
            root: The host directory that serves as the store root
            allow_symlink_escape: If True, allow symlinks that point outside the root
            quota_bytes: Optional cap on the bytes held below the root
        """
        self.root = Path(root).expanduser().resolve()
        self.allow_symlink_escape = allow_symlink_escape
        self.quota_bytes = quota_bytes
        self.root.mkdir(parents=True, exist_ok=True)
        logger.debug(f"LocalStorage rooted at {self.root}")

    def resolve(self, path: str) -> Path:
        """Resolve a virtual path to a host path inside the root.

        Raises:
            SandboxEscapeError: If the resolved path escapes the root
        """
        parts = split_parts(canonicalize(path))
        candidate = self.root.joinpath(*parts).resolve(strict=False)

        if not self.allow_symlink_escape:
            try:
                candidate.relative_to(self.root)
            except ValueError as exc:
                raise SandboxEscapeError(
                    f"Resolved path escapes store root: {candidate}", path=path
                ) from exc

        return candidate

    # --- Existence ---

    def file_exists(self, path: str) -> bool:
        return self.resolve(path).is_file()

    def directory_exists(self, path: str) -> bool:
        return self.resolve(path).is_dir()

    # --- Enumeration ---

    def list_files(self, directory: str) -> List[str]:
        return self._list(directory, want_dirs=False)

    def list_directories(self, directory: str) -> List[str]:
        return self._list(directory, want_dirs=True)

    def _list(self, directory: str, want_dirs: bool) -> List[str]:
        host = self.resolve(directory)
        if not host.is_dir():
            raise FileNotFoundError(errno.ENOENT, "Directory not found", directory)
        with os.scandir(host) as entries:
            names = [
                entry.name
                for entry in entries
                if (entry.is_dir() if want_dirs else entry.is_file())
            ]
        return sorted(names)

    # --- Byte I/O ---

    def open_file(self, path: str, mode: str = READ_MODE) -> BinaryIO:
        if mode not in (READ_MODE, UPDATE_MODE):
            raise ValueError(f"Unsupported mode: {mode}")
        host = self.resolve(path)
        if host.is_dir():
            raise StorageError(f"Cannot open a directory as a file: {path}", path=path)
        return host.open(mode)

    # --- Creation / deletion ---

    def create_file(self, path: str) -> None:
        host = self.resolve(path)
        if host.is_dir():
            raise StorageError(f"A directory already exists at {path}", path=path)
        host.parent.mkdir(parents=True, exist_ok=True)
        with host.open("wb"):
            pass

    def create_directory(self, path: str) -> None:
        host = self.resolve(path)
        if host.is_file():
            raise StorageError(f"A file already exists at {path}", path=path)
        host.mkdir(parents=True, exist_ok=True)

    def delete_file(self, path: str) -> None:
        host = self.resolve(path)
        if not host.is_file():
            raise FileNotFoundError(errno.ENOENT, "File not found", path)
        host.unlink()

    def delete_directory(self, path: str) -> None:
        if is_root(canonicalize(path)):
            raise StorageError("The store root cannot be deleted", path=path)
        host = self.resolve(path)
        if not host.is_dir():
            raise FileNotFoundError(errno.ENOENT, "Directory not found", path)
        try:
            host.rmdir()
        except OSError as exc:
            if exc.errno in (errno.ENOTEMPTY, errno.EEXIST):
                raise DirectoryNotEmptyError(f"Directory is not empty: {path}", path=path) from exc
            raise

    # --- Rename / copy ---

    def move_file(self, source: str, destination: str) -> None:
        src, dst = self.resolve(source), self.resolve(destination)
        if not src.is_file():
            raise FileNotFoundError(errno.ENOENT, "File not found", source)
        self._check_target(src, dst, destination)
        src.rename(dst)

    def move_directory(self, source: str, destination: str) -> None:
        src, dst = self.resolve(source), self.resolve(destination)
        if not src.is_dir():
            raise FileNotFoundError(errno.ENOENT, "Directory not found", source)
        self._check_target(src, dst, destination)
        src.rename(dst)

    def copy_file(self, source: str, destination: str, overwrite: bool = False) -> None:
        src, dst = self.resolve(source), self.resolve(destination)
        if not src.is_file():
            raise FileNotFoundError(errno.ENOENT, "File not found", source)
        if src == dst:
            return
        if dst.is_dir():
            raise StorageError(f"A directory already exists at {destination}", path=destination)
        if dst.exists() and not overwrite:
            raise StorageError(f"Destination already exists: {destination}", path=destination)
        if not dst.parent.is_dir():
            raise FileNotFoundError(errno.ENOENT, "Destination directory not found", destination)
        shutil.copy2(src, dst)

    @staticmethod
    def _check_target(src: Path, dst: Path, destination: str) -> None:
        if src == dst:
            return
        if dst.exists():
            raise StorageError(f"Destination already exists: {destination}", path=destination)
        if not dst.parent.is_dir():
            raise FileNotFoundError(errno.ENOENT, "Destination directory not found", destination)

    # --- Metadata ---

    def last_write_time(self, path: str) -> datetime:
        host = self.resolve(path)
        return datetime.fromtimestamp(host.stat().st_mtime)

    def available_free_space(self) -> int:
        free = int(psutil.disk_usage(str(self.root)).free)
        if self.quota_bytes is None:
            return free
        return max(0, min(free, self.quota_bytes - self.used_space()))

    def used_space(self) -> int:
        total = 0
        for dirpath, _dirnames, filenames in os.walk(self.root):
            for name in filenames:
                try:
                    total += os.path.getsize(os.path.join(dirpath, name))
                except OSError:
                    # Removed while walking
                    continue
        return total
