"""In-memory storage backend.

Keeps the whole hierarchy in a tree of directory and file nodes. Useful for
tests and for embedding the filesystem without touching the host disk.
Enumeration order is insertion order.
"""

from __future__ import annotations

import errno
import io
import threading
import time
from datetime import datetime
from typing import BinaryIO, Dict, List, Optional, Tuple, Union

from ..exceptions import DirectoryNotEmptyError, QuotaExceededError, StorageError
from ..paths import canonicalize, split_parts
from .base import READ_MODE, UPDATE_MODE, StorageBackend

DEFAULT_CAPACITY = 64 * 1024 * 1024


class _DirNode:
    __slots__ = ("children", "modified_at")

    def __init__(self) -> None:
        self.children: Dict[str, Union["_DirNode", "_FileNode"]] = {}
        self.modified_at: float = time.time()

    def touch(self) -> None:
        self.modified_at = time.time()


class _FileNode:
    __slots__ = ("data", "modified_at")

    def __init__(self, data: bytes = b"") -> None:
        self.data: bytes = data
        self.modified_at: float = time.time()


_Node = Union[_DirNode, _FileNode]


class _MemoryFileHandle(io.BytesIO):
    """Stream over a file node; writes are committed back on close."""

    def __init__(self, storage: "MemoryStorage", node: _FileNode, writable: bool) -> None:
        super().__init__(node.data)
        self._storage = storage
        self._node = node
        self._writable = writable

    def writable(self) -> bool:
        return self._writable

    def write(self, data) -> int:
        if not self._writable:
            raise io.UnsupportedOperation("File opened read-only")
        return super().write(data)

    def truncate(self, size: Optional[int] = None) -> int:
        if not self._writable:
            raise io.UnsupportedOperation("File opened read-only")
        return super().truncate(size)

    def close(self) -> None:
        if self.closed:
            return
        try:
            if self._writable:
                self._storage._commit(self._node, self.getvalue())
        finally:
            super().close()


class MemoryStorage(StorageBackend):
    """Isolated store held entirely in memory.

    Args:
        capacity: Total bytes of file content the store can hold
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self.capacity = capacity
        self._root = _DirNode()
        self._lock = threading.RLock()

    # --- Tree helpers ---

    def _lookup(self, path: str) -> Optional[_Node]:
        node: _Node = self._root
        for part in split_parts(canonicalize(path)):
            if not isinstance(node, _DirNode):
                return None
            child = node.children.get(part)
            if child is None:
                return None
            node = child
        return node

    def _parent_and_name(self, path: str, create_parents: bool = False) -> Tuple[_DirNode, str]:
        parts = split_parts(canonicalize(path))
        if not parts:
            raise StorageError("Operation not permitted on the store root", path=path)

        node: _DirNode = self._root
        for part in parts[:-1]:
            child = node.children.get(part)
            if child is None:
                if not create_parents:
                    raise FileNotFoundError(errno.ENOENT, "Parent directory not found", path)
                child = _DirNode()
                node.children[part] = child
                node.touch()
            if not isinstance(child, _DirNode):
                raise NotADirectoryError(errno.ENOTDIR, "Parent is not a directory", path)
            node = child
        return node, parts[-1]

    def _dir(self, path: str) -> _DirNode:
        node = self._lookup(path)
        if not isinstance(node, _DirNode):
            raise FileNotFoundError(errno.ENOENT, "Directory not found", path)
        return node

    def _file(self, path: str) -> _FileNode:
        node = self._lookup(path)
        if node is None:
            raise FileNotFoundError(errno.ENOENT, "File not found", path)
        if not isinstance(node, _FileNode):
            raise StorageError(f"Not a file: {path}", path=path)
        return node

    def _commit(self, node: _FileNode, data: bytes) -> None:
        with self._lock:
            growth = len(data) - len(node.data)
            if growth > 0 and growth > self._free():
                raise QuotaExceededError("Store capacity exceeded")
            node.data = data
            node.modified_at = time.time()

    def _used(self) -> int:
        total = 0
        stack: List[_DirNode] = [self._root]
        while stack:
            current = stack.pop()
            for child in current.children.values():
                if isinstance(child, _DirNode):
                    stack.append(child)
                else:
                    total += len(child.data)
        return total

    def _free(self) -> int:
        return max(0, self.capacity - self._used())

    # --- Existence ---

    def file_exists(self, path: str) -> bool:
        with self._lock:
            return isinstance(self._lookup(path), _FileNode)

    def directory_exists(self, path: str) -> bool:
        with self._lock:
            return isinstance(self._lookup(path), _DirNode)

    # --- Enumeration ---

    def list_files(self, directory: str) -> List[str]:
        with self._lock:
            node = self._dir(directory)
            return [name for name, child in node.children.items() if isinstance(child, _FileNode)]

    def list_directories(self, directory: str) -> List[str]:
        with self._lock:
            node = self._dir(directory)
            return [name for name, child in node.children.items() if isinstance(child, _DirNode)]

    # --- Byte I/O ---

    def open_file(self, path: str, mode: str = READ_MODE) -> BinaryIO:
        if mode not in (READ_MODE, UPDATE_MODE):
            raise ValueError(f"Unsupported mode: {mode}")
        with self._lock:
            node = self._file(path)
            return _MemoryFileHandle(self, node, writable=(mode == UPDATE_MODE))

    # --- Creation / deletion ---

    def create_file(self, path: str) -> None:
        with self._lock:
            parent, name = self._parent_and_name(path, create_parents=True)
            existing = parent.children.get(name)
            if isinstance(existing, _DirNode):
                raise StorageError(f"A directory already exists at {path}", path=path)
            parent.children[name] = _FileNode()
            parent.touch()

    def create_directory(self, path: str) -> None:
        with self._lock:
            if not split_parts(canonicalize(path)):
                return
            parent, name = self._parent_and_name(path, create_parents=True)
            existing = parent.children.get(name)
            if isinstance(existing, _FileNode):
                raise StorageError(f"A file already exists at {path}", path=path)
            if existing is None:
                parent.children[name] = _DirNode()
                parent.touch()

    def delete_file(self, path: str) -> None:
        with self._lock:
            parent, name = self._parent_and_name(path)
            if not isinstance(parent.children.get(name), _FileNode):
                raise FileNotFoundError(errno.ENOENT, "File not found", path)
            del parent.children[name]
            parent.touch()

    def delete_directory(self, path: str) -> None:
        with self._lock:
            parent, name = self._parent_and_name(path)
            node = parent.children.get(name)
            if not isinstance(node, _DirNode):
                raise FileNotFoundError(errno.ENOENT, "Directory not found", path)
            if node.children:
                raise DirectoryNotEmptyError(f"Directory is not empty: {path}", path=path)
            del parent.children[name]
            parent.touch()

    # --- Rename / copy ---

    def move_file(self, source: str, destination: str) -> None:
        with self._lock:
            self._file(source)
            self._move(source, destination)

    def move_directory(self, source: str, destination: str) -> None:
        with self._lock:
            self._dir(source)
            self._move(source, destination)

    def _move(self, source: str, destination: str) -> None:
        if canonicalize(source).rstrip("/") == canonicalize(destination).rstrip("/"):
            return
        src_parent, src_name = self._parent_and_name(source)
        dst_parent, dst_name = self._parent_and_name(destination)
        if dst_name in dst_parent.children:
            raise StorageError(f"Destination already exists: {destination}", path=destination)
        node = src_parent.children.pop(src_name)
        dst_parent.children[dst_name] = node
        src_parent.touch()
        dst_parent.touch()

    def copy_file(self, source: str, destination: str, overwrite: bool = False) -> None:
        with self._lock:
            node = self._file(source)
            dst_parent, dst_name = self._parent_and_name(destination)
            existing = dst_parent.children.get(dst_name)
            if existing is node:
                return
            if isinstance(existing, _DirNode):
                raise StorageError(f"A directory already exists at {destination}", path=destination)
            if existing is not None and not overwrite:
                raise StorageError(f"Destination already exists: {destination}", path=destination)
            reclaimed = len(existing.data) if existing is not None else 0
            if len(node.data) - reclaimed > self._free():
                raise QuotaExceededError("Store capacity exceeded", path=destination)
            dst_parent.children[dst_name] = _FileNode(node.data)
            dst_parent.touch()

    # --- Metadata ---

    def last_write_time(self, path: str) -> datetime:
        with self._lock:
            node = self._lookup(path)
            if node is None:
                raise FileNotFoundError(errno.ENOENT, "Entry not found", path)
            return datetime.fromtimestamp(node.modified_at)

    def available_free_space(self) -> int:
        with self._lock:
            return self._free()
