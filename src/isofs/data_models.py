"""
Data models for the isolated filesystem.

These are the value objects handed back to callers. They are built fresh from
store state for each request and never cached. ``to_dict`` renders the wire
form with camelCase keys.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional


class FileSystemType(IntEnum):
    """Logical filesystem roots that can be requested."""
    TEMPORARY = 0
    PERSISTENT = 1
    RESOURCE = 2
    APPLICATION = 3

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class EntryDescriptor:
    """
    A resolved file or directory.

    Exactly one of ``is_file`` / ``is_directory`` is true. ``name`` is the last
    path segment, or '/' for the root directory.
    """
    is_file: bool
    is_directory: bool
    name: str
    full_path: str

    def __str__(self) -> str:
        kind = "file" if self.is_file else "directory"
        return f"EntryDescriptor({kind} '{self.full_path}')"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isFile": self.is_file,
            "isDirectory": self.is_directory,
            "name": self.name,
            "fullPath": self.full_path,
        }


@dataclass(frozen=True)
class FileSystemInfo:
    """One of the four logical roots; resource and application have no root entry."""
    name: str
    root: Optional[EntryDescriptor] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        if self.root is not None:
            data["root"] = self.root.to_dict()
        return data


@dataclass(frozen=True)
class ModificationMetadata:
    modification_time: str

    def to_dict(self) -> Dict[str, Any]:
        return {"modificationTime": self.modification_time}


@dataclass(frozen=True)
class FileMetadata:
    """Snapshot of a file's name, MIME type, timestamp and exact byte size."""
    file_name: str
    full_path: str
    type: str
    last_modified_date: str
    size: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fileName": self.file_name,
            "fullPath": self.full_path,
            "type": self.type,
            "lastModifiedDate": self.last_modified_date,
            "size": self.size,
        }


@dataclass(frozen=True)
class CreationFlags:
    """Flags of getFile/getDirectory."""
    create: bool = False
    exclusive: bool = False
