"""Sandboxed, quota-aware virtual filesystem with a command-style interface.

Example:
    >>> from isofs import FileCommands
    >>> commands = FileCommands.in_memory()
    >>> result = commands.execute("getFile", {"fullPath": "/", "path": "a.txt",
    ...                                       "options": {"create": True}})
    >>> result.message.name
    'a.txt'
"""

from .commands import FileCommands
from .config import FileSystemConfig
from .data_models import (
    CreationFlags,
    EntryDescriptor,
    FileMetadata,
    FileSystemInfo,
    FileSystemType,
    ModificationMetadata,
)
from .exceptions import ErrorCode, FileSystemError
from .options import OperationOptions
from .results import CommandResult, CommandStatus
from .storage import LocalStorage, MemoryStorage, StorageBackend

__version__ = "0.1.0"

__all__ = [
    "FileCommands",
    "FileSystemConfig",
    "CreationFlags",
    "EntryDescriptor",
    "FileMetadata",
    "FileSystemInfo",
    "FileSystemType",
    "ModificationMetadata",
    "ErrorCode",
    "FileSystemError",
    "OperationOptions",
    "CommandResult",
    "CommandStatus",
    "StorageBackend",
    "LocalStorage",
    "MemoryStorage",
]
