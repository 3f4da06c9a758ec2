"""
Exceptions and error codes for the isolated filesystem.

Every failure a command can report maps onto one of the stable numeric codes
in ``ErrorCode``. Engine code raises the ``FileSystemError`` subclasses below;
the command layer turns them into results through ``isofs.classifier``.
"""

from enum import IntEnum
from typing import Any, Dict, Optional


class ErrorCode(IntEnum):
    """Numeric error codes reported to callers."""
    NOT_FOUND = 1
    SECURITY = 2
    ABORT = 3
    NOT_READABLE = 4
    ENCODING = 5
    NO_MODIFICATION_ALLOWED = 6
    INVALID_STATE = 7
    SYNTAX = 8
    INVALID_MODIFICATION = 9
    QUOTA_EXCEEDED = 10
    TYPE_MISMATCH = 11
    PATH_EXISTS = 12


class FileSystemError(Exception):
    """
    Base class for all classified filesystem failures.

    Args:
        message: Human readable description
        error_code: Code reported to the caller
        path: Path the failure relates to, if any
        context: Extra details for logs
    """

    default_code: ErrorCode = ErrorCode.NO_MODIFICATION_ALLOWED

    def __init__(
        self,
        message: str = "",
        error_code: Optional[ErrorCode] = None,
        path: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.__class__.__name__
        self.error_code = ErrorCode(error_code) if error_code is not None else self.default_code
        self.path = path
        self.context = context or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        text = f"[{self.error_code.name}] {self.message}"
        if self.path is not None:
            text += f" (path: {self.path})"
        return text

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": int(self.error_code),
            "error": self.error_code.name,
            "message": self.message,
            "path": self.path,
            "context": self.context,
        }


class NotFoundError(FileSystemError):
    default_code = ErrorCode.NOT_FOUND


class SecurityError(FileSystemError):
    default_code = ErrorCode.SECURITY


class SandboxEscapeError(SecurityError):
    """Raised when a path would leave the isolated store."""


class AbortError(FileSystemError):
    default_code = ErrorCode.ABORT


class NotReadableError(FileSystemError):
    default_code = ErrorCode.NOT_READABLE


class EncodingError(FileSystemError):
    """Malformed argument, URI or character set."""
    default_code = ErrorCode.ENCODING


class NoModificationAllowedError(FileSystemError):
    default_code = ErrorCode.NO_MODIFICATION_ALLOWED


class InvalidStateError(FileSystemError):
    default_code = ErrorCode.INVALID_STATE


class PathSyntaxError(FileSystemError):
    default_code = ErrorCode.SYNTAX


class InvalidModificationError(FileSystemError):
    default_code = ErrorCode.INVALID_MODIFICATION


class QuotaExceededError(FileSystemError):
    default_code = ErrorCode.QUOTA_EXCEEDED


class TypeMismatchError(FileSystemError):
    """The entry kind does not match the request (file vs directory)."""
    default_code = ErrorCode.TYPE_MISMATCH


class PathExistsError(FileSystemError):
    """Exclusive create hit an existing entry."""
    default_code = ErrorCode.PATH_EXISTS


class StorageError(Exception):
    """
    Structural failure raised by a storage backend.

    Examples are deleting a non-empty directory or creating a file where a
    directory already lives. The classifier decides which code it becomes.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)


class DirectoryNotEmptyError(StorageError):
    pass


class MalformedOptionsError(Exception):
    """The request payload could not be parsed or is missing required data."""
