"""
Error classification.

Maps a raised failure to exactly one ``ErrorCode``. This is a pure function of
the exception and the call site's defaults; it never touches the store.
"""

from typing import Dict, Type

from .exceptions import ErrorCode, FileSystemError, StorageError

# Checked in MRO order, so subclasses win over their bases.
_BUILTIN_CODES: Dict[Type[BaseException], ErrorCode] = {
    FileNotFoundError: ErrorCode.NOT_FOUND,
    NotADirectoryError: ErrorCode.NOT_FOUND,
    PermissionError: ErrorCode.SECURITY,
    FileExistsError: ErrorCode.PATH_EXISTS,
    LookupError: ErrorCode.ENCODING,
    ValueError: ErrorCode.ENCODING,
}

# Failures raised by the store itself; their code depends on the call site.
_STORAGE_FAILURES = (StorageError, OSError)


def classify(
    error: BaseException,
    default: ErrorCode = ErrorCode.NO_MODIFICATION_ALLOWED,
    storage_default: ErrorCode = ErrorCode.INVALID_MODIFICATION,
) -> ErrorCode:
    """
    Classify a failure.

    Args:
        error: The raised exception
        default: Code for failures nothing else matches
        storage_default: Code for store-level failures (InvalidModification
            for write-side operations, NotReadable for read-side ones)

    Returns:
        The error code to report
    """
    if isinstance(error, FileSystemError):
        return error.error_code

    for cls in type(error).__mro__:
        code = _BUILTIN_CODES.get(cls)
        if code is not None:
            return code

    if isinstance(error, _STORAGE_FAILURES):
        return storage_default

    return default
