"""
Command surface of the isolated filesystem.

``FileCommands`` exposes one method per command. Each takes the raw options
payload (JSON text, a mapping or an ``OperationOptions``) and returns a
``CommandResult``; failures never escape as exceptions. ``execute`` dispatches
by the wire-level command name.
"""

import base64
import codecs
import contextlib
import functools
import logging
import re
import threading
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import unquote, urlsplit

from .audit import AuditLogger
from .classifier import classify
from .config import FileSystemConfig
from .data_models import EntryDescriptor, FileMetadata, FileSystemInfo, ModificationMetadata
from .exceptions import (
    EncodingError,
    ErrorCode,
    MalformedOptionsError,
    NoModificationAllowedError,
    NotFoundError,
    PathExistsError,
    TypeMismatchError,
)
from .metadata import MetadataEngine
from .mime import get_mime_type
from .options import OperationOptions, RawOptions
from .paths import canonicalize, ensure_trailing_separator, is_root, join_path, parent_of
from .remover import RecursiveRemover
from .resolver import EntryResolver
from .results import CommandResult
from .storage.base import UPDATE_MODE, StorageBackend
from .storage.local import LocalStorage
from .storage.memory import DEFAULT_CAPACITY, MemoryStorage
from .transfer import TransferEngine

logger = logging.getLogger(__name__)

_URI_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")


def command(
    name: str,
    default: ErrorCode = ErrorCode.NO_MODIFICATION_ALLOWED,
    storage_default: ErrorCode = ErrorCode.INVALID_MODIFICATION,
    path_field: str = "full_path",
):
    """
    Mark a method as a filesystem command.

    The wrapped method receives parsed ``OperationOptions`` and returns the
    success payload. Any failure it raises is classified exactly once.

    Args:
        name: Wire-level command name
        default: Code for failures the classifier cannot place
        storage_default: Code for store-level failures
        path_field: Options field recorded as the path in audit logs
    """
    def decorator(func: Callable[["FileCommands", OperationOptions], Any]):
        @functools.wraps(func)
        def wrapper(self: "FileCommands", options: RawOptions = None) -> CommandResult:
            return self._run(name, func, options, default, storage_default, path_field)

        wrapper.command_name = name
        return wrapper

    return decorator


class FileCommands:
    """
    Filesystem commands over one isolated store.

    Example:
        >>> commands = FileCommands.in_memory()
        >>> commands.write({"filePath": "/a.txt", "data": "hello", "position": 0}).message
        5
        >>> commands.read_as_text({"filePath": "/a.txt"}).message
        'hello'
    """

    # Names accepted in addition to the canonical command names
    ALIASES: Dict[str, str] = {
        "testFileExists": "checkFileExists",
        "testDirectoryExists": "checkDirectoryExists",
    }

    def __init__(
        self,
        store: Optional[StorageBackend] = None,
        config: Optional[FileSystemConfig] = None,
    ):
        """
        Initialize the command layer.

        Args:
            store: Storage backend (if None, a LocalStorage at the configured root)
            config: Configuration (if None, uses defaults)
        """
        self.config = config or FileSystemConfig()
        if store is None:
            store = LocalStorage(
                self.config.resolved_root(),
                allow_symlink_escape=self.config.allow_symlink_escape,
                quota_bytes=self.config.quota_bytes,
            )
        self.store = store

        self.resolver = EntryResolver(store)
        self.transfer_engine = TransferEngine(store, self.resolver)
        self.remover = RecursiveRemover(store)
        self.metadata = MetadataEngine(store, self.config, self.resolver, get_mime_type)
        self.audit = AuditLogger(self.config)

        self._lock = threading.RLock() if self.config.serialize_requests else None
        self._handlers = self._build_handler_registry()

        logger.info(
            f"FileCommands initialized with {type(store).__name__} and {len(self._handlers)} commands"
        )

    @classmethod
    def in_memory(
        cls, capacity: int = DEFAULT_CAPACITY, config: Optional[FileSystemConfig] = None
    ) -> "FileCommands":
        """Create commands over a fresh MemoryStorage."""
        return cls(store=MemoryStorage(capacity), config=config)

    def _build_handler_registry(self) -> Dict[str, Callable[[RawOptions], CommandResult]]:
        registry = {}
        for cls in reversed(type(self).__mro__):
            for attr, member in vars(cls).items():
                name = getattr(member, "command_name", None)
                if name:
                    registry[name] = getattr(self, attr)
        for alias, target in self.ALIASES.items():
            registry[alias] = registry[target]
        return registry

    @property
    def actions(self) -> List[str]:
        return sorted(self._handlers)

    def execute(self, action: str, options: RawOptions = None) -> CommandResult:
        """
        Run the command named ``action``.

        Returns:
            The command's result, or an INVALID_ACTION result for unknown names
        """
        handler = self._handlers.get(action)
        if handler is None:
            logger.warning(f"Unknown filesystem command: {action}")
            return CommandResult.invalid_action(action)
        return handler(options)

    def close(self) -> None:
        self.audit.close()

    # ========== Execution ==========

    def _guard(self):
        return self._lock if self._lock is not None else contextlib.nullcontext()

    def _run(
        self,
        name: str,
        func: Callable[["FileCommands", OperationOptions], Any],
        raw_options: RawOptions,
        default: ErrorCode,
        storage_default: ErrorCode,
        path_field: str,
    ) -> CommandResult:
        path = None
        with self._guard():
            try:
                options = OperationOptions.parse(raw_options)
                path = getattr(options, path_field, None)
                payload = func(self, options)
            except MalformedOptionsError as e:
                logger.debug(f"{name}: malformed options: {e}")
                self.audit.log_operation(name, path, False, {"status": "json_exception"})
                return CommandResult.json_exception(str(e))
            except Exception as e:
                code = classify(e, default, storage_default)
                logger.debug(f"{name} failed with {code.name}: {e}")
                self.audit.log_operation(name, path, False, {"code": int(code)})
                return CommandResult.error(code)

        self.audit.log_operation(name, path, True)
        return CommandResult.ok(payload)

    # ========== Existence ==========

    @command("checkFileExists", default=ErrorCode.NOT_FOUND,
             storage_default=ErrorCode.NOT_READABLE, path_field="file_path")
    def check_file_exists(self, options: OperationOptions) -> bool:
        return bool(options.file_path) and self.store.file_exists(options.file_path)

    @command("checkDirectoryExists", default=ErrorCode.NOT_FOUND,
             storage_default=ErrorCode.NOT_READABLE, path_field="dir_name")
    def check_directory_exists(self, options: OperationOptions) -> bool:
        return bool(options.dir_name) and self.store.directory_exists(options.dir_name)

    # ========== Reading ==========

    def _require_file(self, path: str) -> None:
        if not path or not self.store.file_exists(path):
            raise NotFoundError("File doesn't exist", path=path)

    def _codec(self, options: OperationOptions) -> codecs.CodecInfo:
        encoding = options.encoding or self.config.default_encoding
        try:
            return codecs.lookup(encoding)
        except LookupError as exc:
            raise EncodingError(f"Unknown encoding: {encoding}") from exc

    @command("readAsDataURL", default=ErrorCode.NOT_READABLE,
             storage_default=ErrorCode.NOT_READABLE, path_field="file_path")
    def read_as_data_url(self, options: OperationOptions) -> str:
        """Return the file as a ``data:<mime>;base64,<payload>`` URL."""
        self._require_file(options.file_path)
        mime_type = get_mime_type(options.file_path)
        content = self.store.read_bytes(options.file_path)
        return f"data:{mime_type};base64,{base64.b64encode(content).decode('ascii')}"

    @command("readAsText", default=ErrorCode.NOT_READABLE,
             storage_default=ErrorCode.NOT_READABLE, path_field="file_path")
    def read_as_text(self, options: OperationOptions) -> str:
        """Decode the file; undecodable bytes are replaced, a UTF-8 BOM is dropped."""
        self._require_file(options.file_path)
        codec = self._codec(options)
        encoding = "utf-8-sig" if codec.name == "utf-8" else codec.name
        return self.store.read_bytes(options.file_path).decode(encoding, errors="replace")

    # ========== Writing ==========

    @command("truncate", default=ErrorCode.NOT_READABLE, path_field="file_path")
    def truncate(self, options: OperationOptions) -> int:
        """Shrink the file to ``size`` bytes; returns the resulting length."""
        self._require_file(options.file_path)
        with self.store.open_file(options.file_path, UPDATE_MODE) as stream:
            length = stream.seek(0, 2)
            if 0 <= options.size < length:
                stream.truncate(options.size)
                length = options.size
        return length

    @command("write", default=ErrorCode.NOT_READABLE, path_field="file_path")
    def write(self, options: OperationOptions) -> int:
        """
        Write ``data`` at ``position``.

        The file is created if missing. When ``position`` falls inside the
        file the content from there on is replaced; otherwise data is
        appended. Returns the number of bytes written.
        """
        if not options.data:
            raise MalformedOptionsError("write requires non-empty data")
        if not options.file_path:
            raise NotFoundError("filePath is required")

        payload = options.data.encode(self._codec(options).name)

        if not self.store.file_exists(options.file_path):
            self.store.create_file(options.file_path)

        with self.store.open_file(options.file_path, UPDATE_MODE) as stream:
            length = stream.seek(0, 2)
            if 0 <= options.position < length:
                stream.truncate(options.position)
            stream.seek(0, 2)
            stream.write(payload)

        return len(payload)

    # ========== Metadata ==========

    @command("getMetadata", default=ErrorCode.NOT_READABLE, storage_default=ErrorCode.NOT_READABLE)
    def get_metadata(self, options: OperationOptions) -> ModificationMetadata:
        return self.metadata.get_metadata(options.full_path)

    @command("getFileMetadata", default=ErrorCode.NOT_READABLE, storage_default=ErrorCode.NOT_READABLE)
    def get_file_metadata(self, options: OperationOptions) -> FileMetadata:
        return self.metadata.get_file_metadata(options.full_path)

    @command("getFreeDiskSpace", default=ErrorCode.NOT_READABLE, storage_default=ErrorCode.NOT_READABLE)
    def get_free_disk_space(self, options: OperationOptions) -> int:
        return self.metadata.free_space()

    @command("requestFileSystem")
    def request_file_system(self, options: OperationOptions) -> FileSystemInfo:
        return self.metadata.request_file_system(options.fs_type, options.size)

    # ========== Navigation ==========

    @command("getParent", default=ErrorCode.NOT_FOUND)
    def get_parent(self, options: OperationOptions) -> EntryDescriptor:
        """Parent directory of an entry; the root is its own parent."""
        path = options.full_path
        if not path or not (self.store.file_exists(path) or self.store.directory_exists(path)):
            raise NotFoundError("No file or directory at path", path=path)

        entry = self.resolver.get_entry(parent_of(path))
        if entry is None:
            raise NotFoundError("Parent could not be resolved", path=path)
        return entry

    @command("readEntries")
    def read_entries(self, options: OperationOptions) -> List[EntryDescriptor]:
        """Entries of a directory: files first, then directories."""
        if not options.full_path or not self.store.directory_exists(options.full_path):
            raise NotFoundError("Directory does not exist", path=options.full_path)

        base = ensure_trailing_separator(options.full_path)
        candidates = [base + name for name in self.store.list_files(base)]
        candidates += [base + name + "/" for name in self.store.list_directories(base)]

        entries = []
        for candidate in candidates:
            entry = self.resolver.get_entry(candidate)
            if entry is not None:
                entries.append(entry)
        return entries

    @command("resolveLocalFileSystemURI", path_field="uri")
    def resolve_local_file_system_uri(self, options: OperationOptions) -> EntryDescriptor:
        """Resolve an absolute URI (e.g. ``file:///docs/a.txt``) to an entry."""
        uri = options.uri
        if not self._is_well_formed_uri(uri):
            raise EncodingError("URI is not a well-formed absolute URI", path=uri)

        path = unquote(urlsplit(uri).path)
        entry = self.resolver.get_entry(path)
        if entry is None:
            raise NotFoundError("Nothing found at URI", path=uri)
        return entry

    @staticmethod
    def _is_well_formed_uri(uri: Optional[str]) -> bool:
        if not uri or any(ch.isspace() for ch in uri):
            return False
        parts = urlsplit(uri)
        return bool(_URI_SCHEME.match(parts.scheme)) and bool(parts.netloc or parts.path)

    # ========== Creation ==========

    @command("getFile")
    def get_file(self, options: OperationOptions) -> EntryDescriptor:
        return self._get_file_or_directory(options, directory=False)

    @command("getDirectory")
    def get_directory(self, options: OperationOptions) -> EntryDescriptor:
        return self._get_file_or_directory(options, directory=True)

    def _get_file_or_directory(self, options: OperationOptions, directory: bool) -> EntryDescriptor:
        """
        Look up, and optionally create, ``path`` below ``full_path``.

        Raises:
            NotFoundError: If an argument is empty or the entry is missing without create
            PathExistsError: If create+exclusive hits an existing entry
            TypeMismatchError: If the entry exists with the other kind
            EncodingError: If the path contains illegal characters
        """
        if not options.path or not options.full_path:
            raise NotFoundError("Both fullPath and path are required")

        path = canonicalize(join_path(ensure_trailing_separator(options.full_path), options.path))
        flags = options.creation_flags

        is_file = self.store.file_exists(path)
        is_directory = self.store.directory_exists(path)

        if flags.create:
            if flags.exclusive and (is_file or is_directory):
                raise PathExistsError("Entry already exists", path=path)
            if directory:
                if is_file:
                    raise TypeMismatchError("A file exists at the requested directory path", path=path)
                if not is_directory:
                    self.store.create_directory(path)
            else:
                if is_directory:
                    raise TypeMismatchError("A directory exists at the requested file path", path=path)
                if not is_file:
                    self.store.create_file(path)
        else:
            if not is_file and not is_directory:
                raise NotFoundError("Entry does not exist", path=path)
            if (directory and not is_directory) or (not directory and not is_file):
                raise TypeMismatchError("Entry kind does not match the request", path=path)

        entry = self.resolver.get_entry(path)
        if entry is None:
            raise NotFoundError("Entry could not be resolved", path=path)
        return entry

    # ========== Removal ==========

    @command("remove")
    def remove(self, options: OperationOptions) -> None:
        """Remove a file or an empty directory."""
        path = options.full_path
        if not path:
            raise NotFoundError("fullPath is required")
        if is_root(canonicalize(path)):
            raise NoModificationAllowedError("The filesystem root cannot be removed", path=path)

        if self.store.file_exists(path):
            self.store.delete_file(path)
        elif self.store.directory_exists(path):
            self.store.delete_directory(path)
        else:
            raise NotFoundError("No file or directory at path", path=path)

    @command("removeRecursively")
    def remove_recursively(self, options: OperationOptions) -> None:
        if not options.full_path:
            raise NotFoundError("fullPath is required")
        self.remover.remove_tree(options.full_path)

    # ========== Transfer ==========

    @command("copyTo")
    def copy_to(self, options: OperationOptions) -> EntryDescriptor:
        return self.transfer_engine.transfer(
            options.full_path, options.parent, options.new_name, move=False
        )

    @command("moveTo")
    def move_to(self, options: OperationOptions) -> EntryDescriptor:
        return self.transfer_engine.transfer(
            options.full_path, options.parent, options.new_name, move=True
        )
