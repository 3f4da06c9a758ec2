"""
Configuration for the isolated filesystem.

This module defines the configuration class controlling where the store
lives, how big it may grow and how requests are logged.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

_TRUE_VALUES = ("1", "true", "True", "yes", "YES")


@dataclass
class FileSystemConfig:
    """
    Configuration for the isolated filesystem.

    Controls the backing directory, quota and temporary root, plus the
    logging and locking behaviour of the command layer.
    """

    # === Store Settings ===

    root_directory: Optional[Path] = None
    """Host directory backing the local store. Defaults to ./isofs-data when unset."""

    temp_directory_name: str = "tmp"
    """Directory created on demand for the TEMPORARY filesystem."""

    quota_bytes: Optional[int] = None
    """
    Upper bound on bytes the store may hold. When set, free space is the
    smaller of the host's free space and the unused part of the quota.
    """

    allow_symlink_escape: bool = False
    """Allow symlinks inside the root that point outside of it."""

    # === Request Settings ===

    default_encoding: str = "UTF-8"
    """Encoding used by readAsText and write when the request names none."""

    timestamp_format: str = "%Y-%m-%d %H:%M:%S"
    """strftime format for modification times."""

    serialize_requests: bool = False
    """Run every command under one re-entrant lock."""

    # === Logging Settings ===

    enable_audit_logging: bool = True
    """Record every command outcome on the audit logger."""

    log_file_path: Optional[Path] = None
    """Optional file receiving audit records."""

    def __post_init__(self):
        """Validate configuration values."""
        if isinstance(self.root_directory, str):
            self.root_directory = Path(self.root_directory)
        if isinstance(self.log_file_path, str):
            self.log_file_path = Path(self.log_file_path)

        if not self.temp_directory_name:
            raise ValueError("temp_directory_name must not be empty")
        if any(sep in self.temp_directory_name for sep in ("/", "\\")):
            raise ValueError(
                f"temp_directory_name must be a single path segment, got {self.temp_directory_name!r}"
            )
        if self.quota_bytes is not None and self.quota_bytes < 0:
            raise ValueError(f"quota_bytes must be non-negative, got {self.quota_bytes}")

    @property
    def temp_root(self) -> str:
        """Virtual path of the TEMPORARY root, e.g. '/tmp/'."""
        return f"/{self.temp_directory_name}/"

    def resolved_root(self) -> Path:
        return (self.root_directory or Path.cwd() / "isofs-data").expanduser().resolve()

    @classmethod
    def from_env(cls, prefix: str = "ISOFS_") -> "FileSystemConfig":
        """
        Build a configuration from environment variables.

        Recognised variables (with the default prefix):
            ISOFS_ROOT, ISOFS_TMP_DIR, ISOFS_QUOTA_BYTES, ISOFS_SERIALIZE,
            ISOFS_AUDIT_LOG
        """
        kwargs = {}

        root = os.getenv(f"{prefix}ROOT")
        if root:
            kwargs["root_directory"] = Path(root)

        tmp_dir = os.getenv(f"{prefix}TMP_DIR")
        if tmp_dir:
            kwargs["temp_directory_name"] = tmp_dir

        quota = os.getenv(f"{prefix}QUOTA_BYTES")
        if quota:
            try:
                kwargs["quota_bytes"] = int(quota)
            except ValueError as exc:
                raise ValueError(f"{prefix}QUOTA_BYTES must be an integer, got {quota!r}") from exc

        serialize = os.getenv(f"{prefix}SERIALIZE")
        if serialize is not None:
            kwargs["serialize_requests"] = serialize.strip() in _TRUE_VALUES

        audit_log = os.getenv(f"{prefix}AUDIT_LOG")
        if audit_log:
            kwargs["log_file_path"] = Path(audit_log)

        return cls(**kwargs)
