"""
Audit logging of filesystem commands.

Each command outcome is written to the ``isofs.audit`` logger, and to a file
when the configuration names one.
"""

import logging
from typing import Any, Dict, Optional

from .config import FileSystemConfig

AUDIT_LOGGER_NAME = "isofs.audit"


class AuditLogger:
    """Logs filesystem commands for audit purposes."""

    def __init__(self, config: FileSystemConfig):
        """
        Initialize audit logger.

        Args:
            config: Filesystem configuration
        """
        self.config = config
        self.log_file = config.log_file_path
        self._file_handler: Optional[logging.FileHandler] = None

        if self.log_file:
            self._setup_file_logging()

    def _setup_file_logging(self):
        """Set up file-based audit logging."""
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(self.log_file)
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(
            logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        )

        audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)
        audit_logger.addHandler(file_handler)
        audit_logger.setLevel(logging.INFO)
        self._file_handler = file_handler

    def log_operation(
        self,
        operation: str,
        path: Optional[str],
        success: bool,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Log a filesystem command.

        Args:
            operation: Command name
            path: Primary path of the request
            success: Whether the command succeeded
            details: Optional additional details
        """
        if not self.config.enable_audit_logging:
            return

        audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)

        status = "SUCCESS" if success else "FAILURE"
        message = f"{status} - {operation} - {path or '-'}"

        if details:
            detail_str = ", ".join(f"{k}={v}" for k, v in details.items())
            message += f" - {detail_str}"

        audit_logger.info(message)

    def close(self):
        """Detach and close the file handler, if any."""
        if self._file_handler is None:
            return
        logging.getLogger(AUDIT_LOGGER_NAME).removeHandler(self._file_handler)
        self._file_handler.close()
        self._file_handler = None
