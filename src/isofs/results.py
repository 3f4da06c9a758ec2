"""Structured command results: a success payload or an error code."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, model_validator

from .exceptions import ErrorCode


class CommandStatus(str, Enum):
    """Outcome of a command."""
    OK = "ok"
    ERROR = "error"
    JSON_EXCEPTION = "json_exception"  # Options payload could not be used
    INVALID_ACTION = "invalid_action"  # Unknown command name


def _to_wire(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, ErrorCode):
        return int(value)
    if isinstance(value, (list, tuple)):
        return [_to_wire(item) for item in value]
    if isinstance(value, dict):
        return {key: _to_wire(item) for key, item in value.items()}
    return value


class CommandResult(BaseModel):
    """
    Result of one filesystem command.

    ``message`` holds the success payload for OK results and the ``ErrorCode``
    for ERROR results.

    Examples:
        CommandResult.ok(5)
        CommandResult.error(ErrorCode.NOT_FOUND)
    """

    status: CommandStatus
    message: Any = None

    @model_validator(mode="after")
    def validate_error_code(self):
        """ERROR results must carry an ErrorCode."""
        if self.status == CommandStatus.ERROR:
            if isinstance(self.message, int) and not isinstance(self.message, ErrorCode):
                self.message = ErrorCode(self.message)
            if not isinstance(self.message, ErrorCode):
                raise ValueError("ERROR results must carry an ErrorCode")
        return self

    @classmethod
    def ok(cls, payload: Any = None) -> "CommandResult":
        return cls(status=CommandStatus.OK, message=payload)

    @classmethod
    def error(cls, code: ErrorCode) -> "CommandResult":
        return cls(status=CommandStatus.ERROR, message=code)

    @classmethod
    def json_exception(cls, detail: Optional[str] = None) -> "CommandResult":
        return cls(status=CommandStatus.JSON_EXCEPTION, message=detail)

    @classmethod
    def invalid_action(cls, action: str) -> "CommandResult":
        return cls(status=CommandStatus.INVALID_ACTION, message=action)

    @property
    def is_ok(self) -> bool:
        return self.status == CommandStatus.OK

    @property
    def error_code(self) -> Optional[ErrorCode]:
        return self.message if self.status == CommandStatus.ERROR else None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the wire format.

        Returns:
            For OK: {"status": "ok", "message": <payload>}
            For ERROR: {"status": "error", "message": {"code": <int>}}
        """
        if self.status == CommandStatus.ERROR:
            return {"status": self.status.value, "message": {"code": int(self.message)}}
        return {"status": self.status.value, "message": _to_wire(self.message)}
