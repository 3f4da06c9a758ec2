"""
Per-request option payloads.

Each command receives a fresh, immutable ``OperationOptions`` parsed from the
request. Query and fragment suffixes are stripped from every path-like field
as the payload is read.
"""

from typing import Any, Mapping, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from .data_models import CreationFlags
from .exceptions import MalformedOptionsError
from .paths import strip_query_or_fragment

RawOptions = Union[str, bytes, Mapping[str, Any], None]


class OperationOptions(BaseModel):
    """
    Options of a single filesystem command.

    Field names follow Python conventions; the wire names (``fileName``,
    ``fullPath``, ``newName``...) are accepted as aliases.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    file_path: str = Field(
        "",
        validation_alias=AliasChoices("filePath", "fileName", "file_path"),
        description="File to read, write or truncate",
    )
    full_path: Optional[str] = Field(
        None, validation_alias=AliasChoices("fullPath", "full_path"), description="Entry path"
    )
    dir_name: Optional[str] = Field(
        None, validation_alias=AliasChoices("dirName", "dir_name"), description="Directory to test"
    )
    path: Optional[str] = Field(None, description="Path to create or look up below full_path")
    encoding: str = Field("UTF-8", description="Text encoding for reads and writes")
    uri: Optional[str] = Field(None, description="URI for resolveLocalFileSystemURI")
    size: int = Field(0, description="Truncate size or requested quota")
    data: Optional[str] = Field(None, description="Text to write")
    position: int = Field(0, description="Write position")
    fs_type: int = Field(
        -1, validation_alias=AliasChoices("type", "fs_type"), description="Requested filesystem type"
    )
    new_name: Optional[str] = Field(
        None, validation_alias=AliasChoices("newName", "new_name"), description="Name at the destination"
    )
    parent: Optional[str] = Field(None, description="Destination directory of copy/move")
    creating_options: Optional[CreationFlags] = Field(
        None,
        validation_alias=AliasChoices("options", "creating_options"),
        description="create/exclusive flags of getFile/getDirectory",
    )

    @field_validator("file_path", "full_path", "dir_name", "path", "uri", "parent", mode="before")
    @classmethod
    def _strip_suffix(cls, value: Any) -> Any:
        """Drop '?query' and '#fragment' suffixes."""
        if isinstance(value, str):
            return strip_query_or_fragment(value)
        if value is None:
            return value
        raise ValueError(f"Expected a string path, got {type(value).__name__}")

    @field_validator("file_path", "encoding", mode="before")
    @classmethod
    def _none_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return "" if info.field_name == "file_path" else "UTF-8"
        return value

    @property
    def creation_flags(self) -> CreationFlags:
        return self.creating_options or CreationFlags()

    @classmethod
    def parse(cls, raw: Union[RawOptions, "OperationOptions"]) -> "OperationOptions":
        """
        Build options from a JSON document or a mapping.

        Raises:
            MalformedOptionsError: If the payload cannot be parsed
        """
        if isinstance(raw, cls):
            return raw
        try:
            if raw is None or raw in ("", b""):
                return cls()
            if isinstance(raw, (str, bytes)):
                return cls.model_validate_json(raw)
            return cls.model_validate(dict(raw))
        except (ValidationError, TypeError, ValueError) as exc:
            raise MalformedOptionsError(f"Invalid options payload: {exc}") from exc
