"""
Tests for the isofs.options and isofs.results modules.

This module tests:
- Option parsing from JSON, mappings and None
- Wire-name aliases and defaults
- Query/fragment stripping on path fields
- Command result construction and wire form
"""

import pytest
from pydantic import ValidationError

from isofs.data_models import CreationFlags, EntryDescriptor
from isofs.exceptions import ErrorCode, MalformedOptionsError
from isofs.options import OperationOptions
from isofs.results import CommandResult, CommandStatus


# =============================================================================
# OperationOptions
# =============================================================================

class TestOptionsParsing:
    """Tests for OperationOptions.parse."""

    def test_parse_json(self):
        options = OperationOptions.parse('{"filePath": "/a.txt", "data": "hi", "position": 3}')

        assert options.file_path == "/a.txt"
        assert options.data == "hi"
        assert options.position == 3

    def test_parse_bytes(self):
        assert OperationOptions.parse(b'{"fullPath": "/d"}').full_path == "/d"

    def test_parse_mapping(self):
        options = OperationOptions.parse({"fullPath": "/d", "newName": "n", "parent": "/p"})

        assert options.full_path == "/d"
        assert options.new_name == "n"
        assert options.parent == "/p"

    @pytest.mark.parametrize("raw", [None, "", b""])
    def test_empty_payload_gives_defaults(self, raw):
        options = OperationOptions.parse(raw)

        assert options.file_path == ""
        assert options.encoding == "UTF-8"
        assert options.size == 0
        assert options.position == 0
        assert options.fs_type == -1
        assert options.creation_flags == CreationFlags()

    def test_instance_passes_through(self):
        options = OperationOptions(file_path="/a")

        assert OperationOptions.parse(options) is options

    @pytest.mark.parametrize(
        "raw",
        [
            "{not json",
            "[1, 2]",
            '{"size": "big"}',
            '{"fullPath": 5}',
            '{"options": "create"}',
        ],
    )
    def test_malformed_payload(self, raw):
        with pytest.raises(MalformedOptionsError):
            OperationOptions.parse(raw)

    def test_unknown_fields_ignored(self):
        assert OperationOptions.parse({"fullPath": "/d", "extra": 1}).full_path == "/d"


class TestOptionsFields:
    """Tests for aliases, stripping and immutability."""

    def test_file_name_alias(self):
        assert OperationOptions.parse({"fileName": "/a.txt"}).file_path == "/a.txt"

    def test_type_alias(self):
        assert OperationOptions.parse({"type": 1}).fs_type == 1

    def test_dir_name_alias(self):
        assert OperationOptions.parse({"dirName": "/d"}).dir_name == "/d"

    def test_creation_flags(self):
        options = OperationOptions.parse({"options": {"create": True, "exclusive": True}})

        assert options.creation_flags == CreationFlags(create=True, exclusive=True)

    @pytest.mark.parametrize("field", ["filePath", "fullPath", "dirName", "path", "uri", "parent"])
    def test_path_fields_are_stripped(self, field):
        options = OperationOptions.parse({field: "/a/b.txt?v=2#top"})

        assert "/a/b.txt" in options.model_dump().values()

    def test_data_is_not_stripped(self):
        assert OperationOptions.parse({"data": "a?b#c"}).data == "a?b#c"

    def test_null_encoding_uses_default(self):
        assert OperationOptions.parse({"encoding": None}).encoding == "UTF-8"

    def test_frozen(self):
        options = OperationOptions.parse({"fullPath": "/d"})

        with pytest.raises(ValidationError):
            options.full_path = "/other"


# =============================================================================
# CommandResult
# =============================================================================

class TestCommandResult:
    """Tests for CommandResult."""

    def test_ok(self):
        result = CommandResult.ok(5)

        assert result.is_ok
        assert result.error_code is None
        assert result.to_dict() == {"status": "ok", "message": 5}

    def test_error(self):
        result = CommandResult.error(ErrorCode.PATH_EXISTS)

        assert not result.is_ok
        assert result.error_code == ErrorCode.PATH_EXISTS
        assert result.to_dict() == {"status": "error", "message": {"code": 12}}

    def test_error_coerces_int(self):
        assert CommandResult(status=CommandStatus.ERROR, message=1).error_code is ErrorCode.NOT_FOUND

    def test_error_requires_code(self):
        with pytest.raises(ValidationError):
            CommandResult(status=CommandStatus.ERROR, message="oops")

    def test_payload_objects_rendered(self):
        entry = EntryDescriptor(is_file=True, is_directory=False, name="a", full_path="/a")

        assert CommandResult.ok([entry]).to_dict()["message"] == [entry.to_dict()]

    def test_json_exception_and_invalid_action(self):
        assert CommandResult.json_exception("bad").to_dict()["status"] == "json_exception"
        assert CommandResult.invalid_action("nope").to_dict() == {
            "status": "invalid_action",
            "message": "nope",
        }
