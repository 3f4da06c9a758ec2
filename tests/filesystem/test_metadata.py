"""
Tests for the isofs.metadata module.

This module tests:
- Modification time and file metadata
- Quota checks
- requestFileSystem root lookup
"""

from datetime import datetime

import pytest

from isofs.config import FileSystemConfig
from isofs.data_models import FileSystemType
from isofs.exceptions import NoModificationAllowedError, NotFoundError, QuotaExceededError
from isofs.metadata import MetadataEngine
from isofs.storage import UPDATE_MODE, MemoryStorage


@pytest.fixture
def store():
    store = MemoryStorage(capacity=1000)
    store.create_file("/docs/page.html")
    with store.open_file("/docs/page.html", UPDATE_MODE) as stream:
        stream.write(b"<p>hi</p>")
    return store


@pytest.fixture
def engine(store):
    return MetadataEngine(store)


# =============================================================================
# Metadata
# =============================================================================

class TestMetadata:
    """Tests for get_metadata and get_file_metadata."""

    def test_modification_time_format(self, engine):
        metadata = engine.get_metadata("/docs/page.html")

        datetime.strptime(metadata.modification_time, "%Y-%m-%d %H:%M:%S")
        assert set(metadata.to_dict()) == {"modificationTime"}

    def test_directory_has_modification_time(self, engine):
        assert engine.get_metadata("/docs/").modification_time

    @pytest.mark.parametrize("path", ["", None, "/missing"])
    def test_missing_entry(self, engine, path):
        with pytest.raises(NotFoundError):
            engine.get_metadata(path)

    def test_file_metadata(self, engine):
        metadata = engine.get_file_metadata("docs/page.html")

        assert metadata.file_name == "page.html"
        assert metadata.full_path == "/docs/page.html"
        assert metadata.type == "text/html"
        assert metadata.size == 9

    def test_file_metadata_wire_form(self, engine):
        data = engine.get_file_metadata("/docs/page.html").to_dict()

        assert set(data) == {"fileName", "fullPath", "type", "lastModifiedDate", "size"}

    def test_file_metadata_on_directory(self, engine):
        with pytest.raises(NotFoundError):
            engine.get_file_metadata("/docs")

    def test_custom_timestamp_format(self, store):
        engine = MetadataEngine(store, FileSystemConfig(timestamp_format="%Y"))

        assert engine.get_metadata("/docs").modification_time == str(datetime.now().year)

    def test_custom_mime_lookup(self, store):
        engine = MetadataEngine(store, mime_lookup=lambda path: "x/custom")

        assert engine.get_file_metadata("/docs/page.html").type == "x/custom"


# =============================================================================
# Quota
# =============================================================================

class TestQuota:
    """Tests for free_space and check_quota."""

    def test_free_space(self, engine):
        assert engine.free_space() == 991

    def test_zero_means_no_check(self, engine, mocker):
        spy = mocker.spy(engine.store, "available_free_space")

        engine.check_quota(0)

        spy.assert_not_called()

    def test_within_quota(self, engine):
        engine.check_quota(991)

    def test_over_quota(self, engine):
        with pytest.raises(QuotaExceededError) as exc_info:
            engine.check_quota(992)

        assert exc_info.value.context == {"requested": 992, "available": 991}


# =============================================================================
# requestFileSystem
# =============================================================================

class TestRequestFileSystem:
    """Tests for request_file_system."""

    def test_temporary_root_is_created(self, engine, store):
        info = engine.request_file_system(FileSystemType.TEMPORARY)

        assert info.to_dict() == {
            "name": "temporary",
            "root": {"isFile": False, "isDirectory": True, "name": "tmp", "fullPath": "/tmp/"},
        }
        assert store.directory_exists("/tmp")

    def test_temporary_root_is_idempotent(self, engine, store):
        first = engine.request_file_system(0)
        store.create_file("/tmp/keep.txt")
        second = engine.request_file_system(0)

        assert first == second
        assert store.file_exists("/tmp/keep.txt")

    def test_custom_temp_directory(self, store):
        engine = MetadataEngine(store, FileSystemConfig(temp_directory_name="scratch"))

        info = engine.request_file_system(0)

        assert info.root.full_path == "/scratch/"

    def test_persistent_root(self, engine):
        info = engine.request_file_system(1)

        assert info.name == "persistent"
        assert info.root.full_path == "/"
        assert info.root.name == "/"

    @pytest.mark.parametrize("fs_type, name", [(2, "resource"), (3, "application")])
    def test_rootless_types(self, engine, fs_type, name):
        info = engine.request_file_system(fs_type)

        assert info.root is None
        assert info.to_dict() == {"name": name}

    @pytest.mark.parametrize("fs_type", [-1, 4, 99])
    def test_unknown_type(self, engine, fs_type):
        with pytest.raises(NoModificationAllowedError):
            engine.request_file_system(fs_type)

    def test_quota_checked_first(self, engine, store):
        with pytest.raises(QuotaExceededError):
            engine.request_file_system(0, size=10_000)

        assert not store.directory_exists("/tmp")
