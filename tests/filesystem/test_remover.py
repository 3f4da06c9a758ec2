"""
Tests for the isofs.remover module.
"""

import pytest

from isofs.exceptions import ErrorCode, NoModificationAllowedError, NotFoundError
from isofs.remover import RecursiveRemover
from isofs.storage import LocalStorage, MemoryStorage


@pytest.fixture(params=["memory", "local"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryStorage()
    return LocalStorage(tmp_path / "store")


class TestRemoveTree:
    """Tests for RecursiveRemover.remove_tree."""

    @pytest.mark.parametrize("files, depth", [(0, 0), (3, 0), (2, 3), (1, 5)])
    def test_removes_everything(self, store, files, depth):
        """Test that N files across M nested levels leave nothing behind."""
        current = "/victim"
        store.create_directory(current)
        for level in range(depth + 1):
            for index in range(files):
                store.create_file(f"{current}/f{index}.txt")
            if level < depth:
                current = f"{current}/d{level}"
                store.create_directory(current)

        removed = RecursiveRemover(store).remove_tree("/victim/")

        assert removed == files * (depth + 1) + depth + 1
        assert not store.directory_exists("/victim")
        assert store.list_directories("/") == []

    def test_siblings_untouched(self, store):
        store.create_file("/victim/a.txt")
        store.create_file("/keep/b.txt")

        RecursiveRemover(store).remove_tree("/victim")

        assert store.file_exists("/keep/b.txt")

    def test_root_refused(self, store):
        store.create_file("/a.txt")

        with pytest.raises(NoModificationAllowedError):
            RecursiveRemover(store).remove_tree("/")

        assert store.file_exists("/a.txt")

    @pytest.mark.parametrize("path", ["", "/missing"])
    def test_missing_directory(self, store, path):
        with pytest.raises(NotFoundError):
            RecursiveRemover(store).remove_tree(path)

    def test_file_is_not_a_directory(self, store):
        store.create_file("/a.txt")

        with pytest.raises(NotFoundError):
            RecursiveRemover(store).remove_tree("/a.txt")

    def test_store_failure_is_no_modification_allowed(self, mocker):
        store = MemoryStorage()
        store.create_file("/victim/a.txt")
        mocker.patch.object(store, "delete_file", side_effect=PermissionError("locked"))

        with pytest.raises(NoModificationAllowedError) as exc_info:
            RecursiveRemover(store).remove_tree("/victim")

        assert exc_info.value.error_code == ErrorCode.NO_MODIFICATION_ALLOWED
        assert store.file_exists("/victim/a.txt")
