"""
Tests for the isofs.config module.
"""

from pathlib import Path

import pytest

from isofs.config import FileSystemConfig


class TestFileSystemConfig:
    """Tests for FileSystemConfig defaults and validation."""

    def test_defaults(self):
        config = FileSystemConfig()

        assert config.temp_root == "/tmp/"
        assert config.quota_bytes is None
        assert config.default_encoding == "UTF-8"
        assert not config.serialize_requests
        assert config.enable_audit_logging

    def test_string_paths_converted(self, tmp_path):
        config = FileSystemConfig(root_directory=str(tmp_path), log_file_path=str(tmp_path / "a.log"))

        assert isinstance(config.root_directory, Path)
        assert isinstance(config.log_file_path, Path)

    def test_resolved_root_default(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        assert FileSystemConfig().resolved_root() == (tmp_path / "isofs-data").resolve()

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"temp_directory_name": ""},
            {"temp_directory_name": "a/b"},
            {"temp_directory_name": "a\\b"},
            {"quota_bytes": -1},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            FileSystemConfig(**kwargs)


class TestFromEnv:
    """Tests for FileSystemConfig.from_env."""

    def test_reads_variables(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ISOFS_ROOT", str(tmp_path))
        monkeypatch.setenv("ISOFS_TMP_DIR", "scratch")
        monkeypatch.setenv("ISOFS_QUOTA_BYTES", "4096")
        monkeypatch.setenv("ISOFS_SERIALIZE", "true")
        monkeypatch.setenv("ISOFS_AUDIT_LOG", str(tmp_path / "audit.log"))

        config = FileSystemConfig.from_env()

        assert config.root_directory == tmp_path
        assert config.temp_root == "/scratch/"
        assert config.quota_bytes == 4096
        assert config.serialize_requests
        assert config.log_file_path == tmp_path / "audit.log"

    def test_unset_variables_keep_defaults(self, monkeypatch):
        for name in ("ROOT", "TMP_DIR", "QUOTA_BYTES", "SERIALIZE", "AUDIT_LOG"):
            monkeypatch.delenv(f"ISOFS_{name}", raising=False)

        assert FileSystemConfig.from_env() == FileSystemConfig()

    def test_custom_prefix(self, monkeypatch):
        monkeypatch.setenv("APP_QUOTA_BYTES", "10")

        assert FileSystemConfig.from_env(prefix="APP_").quota_bytes == 10

    def test_bad_quota(self, monkeypatch):
        monkeypatch.setenv("ISOFS_QUOTA_BYTES", "lots")

        with pytest.raises(ValueError, match="ISOFS_QUOTA_BYTES"):
            FileSystemConfig.from_env()
