"""
Unit tests for configuration loading.
"""

import pytest

from artidb.config import (
    AppConfig,
    ObservabilityConfig,
    StorageConfig,
    StoreBackend,
    TransferConfig,
)

ENV_VARS = [
    "ARTIDB_STORE_BACKEND",
    "ARTIDB_DATA_DIR",
    "ARTIDB_DB_FILENAME",
    "SQLITE_BUSY_TIMEOUT_MS",
    "SQLITE_WAL_MODE",
    "ARTIDB_EXPORT_FILENAME",
    "ARTIDB_DOWNLOAD_DIR",
    "ARTIDB_CLIPBOARD_COMMAND",
    "ARTIDB_MAX_UPLOAD_BYTES",
    "LOG_LEVEL",
    "LOG_FORMAT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestConfig:
    """Tests for environment configuration."""

    def test_defaults(self):
        config = AppConfig.from_env()

        assert config.storage.backend == StoreBackend.SQLITE
        assert config.storage.data_dir.endswith(".artidb")
        assert config.transfer.export_filename == "data.json"
        assert config.transfer.clipboard_command is None
        assert config.observability.log_format == "text"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("ARTIDB_STORE_BACKEND", "MEMORY")
        monkeypatch.setenv("ARTIDB_DATA_DIR", "/tmp/artidb-test")
        monkeypatch.setenv("SQLITE_WAL_MODE", "false")
        monkeypatch.setenv("ARTIDB_EXPORT_FILENAME", "backup.json")
        monkeypatch.setenv("ARTIDB_CLIPBOARD_COMMAND", "xsel --clipboard --input")
        monkeypatch.setenv("ARTIDB_MAX_UPLOAD_BYTES", "1024")
        monkeypatch.setenv("LOG_FORMAT", "JSON")

        config = AppConfig.from_env()

        assert config.storage.backend == StoreBackend.MEMORY
        assert config.storage.data_dir == "/tmp/artidb-test"
        assert config.storage.wal_mode is False
        assert config.transfer.export_filename == "backup.json"
        assert config.transfer.clipboard_command == ("xsel", "--clipboard", "--input")
        assert config.transfer.max_upload_bytes == 1024
        assert config.observability.log_format == "json"

    def test_invalid_backend(self, monkeypatch):
        monkeypatch.setenv("ARTIDB_STORE_BACKEND", "postgres")

        with pytest.raises(ValueError, match="ARTIDB_STORE_BACKEND"):
            StorageConfig.from_env()

    def test_invalid_log_format(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "xml")

        with pytest.raises(ValueError, match="LOG_FORMAT"):
            AppConfig.from_env()

    def test_invalid_upload_limit(self):
        config = AppConfig(transfer=TransferConfig(max_upload_bytes=0))

        with pytest.raises(ValueError):
            config.validate()

    def test_sections_are_frozen(self):
        with pytest.raises(AttributeError):
            ObservabilityConfig().log_level = "DEBUG"
