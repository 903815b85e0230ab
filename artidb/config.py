"""
Configuration management for ArtiDB.

All configuration is done via environment variables - no config files.
This module provides typed configuration classes with validation.

Invariants:
    - All settings have sensible defaults for local use
    - Record contents are never logged

How to change safely:
    - Add new settings with defaults that maintain backward compatibility
    - Keep environment variable names stable; scripts depend on them
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class StoreBackend(Enum):
    """Supported live store backends."""

    MEMORY = "memory"
    SQLITE = "sqlite"


LOG_FORMATS = ("text", "json")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class StorageConfig:
    """Live store configuration.

    Attributes:
        backend: Which store backend to use
        data_dir: Directory holding the SQLite database
        db_filename: SQLite database file name
        busy_timeout_ms: SQLite busy timeout in milliseconds
        wal_mode: SQLite WAL journal mode enabled
    """

    backend: StoreBackend = StoreBackend.SQLITE
    data_dir: str = os.path.join(os.path.expanduser("~"), ".artidb")
    db_filename: str = "artidb.db"
    busy_timeout_ms: int = 5000
    wal_mode: bool = True

    @classmethod
    def from_env(cls) -> StorageConfig:
        """Load configuration from environment variables.

        Raises:
            ValueError: If ARTIDB_STORE_BACKEND is not a known backend.
        """
        backend_str = os.getenv("ARTIDB_STORE_BACKEND", "sqlite").lower()
        try:
            backend = StoreBackend(backend_str)
        except ValueError:
            raise ValueError(
                f"Invalid ARTIDB_STORE_BACKEND '{backend_str}'. Must be one of: memory, sqlite"
            )

        return cls(
            backend=backend,
            data_dir=os.getenv("ARTIDB_DATA_DIR", cls.data_dir),
            db_filename=os.getenv("ARTIDB_DB_FILENAME", "artidb.db"),
            busy_timeout_ms=int(os.getenv("SQLITE_BUSY_TIMEOUT_MS", "5000")),
            wal_mode=_env_bool("SQLITE_WAL_MODE", "true"),
        )


@dataclass(frozen=True)
class TransferConfig:
    """Transport configuration.

    Attributes:
        export_filename: Default file name for downloads
        download_dir: Directory where downloads are written
        clipboard_command: Explicit clipboard helper command (argv), or None
            to pick the platform default
        max_upload_bytes: Largest uploaded file accepted
    """

    export_filename: str = "data.json"
    download_dir: str = "."
    clipboard_command: tuple[str, ...] | None = None
    max_upload_bytes: int = 64 * 1024 * 1024  # 64MB

    @classmethod
    def from_env(cls) -> TransferConfig:
        """Load configuration from environment variables."""
        command = os.getenv("ARTIDB_CLIPBOARD_COMMAND")
        return cls(
            export_filename=os.getenv("ARTIDB_EXPORT_FILENAME", "data.json"),
            download_dir=os.getenv("ARTIDB_DOWNLOAD_DIR", "."),
            clipboard_command=tuple(command.split()) if command else None,
            max_upload_bytes=int(
                os.getenv("ARTIDB_MAX_UPLOAD_BYTES", str(64 * 1024 * 1024))
            ),
        )


@dataclass(frozen=True)
class ObservabilityConfig:
    """Logging configuration.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: Log format (json, text)
    """

    log_level: str = "INFO"
    log_format: str = "text"

    @classmethod
    def from_env(cls) -> ObservabilityConfig:
        """Load configuration from environment variables."""
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "text").lower(),
        )


@dataclass
class AppConfig:
    """Complete application configuration.

    Attributes:
        storage: Live store configuration
        transfer: Transport configuration
        observability: Logging configuration
    """

    storage: StorageConfig = field(default_factory=StorageConfig)
    transfer: TransferConfig = field(default_factory=TransferConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)

    @classmethod
    def from_env(cls) -> AppConfig:
        """Load complete configuration from environment variables.

        Raises:
            ValueError: If configuration is missing or invalid.
        """
        config = cls(
            storage=StorageConfig.from_env(),
            transfer=TransferConfig.from_env(),
            observability=ObservabilityConfig.from_env(),
        )

        config.validate()
        return config

    def validate(self) -> None:
        """Validate configuration consistency.

        Raises:
            ValueError: If configuration is invalid.
        """
        if self.observability.log_format not in LOG_FORMATS:
            raise ValueError(
                f"Invalid LOG_FORMAT '{self.observability.log_format}'. Must be one of: text, json"
            )
        if self.transfer.max_upload_bytes <= 0:
            raise ValueError("ARTIDB_MAX_UPLOAD_BYTES must be positive")
        if self.storage.busy_timeout_ms < 0:
            raise ValueError("SQLITE_BUSY_TIMEOUT_MS must not be negative")
        if not self.transfer.export_filename:
            raise ValueError("ARTIDB_EXPORT_FILENAME must not be empty")

        if self.storage.backend == StoreBackend.SQLITE and not os.path.exists(
            self.storage.data_dir
        ):
            logger.warning(
                f"Data directory does not exist: {self.storage.data_dir}. "
                "It will be created on first write."
            )

    def log_config(self) -> None:
        """Log configuration."""
        logger.info(
            "Configuration loaded",
            extra={
                "store_backend": self.storage.backend.value,
                "data_dir": self.storage.data_dir
                if self.storage.backend == StoreBackend.SQLITE
                else None,
                "download_dir": self.transfer.download_dir,
                "export_filename": self.transfer.export_filename,
                "log_level": self.observability.log_level,
            },
        )
