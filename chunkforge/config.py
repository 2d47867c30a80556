"""Server configuration — env-driven.

Reads from a .env file and CHUNKFORGE_* environment variables.  Library
objects never read this module implicitly; the CLI turns it into a
``StorageConfig`` and hands that to ``UploadService``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from chunkforge.models.storage import StorageConfig


class ServerConfig(BaseSettings):
    """Server configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export CHUNKFORGE_LOG_LEVEL=DEBUG
        export CHUNKFORGE_UPLOAD_DIR=/data/uploads
        export CHUNKFORGE_PORT=9000

    Or via .env file::

        CHUNKFORGE_DEBUG=true
        CHUNKFORGE_CHUNK_DIR=/data/chunks
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CHUNKFORGE_",
        env_file_encoding="utf-8",
    )

    # Runtime
    log_level: str = "INFO"
    debug: bool = False

    # Storage paths
    chunk_dir: Path = Path("chunks")
    upload_dir: Path = Path("uploads")

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: list[str] = ["*"]

    # Limits
    max_chunk_bytes: int = 32 * 1024 * 1024
    copy_buffer_bytes: int = 1024 * 1024

    def storage(self) -> StorageConfig:
        """Project the storage-related settings into a ``StorageConfig``."""
        return StorageConfig(
            chunk_dir=self.chunk_dir,
            upload_dir=self.upload_dir,
            max_chunk_bytes=self.max_chunk_bytes,
            copy_buffer_bytes=self.copy_buffer_bytes,
        )


# Module-level singleton, import as `from chunkforge.config import config`
config = ServerConfig()
