"""Storage layout configuration."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class StorageConfig(BaseModel):
    """Where chunks and artifacts live, and how they are copied.

    One instance per ``UploadService``; two services built from two
    configs share nothing.
    """

    model_config = ConfigDict(frozen=True)

    chunk_dir: Path = Path("chunks")
    upload_dir: Path = Path("uploads")
    max_chunk_bytes: int = Field(default=32 * 1024 * 1024, gt=0)
    copy_buffer_bytes: int = Field(default=1024 * 1024, gt=0)
