"""Metadata sidecar model for assembled artifacts."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class MetadataRecord(BaseModel):
    """Descriptor stored next to every assembled artifact.

    Serialized as JSON to ``{upload_dir}/{identity}.json``.  The first three
    fields are the wire contract read by browser clients (``original_name``
    and ``file_hash`` in particular).  Unknown fields written by newer
    versions are ignored on read.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    original_name: str = Field(min_length=1)
    content_type: str = Field(min_length=1)
    file_hash: str = Field(pattern=r"^[0-9a-f]{64}$")  # SHA-256 hex

    size_bytes: int | None = None
    chunk_count: int | None = None
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
