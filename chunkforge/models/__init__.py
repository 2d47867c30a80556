"""Chunkforge data models — all Pydantic v2, all frozen (immutable)."""

from chunkforge.models.metadata import MetadataRecord
from chunkforge.models.storage import StorageConfig

__all__ = [
    "MetadataRecord",
    "StorageConfig",
]
