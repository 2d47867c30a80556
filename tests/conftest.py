"""Shared test fixtures for Chunkforge."""

from __future__ import annotations

import io
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from chunkforge.core.chunk_store import ChunkStore
from chunkforge.core.identity import encode
from chunkforge.core.metadata_store import MetadataStore
from chunkforge.core.upload_service import UploadService
from chunkforge.models.storage import StorageConfig


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for chunks and artifacts."""
    return tmp_path


@pytest.fixture
def storage(tmp_dir: Path) -> StorageConfig:
    """Storage layout rooted in the temp directory, with a small copy buffer."""
    return StorageConfig(
        chunk_dir=tmp_dir / "chunks",
        upload_dir=tmp_dir / "uploads",
        max_chunk_bytes=1024 * 1024,
        copy_buffer_bytes=7,
    )


@pytest.fixture
def service(storage: StorageConfig) -> UploadService:
    """Provide a fresh UploadService over the temp storage layout."""
    return UploadService(storage)


@pytest.fixture
def chunk_store(storage: StorageConfig) -> ChunkStore:
    return ChunkStore(storage.chunk_dir, max_chunk_bytes=storage.max_chunk_bytes)


@pytest.fixture
def metadata_store(storage: StorageConfig) -> MetadataStore:
    return MetadataStore(storage.upload_dir)


@pytest.fixture
def greeting_id() -> str:
    """Identity of the canonical two-chunk example upload."""
    return encode("greeting.txt")


@pytest.fixture
def upload_chunks(service: UploadService) -> Callable[..., str]:
    """Factory fixture: store *parts* for *name* and return its identity.

    ``order`` lists the positions in the order they are transmitted.
    """

    def _upload(
        name: str,
        parts: Sequence[bytes],
        order: Sequence[int] | None = None,
    ) -> str:
        identity = encode(name)
        for position in order if order is not None else range(len(parts)):
            service.store_chunk(identity, str(position), io.BytesIO(parts[position]))
        return identity

    return _upload
