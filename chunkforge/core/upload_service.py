"""UploadService — the single entry point wiring the upload pipeline together.

Everything stateful (storage roots, the completion lock registry) hangs off
an explicitly constructed instance, so independent services can live side
by side in one process.
"""

from __future__ import annotations

import logging
from typing import BinaryIO

from chunkforge.core.assembler import Assembler
from chunkforge.core.chunk_store import ChunkStore
from chunkforge.core.lock_registry import IdentityLockRegistry
from chunkforge.core.metadata_store import MetadataStore
from chunkforge.core.retrieval import ArtifactRetriever, ResolvedArtifact, VerificationResult
from chunkforge.models.metadata import MetadataRecord
from chunkforge.models.storage import StorageConfig

logger = logging.getLogger(__name__)


class UploadService:
    """Chunk upload, completion and retrieval over one storage layout.

    Parameters
    ----------
    storage:
        Chunk and artifact roots plus size limits.
    locks:
        Completion lock registry.  Pass a shared registry only if two
        services point at the same directories.
    """

    def __init__(
        self,
        storage: StorageConfig | None = None,
        *,
        locks: IdentityLockRegistry | None = None,
    ) -> None:
        self.storage = storage or StorageConfig()
        self.locks = locks or IdentityLockRegistry()

        self.chunks = ChunkStore(
            self.storage.chunk_dir,
            max_chunk_bytes=self.storage.max_chunk_bytes,
            buffer_size=self.storage.copy_buffer_bytes,
        )
        self.metadata_store = MetadataStore(self.storage.upload_dir)
        self.assembler = Assembler(
            self.chunks,
            self.metadata_store,
            self.storage.upload_dir,
            locks=self.locks,
            buffer_size=self.storage.copy_buffer_bytes,
        )
        self.retriever = ArtifactRetriever(
            self.storage.upload_dir,
            self.metadata_store,
            buffer_size=self.storage.copy_buffer_bytes,
        )

    def store_chunk(self, file_id: str, chunk_index: str | int, data: BinaryIO) -> int:
        index = self.chunks.put(file_id, chunk_index, data)
        logger.info("Chunk %d uploaded for %s", index, file_id)
        return index

    def complete(self, identity: str) -> str:
        return self.assembler.complete(identity)

    def resolve(self, identity: str) -> ResolvedArtifact:
        return self.retriever.resolve(identity)

    def metadata(self, identity: str) -> MetadataRecord:
        return self.retriever.metadata(identity)

    def verify(self, identity: str) -> VerificationResult:
        return self.retriever.verify(identity)
