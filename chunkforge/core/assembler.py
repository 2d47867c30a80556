"""Assembly pipeline — turns a directory of chunks into an artifact.

Single pass: every chunk is streamed into a hidden temp file in the artifact
area while the same bytes feed a SHA-256 accumulator.  The temp file is
renamed onto the artifact name only after the whole write succeeded, and the
metadata sidecar is written strictly after that.  An artifact without a
sidecar is never served, so a failure at any step leaves nothing that reads
as a valid upload.
"""

from __future__ import annotations

import contextlib
import hashlib
import logging
import os
import uuid
from pathlib import Path

from chunkforge.core import content_type, identity as identity_codec
from chunkforge.core.chunk_store import ChunkStore
from chunkforge.core.errors import NotFoundError, StorageError
from chunkforge.core.hasher import DEFAULT_BUFFER_SIZE, copy_and_hash
from chunkforge.core.lock_registry import IdentityLockRegistry
from chunkforge.core.metadata_store import MetadataStore
from chunkforge.models.metadata import MetadataRecord

logger = logging.getLogger(__name__)


def _discard_temp(tmp: Path) -> None:
    with contextlib.suppress(OSError):
        tmp.unlink()


class Assembler:
    """Completes uploads: concatenate, hash, persist, describe, clean up.

    Parameters
    ----------
    chunk_store:
        Source of the chunk fragments.
    metadata_store:
        Destination for the sidecar records.
    upload_dir:
        The artifact area.  Artifacts are stored as ``{upload_dir}/{identity}``.
    locks:
        Registry serializing completions of the same identity.
    buffer_size:
        Read size while streaming chunks into the artifact.
    """

    def __init__(
        self,
        chunk_store: ChunkStore,
        metadata_store: MetadataStore,
        upload_dir: Path,
        *,
        locks: IdentityLockRegistry,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        self._chunks = chunk_store
        self._metadata = metadata_store
        self._upload_dir = Path(upload_dir)
        self._locks = locks
        self._buffer_size = buffer_size

    def artifact_path(self, identity: str) -> Path:
        return self._upload_dir / identity

    def complete(self, identity: str) -> str:
        """Assemble every chunk of *identity* and return the identity.

        Raises
        ------
        InvalidIdentityError
            If *identity* does not decode to a filename.
        InvalidChunkIndexError
            If the chunk directory holds an entry that is not a position.
        NotFoundError
            If there are no chunks and no previously completed artifact.
        StorageError
            If any read, write or rename fails.
        """
        original_name = identity_codec.decode(identity)
        with self._locks.hold(identity):
            return self._complete_locked(identity, original_name)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _complete_locked(self, identity: str, original_name: str) -> str:
        try:
            self._upload_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError("Failed to create uploads directory") from exc

        if not self._chunks.exists(identity):
            if self._metadata.exists(identity) and self.artifact_path(identity).is_file():
                logger.warning(
                    "Completion of %s requested again with no chunks; "
                    "keeping the stored artifact.",
                    identity,
                )
                return identity
            raise NotFoundError(f"No chunks found for {identity}")

        chunks = self._chunks.list_chunks(identity)
        if not chunks:
            raise NotFoundError(f"No chunks found for {identity}")

        positions = [position for position, _ in chunks]
        if positions != list(range(len(positions))):
            logger.warning(
                "Chunk positions for %s are not contiguous from 0: %s",
                identity,
                positions,
            )

        logger.info("Assembling %s from %d chunks", identity, len(chunks))
        digest, size = self._write_artifact(identity, [path for _, path in chunks])

        record = MetadataRecord(
            original_name=original_name,
            content_type=content_type.infer(original_name),
            file_hash=digest,
            size_bytes=size,
            chunk_count=len(chunks),
        )
        self._metadata.put(identity, record)

        try:
            self._chunks.remove(identity)
        except StorageError as exc:
            logger.warning("Failed to clean up chunks for %s: %s", identity, exc.__cause__ or exc)

        logger.info(
            "Completed %s (%s, %d bytes, sha256=%s)",
            identity,
            record.content_type,
            size,
            digest,
        )
        return identity

    def _write_artifact(self, identity: str, chunk_paths: list[Path]) -> tuple[str, int]:
        """Stream *chunk_paths* into the artifact; return ``(hex digest, size)``."""
        target = self.artifact_path(identity)
        # Temp names stay short whatever the identity length.
        tmp = self._upload_dir / f".{uuid.uuid4().hex}.part"
        hasher = hashlib.sha256()
        size = 0

        try:
            with open(tmp, "wb") as out:
                for chunk_path in chunk_paths:
                    with open(chunk_path, "rb") as chunk_file:
                        size += copy_and_hash(
                            chunk_file, out, hasher, buffer_size=self._buffer_size
                        )
            # A stale sidecar must not describe the new bytes.
            self._metadata.discard(identity)
            os.replace(tmp, target)
        except OSError as exc:
            _discard_temp(tmp)
            raise StorageError(f"Failed to merge chunks for {identity}") from exc
        except StorageError:
            _discard_temp(tmp)
            raise

        return hasher.hexdigest(), size
