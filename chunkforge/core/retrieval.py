"""Retrieval facade — resolves an identity to a servable artifact.

The facade never streams bytes itself; it hands back the artifact path
together with its metadata and leaves the transfer to a static-file
responder.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from chunkforge.core.errors import InvalidIdentityError, NotFoundError, StorageError
from chunkforge.core.hasher import DEFAULT_BUFFER_SIZE, sha256_file
from chunkforge.core.identity import is_valid_identity
from chunkforge.core.metadata_store import MetadataStore
from chunkforge.models.metadata import MetadataRecord

logger = logging.getLogger(__name__)


class ResolvedArtifact(BaseModel):
    """An assembled artifact and the headers it should be served with."""

    model_config = ConfigDict(frozen=True)

    identity: str
    path: Path
    metadata: MetadataRecord

    @property
    def display_name(self) -> str:
        return self.metadata.original_name

    @property
    def content_type(self) -> str:
        return self.metadata.content_type

    @property
    def digest(self) -> str:
        return self.metadata.file_hash


class VerificationResult(BaseModel):
    """Outcome of re-hashing a stored artifact."""

    model_config = ConfigDict(frozen=True)

    identity: str
    valid: bool
    file_hash: str
    actual_hash: str


class ArtifactRetriever:
    """Looks up artifacts and their sidecars in the artifact area.

    Parameters
    ----------
    upload_dir:
        The artifact area.
    metadata_store:
        Sidecar store rooted at the same directory.
    """

    def __init__(
        self,
        upload_dir: Path,
        metadata_store: MetadataStore,
        *,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        self._upload_dir = Path(upload_dir)
        self._metadata = metadata_store
        self._buffer_size = buffer_size

    def _artifact_path(self, identity: str) -> Path:
        if not is_valid_identity(identity):
            raise InvalidIdentityError("Invalid file name encoding")
        return self._upload_dir / identity

    def resolve(self, identity: str) -> ResolvedArtifact:
        """Return the artifact path and metadata for *identity*.

        Raises ``NotFoundError`` if the artifact or its sidecar is absent
        and ``CorruptMetadataError`` if the sidecar does not parse.
        """
        path = self._artifact_path(identity)
        if not path.is_file():
            raise NotFoundError("File not found")
        record = self._metadata.get(identity)
        return ResolvedArtifact(identity=identity, path=path, metadata=record)

    def metadata(self, identity: str) -> MetadataRecord:
        """Return only the parsed sidecar for *identity*."""
        if not is_valid_identity(identity):
            raise InvalidIdentityError("Invalid file name encoding")
        return self._metadata.get(identity)

    def verify(self, identity: str) -> VerificationResult:
        """Re-hash the stored artifact and compare it with its sidecar digest."""
        resolved = self.resolve(identity)
        try:
            actual = sha256_file(resolved.path, buffer_size=self._buffer_size)
        except OSError as exc:
            raise StorageError("Failed to read artifact") from exc

        valid = actual == resolved.digest
        if not valid:
            logger.warning(
                "Integrity mismatch for %s: stored %s, actual %s",
                identity,
                resolved.digest,
                actual,
            )
        return VerificationResult(
            identity=identity,
            valid=valid,
            file_hash=resolved.digest,
            actual_hash=actual,
        )
