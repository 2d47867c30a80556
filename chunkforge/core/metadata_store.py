"""Metadata sidecars — one JSON file per assembled artifact.

Layout: {base_path}/{identity}.json, next to the artifact {base_path}/{identity}.
"""

from __future__ import annotations

import contextlib
import logging
import os
import uuid
from pathlib import Path

from pydantic import ValidationError

from chunkforge.core.errors import CorruptMetadataError, NotFoundError, StorageError
from chunkforge.core.hasher import canonical_json_bytes
from chunkforge.models.metadata import MetadataRecord

logger = logging.getLogger(__name__)

SIDECAR_SUFFIX = ".json"


class MetadataStore:
    """Persists and loads ``MetadataRecord`` sidecars.

    Parameters
    ----------
    base_path:
        The artifact area; sidecars sit beside their artifacts.
    """

    def __init__(self, base_path: Path) -> None:
        self._base = Path(base_path)

    def sidecar_path(self, identity: str) -> Path:
        return self._base / f"{identity}{SIDECAR_SUFFIX}"

    def exists(self, identity: str) -> bool:
        return self.sidecar_path(identity).is_file()

    def put(self, identity: str, record: MetadataRecord) -> Path:
        """Atomically write the sidecar for *identity*."""
        path = self.sidecar_path(identity)
        tmp = self._base / f".{uuid.uuid4().hex}.json.tmp"
        payload = canonical_json_bytes(record.model_dump(mode="json"))
        try:
            self._base.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(payload)
            os.replace(tmp, path)
        except OSError as exc:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise StorageError("Failed to save metadata") from exc
        logger.debug("Wrote metadata sidecar %s", path)
        return path

    def get(self, identity: str) -> MetadataRecord:
        """Load the sidecar for *identity*.

        Raises
        ------
        NotFoundError
            If no sidecar exists.
        CorruptMetadataError
            If the sidecar is not valid JSON or lacks required fields.
        """
        path = self.sidecar_path(identity)
        try:
            raw = path.read_bytes()
        except FileNotFoundError as exc:
            raise NotFoundError("Metadata not found") from exc
        except OSError as exc:
            raise StorageError("Failed to read metadata") from exc

        try:
            return MetadataRecord.model_validate_json(raw)
        except ValidationError as exc:
            raise CorruptMetadataError("Invalid metadata format") from exc

    def discard(self, identity: str) -> None:
        """Remove the sidecar for *identity*, if any."""
        try:
            self.sidecar_path(identity).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError("Failed to remove stale metadata") from exc
