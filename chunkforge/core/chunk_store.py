"""Chunk repository — one file per uploaded chunk.

Layout: {base_path}/{identity}/{index}

``index`` is always the canonical decimal form of the chunk position, so
"007" and "7" land on the same file.  Chunks are written to a hidden temp
file first and renamed into place, so a listing never sees a partial chunk.
"""

from __future__ import annotations

import contextlib
import logging
import os
import re
import shutil
import uuid
from pathlib import Path
from typing import BinaryIO

from chunkforge.core.errors import (
    ChunkTooLargeError,
    InvalidChunkIndexError,
    InvalidIdentityError,
    NotFoundError,
    StorageError,
)
from chunkforge.core.hasher import DEFAULT_BUFFER_SIZE
from chunkforge.core.identity import is_valid_identity

logger = logging.getLogger(__name__)

_INDEX_PATTERN = re.compile(r"^[0-9]+$")
_TEMP_PREFIX = "."


def _discard_temp(tmp: Path) -> None:
    with contextlib.suppress(OSError):
        tmp.unlink()


def parse_chunk_index(text: str) -> int:
    """Parse a textual chunk position into a non-negative integer."""
    candidate = text.strip()
    if not _INDEX_PATTERN.fullmatch(candidate):
        raise InvalidChunkIndexError(f"Invalid chunk index: {text!r}")
    return int(candidate)


class ChunkStore:
    """Stores and enumerates chunk fragments keyed by identity.

    Parameters
    ----------
    base_path:
        Root of the chunk area.
    max_chunk_bytes:
        Largest single chunk accepted by ``put``.
    buffer_size:
        Read size used while copying an incoming chunk to disk.
    """

    def __init__(
        self,
        base_path: Path,
        *,
        max_chunk_bytes: int = 32 * 1024 * 1024,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        self._base = Path(base_path)
        self._max_chunk_bytes = max_chunk_bytes
        self._buffer_size = buffer_size

    def chunk_dir(self, identity: str) -> Path:
        if not is_valid_identity(identity):
            raise InvalidIdentityError(f"Invalid fileId: {identity!r}")
        return self._base / identity

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def put(self, identity: str, chunk_index: str | int, data: BinaryIO) -> int:
        """Store one chunk and return its parsed position.

        An existing chunk at the same position is replaced.
        """
        index = parse_chunk_index(str(chunk_index))
        target_dir = self.chunk_dir(identity)

        try:
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError("Failed to create chunk directory") from exc

        target = target_dir / str(index)
        tmp = target_dir / f"{_TEMP_PREFIX}{index}.{uuid.uuid4().hex}.part"

        written = 0
        try:
            with open(tmp, "wb") as out:
                while True:
                    block = data.read(self._buffer_size)
                    if not block:
                        break
                    written += len(block)
                    if written > self._max_chunk_bytes:
                        raise ChunkTooLargeError(
                            f"Chunk exceeds {self._max_chunk_bytes} bytes"
                        )
                    out.write(block)
            os.replace(tmp, target)
        except ChunkTooLargeError:
            _discard_temp(tmp)
            raise
        except OSError as exc:
            _discard_temp(tmp)
            raise StorageError("Failed to save chunk") from exc

        logger.debug("Stored chunk %d of %s (%d bytes)", index, identity, written)
        return index

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def exists(self, identity: str) -> bool:
        return self.chunk_dir(identity).is_dir()

    def list_chunks(self, identity: str) -> list[tuple[int, Path]]:
        """Return ``(position, path)`` pairs in ascending numeric order.

        Directory listings are lexicographic ("10" before "2"), so entries
        are sorted on their parsed integer value.  In-flight temp files are
        skipped.
        """
        chunk_dir = self.chunk_dir(identity)
        try:
            names = os.listdir(chunk_dir)
        except FileNotFoundError as exc:
            raise NotFoundError(f"No chunks found for {identity}") from exc
        except OSError as exc:
            raise StorageError("Failed to read chunks directory") from exc

        chunks: list[tuple[int, Path]] = []
        for name in names:
            if name.startswith(_TEMP_PREFIX):
                continue
            if not _INDEX_PATTERN.fullmatch(name):
                raise InvalidChunkIndexError(
                    f"Unparseable chunk entry {name!r} for {identity}"
                )
            chunks.append((int(name), chunk_dir / name))

        chunks.sort(key=lambda item: item[0])
        return chunks

    # ------------------------------------------------------------------
    # Cleanup
    # ------------------------------------------------------------------

    def remove(self, identity: str) -> None:
        """Delete every chunk stored for *identity*."""
        try:
            shutil.rmtree(self.chunk_dir(identity))
        except FileNotFoundError:
            return
        except OSError as exc:
            raise StorageError(f"Failed to clean up chunks for {identity}") from exc
