"""SHA-256 helpers for streaming assembly and integrity checks."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any, BinaryIO

DEFAULT_BUFFER_SIZE = 1_048_576  # 1 MiB


def canonical_json_bytes(obj: Any) -> bytes:
    """Produce canonical JSON bytes — sorted keys, compact, UTF-8.

    Used for metadata sidecars so identical records serialize identically.
    """
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


def copy_and_hash(
    src: BinaryIO,
    dst: BinaryIO,
    digest: "hashlib._Hash",
    *,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
) -> int:
    """Copy *src* into *dst*, feeding every block into *digest* as well.

    Returns the number of bytes copied.  Neither stream is closed.
    """
    copied = 0
    while True:
        block = src.read(buffer_size)
        if not block:
            break
        dst.write(block)
        digest.update(block)
        copied += len(block)
    return copied


def sha256_file(path: Path, *, buffer_size: int = DEFAULT_BUFFER_SIZE) -> str:
    """Return the SHA-256 hex digest of a file, read in blocks."""
    digest = hashlib.sha256()
    with open(path, "rb") as fh:
        for block in iter(lambda: fh.read(buffer_size), b""):
            digest.update(block)
    return digest.hexdigest()
