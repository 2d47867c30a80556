"""Content-type inference from filename extensions.

A fixed table rather than the platform ``mimetypes`` database, so the
result does not depend on the host.  Plain-text types are deliberately
absent: anything not listed is served as ``application/octet-stream``.
"""

from __future__ import annotations

from pathlib import PurePosixPath

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES: dict[str, str] = {
    # images
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".webp": "image/webp",
    # audio
    ".ogg": "audio/ogg",
    ".mp3": "audio/mpeg",
    ".m4a": "audio/mp4",
    # video
    ".mov": "video/quicktime",
    ".mp4": "video/mp4",
    ".mpeg": "video/mpeg",
    ".mpg": "video/mpeg",
    ".webm": "video/webm",
    # documents
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".xls": "application/vnd.ms-excel",
    ".ppt": "application/vnd.ms-powerpoint",
    ".zip": "application/zip",
}


def infer(filename: str) -> str:
    """Return the MIME type for *filename*'s extension (case-insensitive)."""
    # Names may carry either separator; only the final component matters.
    suffix = PurePosixPath(filename.replace("\\", "/")).suffix.lower()
    return CONTENT_TYPES.get(suffix, DEFAULT_CONTENT_TYPE)
