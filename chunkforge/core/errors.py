"""Error taxonomy shared by the storage core, the HTTP layer and the CLI.

Core code raises these and stays HTTP-agnostic; each class carries the
status code the API maps it to.
"""

from __future__ import annotations


class ChunkforgeError(RuntimeError):
    """Base class for every error the upload pipeline surfaces to a caller."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(ChunkforgeError):
    """Malformed request input; the message is shown to the caller verbatim."""

    status_code = 400


class InvalidIdentityError(InvalidInputError):
    """Raised when an identity is not a valid encoding of a filename."""


class InvalidChunkIndexError(InvalidInputError):
    """Raised when a chunk index is not a non-negative integer."""


class ChunkTooLargeError(InvalidInputError):
    """Raised when a single chunk exceeds the configured size limit."""

    status_code = 413


class NotFoundError(ChunkforgeError):
    """Raised when chunks, an artifact or its metadata do not exist."""

    status_code = 404


class CorruptMetadataError(ChunkforgeError):
    """Raised when a metadata sidecar exists but does not parse.

    Never repaired automatically.
    """


class StorageError(ChunkforgeError):
    """Raised when an underlying read, write or mkdir fails."""
