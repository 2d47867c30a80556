"""Chunkforge: chunked upload assembly with SHA-256 integrity metadata.

Files arrive as independently uploaded chunks, are reassembled in numeric
chunk order while being hashed in the same pass, and are served back under
their original filename, inferred media type and digest.
"""

__version__ = "0.1.0"
__description__ = "Chunked upload assembly service with SHA-256 integrity metadata"

from chunkforge.core.identity import decode, encode
from chunkforge.core.upload_service import UploadService
from chunkforge.models.storage import StorageConfig

__all__ = ["UploadService", "StorageConfig", "encode", "decode", "__version__"]
