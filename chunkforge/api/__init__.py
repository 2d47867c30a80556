"""HTTP API for chunked uploads."""

from chunkforge.api.app import create_app

__all__ = ["create_app"]
