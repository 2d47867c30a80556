"""Options and helpers shared by the storage-facing commands."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from chunkforge.config import config
from chunkforge.core.errors import ChunkforgeError
from chunkforge.core.upload_service import UploadService
from chunkforge.models.storage import StorageConfig

console = Console()

ChunkDirOption = typer.Option(
    None,
    "--chunks",
    "-c",
    help="Chunk area root. Defaults to CHUNKFORGE_CHUNK_DIR or ./chunks.",
)
UploadDirOption = typer.Option(
    None,
    "--uploads",
    "-u",
    help="Artifact area root. Defaults to CHUNKFORGE_UPLOAD_DIR or ./uploads.",
)


def build_service(chunk_dir: Path | None, upload_dir: Path | None) -> UploadService:
    """Build an ``UploadService`` from CLI overrides on top of the env config."""
    base = config.storage()
    storage = StorageConfig(
        chunk_dir=chunk_dir or base.chunk_dir,
        upload_dir=upload_dir or base.upload_dir,
        max_chunk_bytes=base.max_chunk_bytes,
        copy_buffer_bytes=base.copy_buffer_bytes,
    )
    return UploadService(storage)


def fail(exc: ChunkforgeError) -> typer.Exit:
    """Print *exc* and return the ``typer.Exit`` to raise."""
    console.print(f"[bold red]{type(exc).__name__}:[/bold red] {exc.message}")
    return typer.Exit(code=1)
