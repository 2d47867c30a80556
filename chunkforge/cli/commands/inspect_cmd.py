"""``chunkforge inspect IDENTITY`` — show the metadata of an assembled upload."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from chunkforge.cli.commands._common import (
    ChunkDirOption,
    UploadDirOption,
    build_service,
    console,
    fail,
)
from chunkforge.core.errors import ChunkforgeError


def inspect_cmd(
    identity: str = typer.Argument(..., help="Identity of the upload."),
    chunk_dir: Path = ChunkDirOption,
    upload_dir: Path = UploadDirOption,
) -> None:
    """Print the metadata record stored for IDENTITY."""
    service = build_service(chunk_dir, upload_dir)
    try:
        record = service.metadata(identity)
    except ChunkforgeError as exc:
        raise fail(exc)

    table = Table(title=f"Metadata: {identity}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for field, value in record.model_dump(mode="json").items():
        table.add_row(field, "" if value is None else str(value))
    console.print(table)
