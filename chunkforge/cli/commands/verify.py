"""``chunkforge verify IDENTITY`` — re-hash an artifact against its metadata."""

from __future__ import annotations

from pathlib import Path

import typer

from chunkforge.cli.commands._common import (
    ChunkDirOption,
    UploadDirOption,
    build_service,
    console,
    fail,
)
from chunkforge.core.errors import ChunkforgeError


def verify_cmd(
    identity: str = typer.Argument(..., help="Identity of the upload."),
    chunk_dir: Path = ChunkDirOption,
    upload_dir: Path = UploadDirOption,
) -> None:
    """Exit 0 if the stored bytes still match the recorded SHA-256, else 1."""
    service = build_service(chunk_dir, upload_dir)
    try:
        result = service.verify(identity)
    except ChunkforgeError as exc:
        raise fail(exc)

    if result.valid:
        console.print(f"[green]OK[/green] {identity} sha256={result.file_hash}")
        return

    console.print(
        f"[bold red]MISMATCH[/bold red] {identity}\n"
        f"  recorded: {result.file_hash}\n"
        f"  actual:   {result.actual_hash}"
    )
    raise typer.Exit(code=1)
