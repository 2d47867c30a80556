"""``chunkforge complete IDENTITY`` — assemble an upload without the HTTP layer."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.panel import Panel

from chunkforge.cli.commands._common import (
    ChunkDirOption,
    UploadDirOption,
    build_service,
    console,
    fail,
)
from chunkforge.core.errors import ChunkforgeError


def complete_cmd(
    identity: str = typer.Argument(..., help="Identity of the upload to assemble."),
    chunk_dir: Path = ChunkDirOption,
    upload_dir: Path = UploadDirOption,
) -> None:
    """Assemble the stored chunks of IDENTITY into an artifact."""
    service = build_service(chunk_dir, upload_dir)
    try:
        service.complete(identity)
        record = service.metadata(identity)
    except ChunkforgeError as exc:
        raise fail(exc)

    console.print(
        Panel(
            "\n".join([
                "[bold green]Upload assembled[/bold green]",
                "",
                f"[bold]Identity:[/bold]      {identity}",
                f"[bold]File name:[/bold]     {record.original_name}",
                f"[bold]Content type:[/bold]  {record.content_type}",
                f"[bold]Size:[/bold]          {record.size_bytes} bytes",
                f"[bold]SHA-256:[/bold]       {record.file_hash}",
            ]),
            title="[bold]Chunkforge[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )
