"""``chunkforge encode NAME`` / ``chunkforge decode IDENTITY``."""

from __future__ import annotations

import typer

from chunkforge.cli.commands._common import console, fail
from chunkforge.core import identity as identity_codec
from chunkforge.core.errors import ChunkforgeError


def encode_cmd(
    name: str = typer.Argument(..., help="Original file name."),
) -> None:
    """Print the identity for a file name."""
    try:
        console.print(identity_codec.encode(name), markup=False, highlight=False)
    except ChunkforgeError as exc:
        raise fail(exc)


def decode_cmd(
    identity: str = typer.Argument(..., help="Identity to decode."),
) -> None:
    """Print the file name an identity stands for."""
    try:
        console.print(identity_codec.decode(identity), markup=False, highlight=False)
    except ChunkforgeError as exc:
        raise fail(exc)
