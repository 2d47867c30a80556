"""Main Typer application — imports and registers all CLI commands.

Entry point: ``chunkforge`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import typer

from chunkforge.cli.commands.complete import complete_cmd
from chunkforge.cli.commands.identity import decode_cmd, encode_cmd
from chunkforge.cli.commands.inspect_cmd import inspect_cmd
from chunkforge.cli.commands.serve import serve_cmd
from chunkforge.cli.commands.verify import verify_cmd

app = typer.Typer(
    name="chunkforge",
    help="Chunkforge: chunked upload assembly with SHA-256 integrity metadata.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="serve", help="Run the HTTP upload API.")(serve_cmd)
app.command(name="complete", help="Assemble the chunks of an upload.")(complete_cmd)
app.command(name="inspect", help="Show the metadata of an assembled upload.")(inspect_cmd)
app.command(name="verify", help="Re-hash an artifact against its metadata.")(verify_cmd)
app.command(name="encode", help="Encode a file name into an identity.")(encode_cmd)
app.command(name="decode", help="Decode an identity into a file name.")(decode_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
