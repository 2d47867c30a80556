"""Chunkforge CLI — Typer-based command-line interface.

Provides the ``chunkforge`` command with subcommands for serving the HTTP
API, completing uploads offline, inspecting and verifying stored artifacts,
and converting between filenames and identities.

All output uses Rich for formatted terminal display.
"""
