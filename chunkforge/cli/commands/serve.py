"""``chunkforge serve`` — run the HTTP API under uvicorn."""

from __future__ import annotations

import logging

import typer
import uvicorn

from chunkforge.api.app import create_app
from chunkforge.config import config
from chunkforge.core.upload_service import UploadService
from chunkforge.logging_setup import configure_logging

logger = logging.getLogger(__name__)


def serve_cmd(
    host: str = typer.Option(None, "--host", help="Bind address."),
    port: int = typer.Option(None, "--port", "-p", help="Bind port."),
    log_level: str = typer.Option(None, "--log-level", help="Root log level."),
) -> None:
    """Serve the upload API until interrupted."""
    level = (log_level or ("DEBUG" if config.debug else config.log_level)).upper()
    configure_logging(level)

    app = create_app(UploadService(config.storage()), config)
    bind_host = host or config.host
    bind_port = port or config.port

    logger.info(
        "Starting Chunkforge on %s:%d (chunks=%s, uploads=%s)",
        bind_host,
        bind_port,
        config.chunk_dir,
        config.upload_dir,
    )
    uvicorn.run(app, host=bind_host, port=bind_port, log_level=level.lower())
