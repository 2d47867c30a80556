"""FastAPI application — the HTTP surface of the upload pipeline.

Routes:
    POST /upload                  store one chunk (multipart)
    POST /complete/{identity}     assemble the chunks of an upload
    GET  /download/{identity}     stream the artifact with its metadata headers
    GET  /metadata/{identity}     the metadata record as JSON
    GET  /verify/{identity}       re-hash the artifact against its metadata
    GET  /healthz                 liveness

Handlers are plain ``def`` functions, so FastAPI runs each request on its
own worker thread; completion locking happens in the service.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, Response
from starlette.datastructures import Headers

from chunkforge import __version__
from chunkforge.config import ServerConfig
from chunkforge.core.errors import ChunkforgeError
from chunkforge.core.upload_service import UploadService

logger = logging.getLogger(__name__)

CORS_METHODS = ["POST", "GET", "OPTIONS", "PUT", "DELETE"]


class _OpenCORSMiddleware(CORSMiddleware):
    """CORS that answers every pre-flight with an empty 200.

    The allow-headers computed by Starlette are kept; only the body and
    the status of its pre-flight reply change.
    """

    def preflight_response(self, request_headers: Headers) -> Response:
        reply = super().preflight_response(request_headers)
        headers = {
            key: value
            for key, value in reply.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=200, headers=headers)


def _log_error(request: Request, exc: ChunkforgeError) -> None:
    if exc.status_code >= 500:
        logger.error(
            "%s %s -> %d: %s (%r)",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
            exc.__cause__,
        )
    else:
        logger.info(
            "%s %s -> %d: %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )


def create_app(
    service: UploadService | None = None,
    settings: ServerConfig | None = None,
) -> FastAPI:
    """Build the application around *service*.

    With no arguments, settings come from the environment and the service
    is built from them, so
    ``uvicorn --factory chunkforge.api.app:create_app`` also works.
    """
    settings = settings or ServerConfig()
    service = service or UploadService(settings.storage())

    app = FastAPI(
        title="Chunkforge",
        description="Chunked upload assembly with SHA-256 integrity metadata.",
        version=__version__,
        debug=settings.debug,
    )
    app.state.service = service
    app.state.settings = settings

    app.add_middleware(
        _OpenCORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=CORS_METHODS,
        allow_headers=["*"],
    )

    @app.exception_handler(ChunkforgeError)
    async def _chunkforge_error(request: Request, exc: ChunkforgeError) -> Response:
        _log_error(request, exc)
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> Response:
        missing = ", ".join(
            str(err["loc"][-1]) for err in exc.errors() if err.get("loc")
        )
        return PlainTextResponse(
            f"Malformed request: {missing or 'invalid input'}", status_code=400
        )

    # ------------------------------------------------------------------
    # Upload
    # ------------------------------------------------------------------

    @app.post("/upload", response_class=PlainTextResponse)
    def upload_chunk(
        file_id: str = Form(..., alias="fileId"),
        chunk_index: str = Form(..., alias="chunkIndex"),
        chunk: UploadFile = File(...),
    ) -> str:
        try:
            service.store_chunk(file_id, chunk_index, chunk.file)
        finally:
            chunk.file.close()
        return "Chunk uploaded successfully"

    @app.post("/complete/{identity}", response_class=PlainTextResponse)
    def complete_upload(identity: str) -> str:
        return service.complete(identity)

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------

    @app.get("/download/{identity}")
    def download(identity: str, request: Request) -> Response:
        resolved = service.resolve(identity)
        headers = {"ETag": resolved.digest}

        if_none_match = request.headers.get("if-none-match", "")
        candidates = {tag.strip().strip('"') for tag in if_none_match.split(",")}
        if resolved.digest in candidates:
            return Response(status_code=304, headers=headers)

        return FileResponse(
            resolved.path,
            media_type=resolved.content_type,
            filename=resolved.display_name,
            headers=headers,
        )

    @app.get("/metadata/{identity}")
    def metadata(identity: str) -> Response:
        try:
            record = service.metadata(identity)
        except ChunkforgeError as exc:
            return JSONResponse({"error": exc.message}, status_code=exc.status_code)
        return JSONResponse(record.model_dump(mode="json"))

    @app.get("/verify/{identity}")
    def verify(identity: str) -> Response:
        result = service.verify(identity)
        return JSONResponse(
            {
                "identity": result.identity,
                "valid": result.valid,
                "file_hash": result.file_hash,
            }
        )

    @app.get("/healthz")
    def healthz() -> dict:
        return {"ok": True}

    return app
