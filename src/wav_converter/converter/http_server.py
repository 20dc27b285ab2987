"""HTTP trigger for object conversion."""

from __future__ import annotations

import argparse
import logging
import os

from fastapi import Body, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from wav_converter import __version__
from wav_converter.application.ports import ObjectStore, Transcoder
from wav_converter.config import (
    Settings,
    build_object_store,
    build_transcoder,
    get_settings,
)
from wav_converter.converter.core import handle_payload
from wav_converter.schemas import ConversionResponse, HealthResponse, ReadyResponse

logger = logging.getLogger(__name__)

try:
    import uvicorn
except ModuleNotFoundError:  # pragma: no cover
    uvicorn = None


async def _request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    del request
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": f"Invalid conversion request: {exc.errors()}"},
    )


def create_app(
    settings: Settings | None = None,
    *,
    store: ObjectStore | None = None,
    transcoder: Transcoder | None = None,
) -> FastAPI:
    """Create the converter HTTP application.

    Collaborators are built once here and shared by every request.
    """
    settings = settings or get_settings()
    store = store or build_object_store(settings)
    transcoder = transcoder or build_transcoder(settings)

    app = FastAPI(
        title="WAV Converter",
        version=__version__,
        description=(
            "Fetch a stored audio object, convert it to 16 kHz mono 16-bit PCM "
            "WAV, and store the result."
        ),
    )
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    @app.get("/healthz", response_model=HealthResponse)
    async def healthz() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/readyz", response_model=ReadyResponse)
    async def readyz() -> ReadyResponse:
        return ReadyResponse(status="ready")

    @app.post("/v1/convert", response_model=ConversionResponse)
    def convert(
        body: dict[str, object] | None = Body(default=None),
        source_blob_url: str | None = Query(default=None, alias="sourceBlobUrl"),
        source_blob_path: str | None = Query(default=None, alias="sourceBlobPath"),
        target_blob_path: str | None = Query(default=None, alias="targetBlobPath"),
    ) -> ConversionResponse:
        """Convert one object; JSON body fields override query parameters."""
        query = {
            "sourceBlobUrl": source_blob_url,
            "sourceBlobPath": source_blob_path,
            "targetBlobPath": target_blob_path,
        }
        payload: dict[str, object] = {k: v for k, v in query.items() if v is not None}
        payload.update({k: v for k, v in (body or {}).items() if v is not None})

        result = handle_payload(
            payload,
            settings=settings,
            store=store,
            transcoder=transcoder,
        )
        if not result.success:
            raise HTTPException(status_code=result.status_code, detail=result.message)
        return ConversionResponse(
            status="ok",
            message=result.message,
            destination=result.destination or "",
            output_sha256=result.output_sha256 or "",
            output_size_bytes=result.output_size_bytes or 0,
        )

    return app


def main() -> None:
    """Run converter HTTP entrypoint."""
    if uvicorn is None:
        raise RuntimeError("uvicorn is required to run converter-http")
    parser = argparse.ArgumentParser(description="WAV converter HTTP server.")
    parser.add_argument(
        "--host",
        default=os.getenv("CONVERTER_HTTP_HOST", "0.0.0.0"),
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("CONVERTER_HTTP_PORT", "8090")),
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("CONVERTER_LOG_LEVEL", "info"),
        choices=["debug", "info", "warning", "error"],
    )
    args = parser.parse_args()
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "wav_converter.converter.http_server:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_level=args.log_level,
        reload=False,
    )


if __name__ == "__main__":
    main()
