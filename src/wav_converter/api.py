"""Public object- and file-level conversion API."""

from __future__ import annotations

from pathlib import Path

from wav_converter.application.options import CANONICAL_PROFILE
from wav_converter.application.ports import ObjectStore, Transcoder
from wav_converter.application.results import ConversionResult
from wav_converter.application.use_cases import run_pipeline, transcode_object
from wav_converter.config import (
    Settings,
    build_object_store,
    build_pipeline_options,
    build_transcoder,
    get_settings,
)
from wav_converter.errors import BadRequestError


def convert_object(
    source_reference: str,
    destination_reference: str,
    *,
    settings: Settings | None = None,
    store: ObjectStore | None = None,
    transcoder: Transcoder | None = None,
) -> ConversionResult:
    """Convert a stored audio object to 16 kHz mono PCM WAV and store it."""
    settings = settings or get_settings()
    return run_pipeline(
        source_reference=source_reference,
        destination_reference=destination_reference,
        store=store or build_object_store(settings),
        transcoder=transcoder or build_transcoder(settings),
        profile=CANONICAL_PROFILE,
        options=build_pipeline_options(settings),
    )


def transcode_file(
    input_path: Path,
    output_path: Path,
    *,
    settings: Settings | None = None,
    transcoder: Transcoder | None = None,
) -> Path:
    """Transcode a local audio file to 16 kHz mono PCM WAV."""
    if input_path.resolve() == output_path.resolve():
        raise BadRequestError("output path must differ from input path")
    settings = settings or get_settings()
    return transcode_object(
        transcoder or build_transcoder(settings),
        input_path,
        output_path,
        profile=CANONICAL_PROFILE,
        validate=settings.validate_output,
    )
