"""Application-layer use-cases and option objects."""

from __future__ import annotations

from pathlib import Path

from wav_converter.application.options import (
    CANONICAL_PROFILE,
    PipelineOptions,
    TranscodeProfile,
)
from wav_converter.application.ports import ObjectStore, Transcoder
from wav_converter.application.results import ConversionResult, TranscodeOutcome


def run_pipeline(
    *,
    source_reference: str,
    destination_reference: str,
    store: ObjectStore,
    transcoder: Transcoder,
    profile: TranscodeProfile = CANONICAL_PROFILE,
    options: PipelineOptions | None = None,
) -> ConversionResult:
    """Run the conversion pipeline via lazy use-case import."""
    from wav_converter.application.use_cases import run_pipeline as _impl

    return _impl(
        source_reference=source_reference,
        destination_reference=destination_reference,
        store=store,
        transcoder=transcoder,
        profile=profile,
        options=options,
    )


def transcode_object(
    transcoder: Transcoder,
    input_path: Path,
    output_path: Path,
    *,
    profile: TranscodeProfile = CANONICAL_PROFILE,
    validate: bool = True,
) -> Path:
    """Transcode one local file via lazy use-case import."""
    from wav_converter.application.use_cases import transcode_object as _impl

    return _impl(
        transcoder,
        input_path,
        output_path,
        profile=profile,
        validate=validate,
    )


__all__ = [
    "CANONICAL_PROFILE",
    "ConversionResult",
    "ObjectStore",
    "PipelineOptions",
    "TranscodeOutcome",
    "TranscodeProfile",
    "Transcoder",
    "run_pipeline",
    "transcode_object",
]
