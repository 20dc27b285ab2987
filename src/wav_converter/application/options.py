"""Typed option objects shared across conversion use-cases."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TranscodeProfile:
    """Target waveform format. Not caller-configurable."""

    sample_rate: int = 16000
    channels: int = 1
    codec: str = "pcm_s16le"
    sample_width: int = 2
    extension: str = ".wav"
    container_format: str = "wav"


CANONICAL_PROFILE = TranscodeProfile()


@dataclass(frozen=True)
class PipelineOptions:
    """Per-pipeline behavior toggles."""

    validate_output: bool = True
    workspace_dir: str | None = None
