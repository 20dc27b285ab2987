"""WAV output validation helpers."""

from __future__ import annotations

import wave
from pathlib import Path

from wav_converter.application.options import TranscodeProfile
from wav_converter.errors import TranscodeError


def validate_wav_if_requested(
    output_path: Path,
    profile: TranscodeProfile,
    validate: bool,
) -> None:
    """Check that the transcoder output matches ``profile``.

    Parameters
    ----------
    output_path : Path
        Path to the produced WAV file.
    profile : TranscodeProfile
        Expected sample rate, channel count and sample width.
    validate : bool
        Whether validation should be executed.

    Raises
    ------
    TranscodeError
        If the file is missing, empty, not a WAV file, or has the wrong format.
    """
    if not validate:
        return

    if not output_path.is_file() or output_path.stat().st_size == 0:
        raise TranscodeError("transcoder produced no output")

    try:
        with wave.open(str(output_path), "rb") as wav_file:
            channels = wav_file.getnchannels()
            sample_width = wav_file.getsampwidth()
            sample_rate = wav_file.getframerate()
    except (wave.Error, EOFError) as exc:
        raise TranscodeError(f"transcoder output is not a valid WAV file: {exc}") from exc

    if channels != profile.channels:
        raise TranscodeError(
            f"output must have {profile.channels} channel(s), got {channels}"
        )
    if sample_width != profile.sample_width:
        raise TranscodeError(
            f"output must be {profile.sample_width * 8}-bit, got {sample_width * 8}-bit"
        )
    if sample_rate != profile.sample_rate:
        raise TranscodeError(
            f"output must be {profile.sample_rate}Hz, got {sample_rate}Hz"
        )
