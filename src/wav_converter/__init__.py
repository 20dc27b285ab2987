"""Top-level API for audio-object to WAV conversion."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wav_converter.application.ports import ObjectStore, Transcoder
    from wav_converter.application.results import ConversionResult
    from wav_converter.config import Settings

__version__ = "0.1.0"


def convert_object(
    source_reference: str,
    destination_reference: str,
    *,
    settings: Settings | None = None,
    store: ObjectStore | None = None,
    transcoder: Transcoder | None = None,
) -> ConversionResult:
    """Convert a stored audio object to 16 kHz mono 16-bit PCM WAV.

    Parameters
    ----------
    source_reference : str
        ``container/name`` path or absolute URL of the source object.
    destination_reference : str
        ``container/name`` path or absolute URL for the WAV output. A relative
        path is placed on the source's endpoint when the source is absolute.
    settings : Settings, optional
        Explicit configuration; read from the environment when omitted.
    store : ObjectStore, optional
        Storage adapter override.
    transcoder : Transcoder, optional
        Transcoder adapter override.

    Returns
    -------
    ConversionResult
        Success with the destination address, or failure with a status code
        and message. Never raises for pipeline failures.
    """
    from .api import convert_object as _impl

    return _impl(
        source_reference,
        destination_reference,
        settings=settings,
        store=store,
        transcoder=transcoder,
    )


def transcode_file(
    input_path: Path,
    output_path: Path | None = None,
    *,
    settings: Settings | None = None,
    transcoder: Transcoder | None = None,
) -> Path:
    """Transcode a local audio file to 16 kHz mono 16-bit PCM WAV.

    Parameters
    ----------
    input_path : Path
        Source audio file.
    output_path : Path | None, default=None
        WAV output path. When omitted, defaults to
        ``input_path.with_suffix(".wav")``.

    Raises
    ------
    TranscodeError
        If the transcoder exits non-zero or the output fails validation.
    TranscodeLaunchError
        If the transcoder cannot be started.
    """
    from .api import transcode_file as _impl

    resolved_output_path = output_path or input_path.with_suffix(".wav")
    return _impl(
        input_path,
        resolved_output_path,
        settings=settings,
        transcoder=transcoder,
    )


__all__ = [
    "__version__",
    "convert_object",
    "transcode_file",
]
