"""External transcoder process adapter."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from wav_converter.application.options import TranscodeProfile
from wav_converter.application.results import TranscodeOutcome
from wav_converter.errors import (
    TranscodeError,
    TranscodeLaunchError,
    TranscodeTimeoutError,
)

logger = logging.getLogger(__name__)

# Error text callers see is cut to the tail; ffmpeg reports the cause last.
MAX_ERROR_CHARS = 2000


def build_ffmpeg_command(
    binary: str,
    input_path: Path,
    output_path: Path,
    profile: TranscodeProfile,
) -> list[str]:
    """Build the ffmpeg argument vector.

    Every path is passed as a single argv entry; no shell is involved.
    """
    return [
        binary,
        "-nostdin",
        "-hide_banner",
        "-y",
        "-i",
        str(input_path),
        "-ar",
        str(profile.sample_rate),
        "-ac",
        str(profile.channels),
        "-c:a",
        profile.codec,
        str(output_path),
    ]


def _decode(data: bytes | None) -> str:
    return (data or b"").decode("utf-8", errors="replace")


def run_process(
    command: Sequence[str],
    timeout_seconds: float | None = None,
) -> TranscodeOutcome:
    """Run ``command`` and capture both output streams.

    ``communicate`` drains stdout and stderr concurrently while waiting, so a
    child that fills a pipe buffer cannot block on write.

    Raises
    ------
    TranscodeLaunchError
        If the process cannot be started.
    TranscodeTimeoutError
        If the process outlives ``timeout_seconds``; it is killed and reaped.
    """
    try:
        process = subprocess.Popen(
            list(command),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as exc:
        raise TranscodeLaunchError(
            f"could not start transcoder '{command[0]}': {exc}"
        ) from exc

    with process:
        try:
            stdout, stderr = process.communicate(timeout=timeout_seconds)
        except subprocess.TimeoutExpired as exc:
            process.kill()
            _, stderr = process.communicate()
            raise TranscodeTimeoutError(
                f"transcoder timed out after {timeout_seconds}s",
                stderr=_decode(stderr),
            ) from exc
        except BaseException:
            process.kill()
            raise
    return TranscodeOutcome(
        exit_code=process.returncode,
        stdout=_decode(stdout),
        stderr=_decode(stderr),
    )


class FfmpegTranscoder:
    """Transcode local audio files with an ffmpeg executable."""

    def __init__(
        self,
        binary: str = "ffmpeg",
        timeout_seconds: float | None = 300.0,
    ) -> None:
        self.binary = binary
        self.timeout_seconds = timeout_seconds

    def transcode(
        self,
        input_path: Path,
        output_path: Path,
        profile: TranscodeProfile,
    ) -> Path:
        """Transcode ``input_path`` into ``output_path``.

        Parameters
        ----------
        input_path : Path
            Local source audio file.
        output_path : Path
            Local destination; overwritten.
        profile : TranscodeProfile
            Target sample rate, channel count and codec.

        Returns
        -------
        Path
            ``output_path`` once the process exited with status 0.

        Raises
        ------
        TranscodeError
            If the process exits non-zero; carries captured stderr.
        TranscodeLaunchError
            If the executable cannot be started.
        """
        command = build_ffmpeg_command(self.binary, input_path, output_path, profile)
        logger.info("running transcoder: %s", " ".join(command))
        outcome = run_process(command, timeout_seconds=self.timeout_seconds)
        if not outcome.succeeded:
            logger.error(
                "transcoder exited with %s: %s", outcome.exit_code, outcome.stderr
            )
            detail = outcome.stderr.strip()[-MAX_ERROR_CHARS:]
            raise TranscodeError(
                f"FFmpeg conversion failed: {detail}",
                stderr=outcome.stderr,
            )
        logger.debug("transcoder stderr: %s", outcome.stderr)
        return output_path
