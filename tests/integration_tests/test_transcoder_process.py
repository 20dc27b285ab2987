"""Integration tests running the transcoder adapter against a real child process."""

from __future__ import annotations

import time
import wave
from collections.abc import Callable
from pathlib import Path

import pytest

from wav_converter.adapters.transcoders import FfmpegTranscoder
from wav_converter.application.options import CANONICAL_PROFILE
from wav_converter.errors import (
    TranscodeError,
    TranscodeLaunchError,
    TranscodeTimeoutError,
)


def test_successful_run_writes_output(
    fake_ffmpeg: Callable[..., Path], tmp_path: Path
) -> None:
    record = tmp_path / "args.txt"
    binary = fake_ffmpeg("ok", record=record)
    source = tmp_path / "in file; $(x).mp3"
    source.write_bytes(b"audio")
    output = tmp_path / "out.wav"

    FfmpegTranscoder(binary=str(binary)).transcode(source, output, CANONICAL_PROFILE)

    with wave.open(str(output), "rb") as wav_file:
        assert wav_file.getframerate() == 16000
        assert wav_file.getnchannels() == 1
    args = record.read_text(encoding="utf-8").splitlines()
    assert str(source) in args
    assert args[args.index("-ar") + 1] == "16000"
    assert args[-1] == str(output)


def test_nonzero_exit_carries_stderr(
    fake_ffmpeg: Callable[..., Path], tmp_path: Path
) -> None:
    with pytest.raises(TranscodeError, match="unsupported codec") as info:
        FfmpegTranscoder(binary=str(fake_ffmpeg("fail"))).transcode(
            tmp_path / "in.mp3", tmp_path / "out.wav", CANONICAL_PROFILE
        )
    assert "Error while decoding stream" in info.value.stderr
    assert not isinstance(info.value, TranscodeTimeoutError)


def test_large_diagnostic_output_does_not_deadlock(
    fake_ffmpeg: Callable[..., Path], tmp_path: Path
) -> None:
    """A child writing far more than a pipe buffer still completes."""
    output = tmp_path / "out.wav"
    started = time.monotonic()

    FfmpegTranscoder(binary=str(fake_ffmpeg("flood")), timeout_seconds=20).transcode(
        tmp_path / "in.mp3", output, CANONICAL_PROFILE
    )

    assert output.stat().st_size > 44
    assert time.monotonic() - started < 20


def test_deadline_kills_hung_process(
    fake_ffmpeg: Callable[..., Path], tmp_path: Path
) -> None:
    started = time.monotonic()

    with pytest.raises(TranscodeTimeoutError, match="timed out") as info:
        FfmpegTranscoder(binary=str(fake_ffmpeg("sleep")), timeout_seconds=0.5).transcode(
            tmp_path / "in.mp3", tmp_path / "out.wav", CANONICAL_PROFILE
        )

    assert time.monotonic() - started < 15
    assert info.value.status_code == 500


def test_missing_binary_is_a_launch_error(tmp_path: Path) -> None:
    with pytest.raises(TranscodeLaunchError):
        FfmpegTranscoder(binary=str(tmp_path / "missing-ffmpeg")).transcode(
            tmp_path / "in.mp3", tmp_path / "out.wav", CANONICAL_PROFILE
        )


def test_non_executable_binary_is_a_launch_error(tmp_path: Path) -> None:
    binary = tmp_path / "ffmpeg"
    binary.write_text("not executable", encoding="utf-8")
    binary.chmod(0o644)

    with pytest.raises(TranscodeLaunchError):
        FfmpegTranscoder(binary=str(binary)).transcode(
            tmp_path / "in.mp3", tmp_path / "out.wav", CANONICAL_PROFILE
        )
