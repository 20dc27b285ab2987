"""Shared pytest configuration, marker assignment, and process fixtures."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import pytest


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Attach suite markers based on test file path."""
    del config
    for item in items:
        path = Path(str(item.fspath))
        parts = set(path.parts)
        if "e2e_tests" in parts:
            item.add_marker(pytest.mark.e2e)
        elif "integration_tests" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit_tests" in parts:
            item.add_marker(pytest.mark.unit)


_FAKE_FFMPEG = '''#!{python}
import sys
import time
import wave

MODE = {mode!r}
RECORD = {record!r}

args = sys.argv[1:]
output = args[-1]

if RECORD:
    with open(RECORD, "w", encoding="utf-8") as handle:
        handle.write("\\n".join(args))

if MODE == "fail":
    sys.stderr.write("Error while decoding stream: unsupported codec\\n")
    sys.exit(1)

if MODE == "flood":
    line = "x" * 1023 + "\\n"
    for _ in range(1024):
        sys.stderr.write(line)
        sys.stdout.write(line)
    sys.stderr.flush()
    sys.stdout.flush()

if MODE == "sleep":
    time.sleep(30)

with wave.open(output, "wb") as wav_file:
    wav_file.setnchannels(1)
    wav_file.setsampwidth(2)
    wav_file.setframerate(16000)
    wav_file.writeframes(b"\\x00\\x00" * 1600)
'''


@pytest.fixture
def fake_ffmpeg(tmp_path: Path) -> Callable[..., Path]:
    """Build an executable ffmpeg stand-in.

    Modes: ``ok`` writes a valid WAV, ``fail`` exits 1 with a codec error,
    ``flood`` writes 1 MiB to both pipes before succeeding, ``sleep`` hangs.
    """
    if sys.platform == "win32":
        pytest.skip("fake ffmpeg relies on a shebang script")

    def _build(mode: str = "ok", record: Path | None = None) -> Path:
        script = tmp_path / f"fake-ffmpeg-{mode}"
        script.write_text(
            _FAKE_FFMPEG.format(
                python=sys.executable,
                mode=mode,
                record=str(record) if record else "",
            ),
            encoding="utf-8",
        )
        script.chmod(0o755)
        return script

    return _build
