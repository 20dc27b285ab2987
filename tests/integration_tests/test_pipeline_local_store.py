"""End-to-end pipeline runs against the filesystem store and a real child process."""

from __future__ import annotations

import wave
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from wav_converter import convert_object, transcode_file
from wav_converter.config import Settings
from wav_converter.converter.http_server import create_app
from wav_converter.errors import BadRequestError


@pytest.fixture
def storage(tmp_path: Path) -> Path:
    root = tmp_path / "storage"
    (root / "in").mkdir(parents=True)
    (root / "in" / "a.mp3").write_bytes(b"ID3 fake mp3 payload")
    return root


@pytest.fixture
def scratch(tmp_path: Path) -> Path:
    path = tmp_path / "scratch"
    path.mkdir()
    return path


def _settings(storage: Path, scratch: Path, binary: Path) -> Settings:
    return Settings(
        storage_backend="local",
        local_root=storage,
        ffmpeg_binary=str(binary),
        transcode_timeout_seconds=20,
        workspace_dir=str(scratch),
    )


def test_convert_object_creates_container_and_writes_wav(
    fake_ffmpeg: Callable[..., Path], storage: Path, scratch: Path
) -> None:
    settings = _settings(storage, scratch, fake_ffmpeg("ok"))

    result = convert_object("in/a.mp3", "out/nested/a.wav", settings=settings)

    assert result.success is True, result.message
    written = storage / "out" / "nested" / "a.wav"
    with wave.open(str(written), "rb") as wav_file:
        assert wav_file.getframerate() == 16000
        assert wav_file.getnchannels() == 1
        assert wav_file.getsampwidth() == 2
    assert result.output_size_bytes == written.stat().st_size
    assert list(scratch.iterdir()) == []


def test_absolute_source_derives_destination(
    fake_ffmpeg: Callable[..., Path], storage: Path, scratch: Path
) -> None:
    settings = _settings(storage, scratch, fake_ffmpeg("ok"))

    result = convert_object(
        "https://acct.blob.core.example/in/a.mp3", "out/a.wav", settings=settings
    )

    assert result.destination == "https://acct.blob.core.example/out/a.wav"
    assert (storage / "out" / "a.wav").is_file()


def test_transcoder_failure_leaves_destination_untouched(
    fake_ffmpeg: Callable[..., Path], storage: Path, scratch: Path
) -> None:
    settings = _settings(storage, scratch, fake_ffmpeg("fail"))

    result = convert_object("in/a.mp3", "out/a.wav", settings=settings)

    assert result.status_code == 400
    assert "unsupported codec" in result.message
    assert not (storage / "out").exists()
    assert list(scratch.iterdir()) == []


def test_missing_source_cleans_up(
    fake_ffmpeg: Callable[..., Path], storage: Path, scratch: Path
) -> None:
    record = scratch.parent / "never-called.txt"
    settings = _settings(storage, scratch, fake_ffmpeg("ok", record=record))

    result = convert_object("in/missing.mp3", "out/a.wav", settings=settings)

    assert result.status_code == 500
    assert result.stage == "retrieval"
    assert not record.exists()
    assert list(scratch.iterdir()) == []


def test_transcode_file_defaults_to_wav_suffix(
    fake_ffmpeg: Callable[..., Path], storage: Path, scratch: Path
) -> None:
    settings = _settings(storage, scratch, fake_ffmpeg("ok"))

    out = transcode_file(storage / "in" / "a.mp3", settings=settings)

    assert out == storage / "in" / "a.wav"
    assert out.is_file()


def test_transcode_file_refuses_in_place_output(storage: Path, scratch: Path) -> None:
    source = storage / "in" / "a.wav"
    source.write_bytes(b"RIFF")
    with pytest.raises(BadRequestError):
        transcode_file(source, source, settings=Settings(workspace_dir=str(scratch)))


@pytest.mark.asyncio
async def test_http_convert_over_asgi(
    fake_ffmpeg: Callable[..., Path], storage: Path, scratch: Path
) -> None:
    app = create_app(_settings(storage, scratch, fake_ffmpeg("ok")))
    transport = httpx.ASGITransport(app=app)

    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/v1/convert",
            json={"sourceBlobPath": "in/a.mp3", "targetBlobPath": "out/a.wav"},
        )
        rejected = await client.post("/v1/convert", json={"sourceBlobPath": "in/a.mp3"})

    assert response.status_code == 200, response.text
    assert response.json()["destination"] == "out/a.wav"
    assert (storage / "out" / "a.wav").is_file()
    assert rejected.status_code == 400


@pytest.mark.parametrize("name", ["take#2.wav", "a.wav?v=1"])
def test_derived_destination_writes_the_requested_name(
    fake_ffmpeg: Callable[..., Path], storage: Path, scratch: Path, name: str
) -> None:
    settings = _settings(storage, scratch, fake_ffmpeg("ok"))
    (storage / "out").mkdir()
    (storage / "out" / "a.wav").write_bytes(b"keep")

    result = convert_object(
        "https://acct.blob.core.example/in/a.mp3", f"out/{name}", settings=settings
    )

    assert result.success is True, result.message
    assert result.destination == f"https://acct.blob.core.example/out/{name}"
    assert (storage / "out" / name).is_file()
    assert (storage / "out" / "a.wav").read_bytes() == b"keep"
    assert not (storage / "out" / "take").exists()
