"""Runtime settings and factories for pipeline collaborators."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import boto3
from botocore.config import Config
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from wav_converter.adapters.storage import LocalObjectStore, S3ObjectStore
from wav_converter.adapters.transcoders import FfmpegTranscoder
from wav_converter.application.options import PipelineOptions
from wav_converter.application.ports import ObjectStore, Transcoder
from wav_converter.types import StorageBackend


class Settings(BaseSettings):
    """Service configuration read once at startup."""

    model_config = SettingsConfigDict(
        env_prefix="WAV_CONVERTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    storage_backend: StorageBackend = "s3"
    local_root: Path = Path("./storage")
    endpoint_url: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    region: str | None = None
    storage_connect_timeout_seconds: float = Field(default=10.0, gt=0)
    storage_read_timeout_seconds: float = Field(default=60.0, gt=0)

    # Transcoder
    ffmpeg_binary: str = "ffmpeg"
    transcode_timeout_seconds: float | None = Field(default=300.0, gt=0)

    # Pipeline
    workspace_dir: str | None = None
    validate_output: bool = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return process-wide settings built from the environment."""
    return Settings()


def build_object_store(settings: Settings) -> ObjectStore:
    """Create the configured object-store adapter."""
    if settings.storage_backend == "local":
        return LocalObjectStore(settings.local_root)

    session = boto3.session.Session(
        aws_access_key_id=settings.access_key_id,
        aws_secret_access_key=settings.secret_access_key,
        region_name=settings.region,
    )
    return S3ObjectStore(
        session,
        endpoint_url=settings.endpoint_url,
        region=settings.region,
        client_config=Config(
            connect_timeout=settings.storage_connect_timeout_seconds,
            read_timeout=settings.storage_read_timeout_seconds,
            retries={"max_attempts": 1, "mode": "standard"},
        ),
    )


def build_transcoder(settings: Settings) -> Transcoder:
    """Create the configured transcoder adapter."""
    return FfmpegTranscoder(
        binary=settings.ffmpeg_binary,
        timeout_seconds=settings.transcode_timeout_seconds,
    )


def build_pipeline_options(settings: Settings) -> PipelineOptions:
    """Project settings onto pipeline options."""
    return PipelineOptions(
        validate_output=settings.validate_output,
        workspace_dir=settings.workspace_dir,
    )
