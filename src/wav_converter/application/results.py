"""Application-layer result objects."""

from __future__ import annotations

from dataclasses import dataclass

from wav_converter.types import StageName


@dataclass(frozen=True)
class TranscodeOutcome:
    """Captured result of a single transcoder process run."""

    exit_code: int
    stdout: str
    stderr: str

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True)
class ConversionResult:
    """Structured pipeline outcome returned to callers.

    Exactly one of ``destination`` and ``error_message`` is set.
    """

    success: bool
    status_code: int
    destination: str | None = None
    error_message: str | None = None
    stage: StageName | None = None
    exit_code: int = 0
    output_sha256: str | None = None
    output_size_bytes: int | None = None

    @classmethod
    def completed(
        cls,
        destination: str,
        *,
        output_sha256: str,
        output_size_bytes: int,
    ) -> ConversionResult:
        return cls(
            success=True,
            status_code=200,
            destination=destination,
            output_sha256=output_sha256,
            output_size_bytes=output_size_bytes,
        )

    @classmethod
    def failed(
        cls,
        stage: StageName,
        message: str,
        status_code: int,
        exit_code: int = 1,
    ) -> ConversionResult:
        return cls(
            success=False,
            status_code=status_code,
            exit_code=exit_code,
            error_message=message,
            stage=stage,
        )

    @property
    def message(self) -> str:
        """Human-readable summary for transport payloads."""
        if self.success:
            return f"Audio file converted and uploaded to {self.destination}"
        return self.error_message or "conversion failed"
