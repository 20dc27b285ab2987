"""Application ports for clean architecture boundaries."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from wav_converter.application.options import TranscodeProfile
from wav_converter.locator import ResolvedObjectAddress


class ObjectStore(Protocol):
    """Opaque object-storage capability."""

    def container_exists(self, container: str) -> bool:
        """Return whether ``container`` exists."""

    def create_container_if_absent(self, container: str) -> None:
        """Create ``container``; a concurrent creator winning is not an error."""

    def download(self, address: ResolvedObjectAddress, destination: Path) -> None:
        """Write the full object body to ``destination``."""

    def upload(self, source: Path, address: ResolvedObjectAddress) -> None:
        """Store ``source`` at ``address``, overwriting any existing object."""


class Transcoder(Protocol):
    """Convert a local audio file into the target waveform profile."""

    def transcode(
        self,
        input_path: Path,
        output_path: Path,
        profile: TranscodeProfile,
    ) -> Path:
        """Transcode and return the output path."""
