"""Per-request scratch files for one pipeline execution."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

_PREFIX = "wav-converter-"


@dataclass
class Workspace:
    """Input and output scratch slots owned by a single request."""

    input_path: Path
    output_path: Path
    released: bool = field(default=False, compare=False)

    @property
    def paths(self) -> tuple[Path, Path]:
        return self.input_path, self.output_path


def _reserve(suffix: str, directory: str | None) -> Path:
    fd, name = tempfile.mkstemp(prefix=_PREFIX, suffix=suffix, dir=directory)
    os.close(fd)
    return Path(name)


def acquire(
    *,
    output_suffix: str = ".wav",
    input_suffix: str = "",
    directory: str | None = None,
) -> Workspace:
    """Reserve two uniquely named scratch files.

    Parameters
    ----------
    output_suffix : str, default=".wav"
        Extension of the output slot; independent of the input extension.
    input_suffix : str, default=""
        Optional extension hint for the input slot.
    directory : str | None, default=None
        Parent directory; the system temp dir when omitted.
    """
    input_path = _reserve(input_suffix, directory)
    try:
        output_path = _reserve(output_suffix, directory)
    except OSError:
        _remove(input_path)
        raise
    logger.debug("acquired workspace input=%s output=%s", input_path, output_path)
    return Workspace(input_path=input_path, output_path=output_path)


def _remove(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("could not remove scratch file %s: %s", path, exc)


def release(ws: Workspace) -> None:
    """Delete both scratch slots. Safe to call more than once; never raises."""
    if ws.released:
        return
    ws.released = True
    for path in ws.paths:
        _remove(path)
    logger.debug("released workspace input=%s output=%s", *ws.paths)


@contextmanager
def workspace(
    *,
    output_suffix: str = ".wav",
    input_suffix: str = "",
    directory: str | None = None,
) -> Iterator[Workspace]:
    """Acquire a workspace and release it on every exit path."""
    ws = acquire(
        output_suffix=output_suffix,
        input_suffix=input_suffix,
        directory=directory,
    )
    try:
        yield ws
    finally:
        release(ws)
