#!/usr/bin/env python3
"""
wav_converter.cli.cli

Typer-based CLI for converting stored audio objects to 16 kHz mono PCM WAV.

The CLI reads the same ``WAV_CONVERTER_*`` settings as the HTTP service;
command-line options override them for a single invocation.

Examples
--------
Convert an object between two buckets:

    convert-to-wav convert in/a.mp3 out/a.wav

Convert a local file with a specific ffmpeg build:

    convert-to-wav transcode a.mp3 a.wav --ffmpeg-binary /opt/ffmpeg/bin/ffmpeg
"""

from __future__ import annotations

import importlib.metadata as metadata
import logging
import shutil
import subprocess
import sys
import traceback
from pathlib import Path
from typing import TYPE_CHECKING, Any

import typer

from wav_converter.errors import ConversionError

if TYPE_CHECKING:
    from wav_converter.config import Settings

app = typer.Typer(
    name="convert-to-wav",
    help="Convert audio objects to 16 kHz mono 16-bit PCM WAV.",
    no_args_is_help=True,
)

FFMPEG_HELP = "ffmpeg executable name or path."
TIMEOUT_HELP = "Transcoder deadline in seconds."
NO_VALIDATE_HELP = "Skip WAV header validation of the transcoder output."

DOCTOR_PACKAGES = [
    "boto3",
    "botocore",
    "pydantic",
    "pydantic-settings",
    "fastapi",
    "uvicorn",
    "typer",
]


def _print_conversion_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly conversion error.

    Parameters
    ----------
    exc : Exception
        Exception raised during conversion.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    typer.echo(f"[red]✗ {type(exc).__name__}:[/red] {exc}", err=True)
    if debug:
        typer.echo("\n[dim]Traceback:[/dim]", err=True)
        typer.echo("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)), err=True)
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


def _build_settings(**overrides: Any) -> Settings:
    """Build settings from the environment plus non-empty CLI overrides."""
    from wav_converter.config import Settings

    return Settings(**{key: value for key, value in overrides.items() if value is not None})


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Show debug logs and full tracebacks."),
) -> None:
    """Initialize shared CLI state.

    Parameters
    ----------
    ctx : typer.Context
        Typer context object used to store shared state.
    debug : bool, default=False
        Whether to enable debug logging and error output.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"debug": debug}


# -----------------------------
# Commands
# -----------------------------
@app.command("convert")
def convert_cmd(
    ctx: typer.Context,
    source: str = typer.Argument(
        ..., help="Source object as container/name or absolute URL."
    ),
    target: str = typer.Argument(
        ..., help="Destination object as container/name or absolute URL."
    ),
    backend: str | None = typer.Option(
        None, "--backend", help="Storage backend: s3 or local."
    ),
    local_root: Path | None = typer.Option(
        None, "--local-root", help="Root directory for the local backend."
    ),
    endpoint_url: str | None = typer.Option(
        None, "--endpoint-url", help="Object-storage endpoint for container/name references."
    ),
    ffmpeg_binary: str | None = typer.Option(None, "--ffmpeg-binary", help=FFMPEG_HELP),
    timeout: float | None = typer.Option(None, "--timeout", min=0.001, help=TIMEOUT_HELP),
    no_validate: bool = typer.Option(False, "--no-validate", help=NO_VALIDATE_HELP),
) -> None:
    """Fetch, convert and store one audio object.

    Parameters
    ----------
    ctx : typer.Context
        Typer context containing global options.
    source : str
        Source reference.
    target : str
        Destination reference. A relative path is placed on the source's
        endpoint when the source is an absolute URL.
    """
    debug: bool = bool(ctx.obj.get("debug", False))

    try:
        settings = _build_settings(
            storage_backend=backend,
            local_root=local_root,
            endpoint_url=endpoint_url,
            ffmpeg_binary=ffmpeg_binary,
            transcode_timeout_seconds=timeout,
            validate_output=False if no_validate else None,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    from wav_converter.api import convert_object

    result = convert_object(source, target, settings=settings)
    if not result.success:
        typer.echo(f"[red]✗ {result.stage} failed:[/red] {result.message}", err=True)
        raise typer.Exit(code=result.exit_code or 1)
    typer.echo(f"[green]✓ Saved:[/green] {result.destination}")
    if debug:
        typer.echo(f"sha256={result.output_sha256} size={result.output_size_bytes}")


@app.command("transcode")
def transcode_cmd(
    ctx: typer.Context,
    input_path: Path = typer.Argument(
        ...,
        exists=True,
        readable=True,
        dir_okay=False,
        help="Local audio file to convert.",
    ),
    output_path: Path = typer.Argument(..., help="Where to write the .wav file."),
    ffmpeg_binary: str | None = typer.Option(None, "--ffmpeg-binary", help=FFMPEG_HELP),
    timeout: float | None = typer.Option(None, "--timeout", min=0.001, help=TIMEOUT_HELP),
    no_validate: bool = typer.Option(False, "--no-validate", help=NO_VALIDATE_HELP),
) -> None:
    """Convert a local audio file without touching object storage."""
    debug: bool = bool(ctx.obj.get("debug", False))

    try:
        from wav_converter.api import transcode_file

        settings = _build_settings(
            ffmpeg_binary=ffmpeg_binary,
            transcode_timeout_seconds=timeout,
            validate_output=False if no_validate else None,
        )
        out = transcode_file(input_path, output_path, settings=settings)
        typer.echo(f"[green]✓ Saved:[/green] {out}")
    except ConversionError as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))
    except Exception as exc:
        # Unexpected crash: still show a clean message; debug prints traceback.
        raise typer.Exit(code=_print_conversion_error(exc, debug))


@app.command("doctor")
def doctor_cmd(
    ffmpeg_binary: str = typer.Option("ffmpeg", "--ffmpeg-binary", help=FFMPEG_HELP),
) -> None:
    """Print toolchain availability and library versions."""
    typer.echo(f"Python: {sys.version.split()[0]}")

    resolved = shutil.which(ffmpeg_binary)
    if resolved is None:
        typer.echo(f"ffmpeg: <not found: {ffmpeg_binary}>")
    else:
        try:
            probe = subprocess.run(
                [resolved, "-hide_banner", "-version"],
                capture_output=True,
                text=True,
                timeout=10,
                check=False,
            )
            first_line = (probe.stdout.splitlines() or ["<no version output>"])[0]
        except (OSError, subprocess.TimeoutExpired) as exc:
            first_line = f"<unusable: {exc}>"
        typer.echo(f"ffmpeg: {resolved} ({first_line})")

    for package in DOCTOR_PACKAGES:
        try:
            typer.echo(f"{package}: {metadata.version(package)}")
        except metadata.PackageNotFoundError:
            typer.echo(f"{package}: <not installed>")


if __name__ == "__main__":
    app()
