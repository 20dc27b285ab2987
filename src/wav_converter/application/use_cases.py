"""Application use-cases orchestrating the conversion pipeline."""

from __future__ import annotations

import logging
import re
from pathlib import Path, PurePosixPath

from wav_converter.application.options import (
    CANONICAL_PROFILE,
    PipelineOptions,
    TranscodeProfile,
)
from wav_converter.application.ports import ObjectStore, Transcoder
from wav_converter.application.results import ConversionResult
from wav_converter.digest import digest_file
from wav_converter.errors import (
    BadRequestError,
    ConversionError,
    InternalError,
    PublicationError,
    RetrievalError,
    StorageError,
)
from wav_converter.infrastructure.workspace import workspace
from wav_converter.locator import (
    AbsoluteAddress,
    ContainerAddress,
    ResolvedObjectAddress,
    resolve,
    resolve_destination,
    split_absolute,
)
from wav_converter.validate import validate_wav_if_requested

logger = logging.getLogger(__name__)

_SUFFIX_PATTERN = re.compile(r"^\.[A-Za-z0-9]{1,10}$")


def input_suffix_for(address: ResolvedObjectAddress) -> str:
    """Return the source extension when it is safe to reuse as a file suffix."""
    if isinstance(address, AbsoluteAddress):
        try:
            _, location = split_absolute(address)
        except ConversionError:
            return ""
        name = location.name
    else:
        name = address.name
    suffix = PurePosixPath(name).suffix
    return suffix if _SUFFIX_PATTERN.match(suffix) else ""


def fetch_object(
    store: ObjectStore,
    address: ResolvedObjectAddress,
    destination: Path,
) -> None:
    """Use-case stage: copy the full source object into ``destination``."""
    logger.info("downloading %s", address)
    try:
        store.download(address, destination)
    except StorageError as exc:
        raise RetrievalError(f"could not retrieve '{address}': {exc}") from exc


def transcode_object(
    transcoder: Transcoder,
    input_path: Path,
    output_path: Path,
    *,
    profile: TranscodeProfile = CANONICAL_PROFILE,
    validate: bool = True,
) -> Path:
    """Use-case stage: transcode one local file and check the result."""
    out_path = transcoder.transcode(input_path, output_path, profile)
    validate_wav_if_requested(out_path, profile, validate)
    logger.info("transcoding succeeded")
    return out_path


def publish_object(
    store: ObjectStore,
    source: Path,
    address: ResolvedObjectAddress,
) -> None:
    """Use-case stage: store ``source`` at ``address``, overwriting it."""
    try:
        if isinstance(address, ContainerAddress) and not store.container_exists(
            address.container
        ):
            logger.info("creating missing container %s", address.container)
            store.create_container_if_absent(address.container)
        logger.info("uploading converted file to %s", address)
        store.upload(source, address)
    except StorageError as exc:
        raise PublicationError(f"could not publish '{address}': {exc}") from exc


def _execute(
    source_reference: str,
    destination_reference: str,
    store: ObjectStore,
    transcoder: Transcoder,
    profile: TranscodeProfile,
    options: PipelineOptions,
) -> ConversionResult:
    if not source_reference or not destination_reference:
        raise BadRequestError(
            "Please provide both a source reference and 'targetBlobPath'."
        )
    source = resolve(source_reference)
    destination = resolve_destination(destination_reference, source)

    with workspace(
        output_suffix=profile.extension,
        input_suffix=input_suffix_for(source),
        directory=options.workspace_dir,
    ) as ws:
        fetch_object(store, source, ws.input_path)
        out_path = transcode_object(
            transcoder,
            ws.input_path,
            ws.output_path,
            profile=profile,
            validate=options.validate_output,
        )
        publish_object(store, out_path, destination)
        output_sha = digest_file(out_path)
        output_size = out_path.stat().st_size

    logger.info("audio conversion completed: %s", destination)
    return ConversionResult.completed(
        str(destination),
        output_sha256=output_sha,
        output_size_bytes=output_size,
    )


def run_pipeline(
    *,
    source_reference: str,
    destination_reference: str,
    store: ObjectStore,
    transcoder: Transcoder,
    profile: TranscodeProfile = CANONICAL_PROFILE,
    options: PipelineOptions | None = None,
) -> ConversionResult:
    """Use-case: fetch, transcode and publish one audio object.

    Never raises; every failure is mapped onto a failed ``ConversionResult``.
    Scratch files are removed before this function returns.
    """
    try:
        return _execute(
            source_reference,
            destination_reference,
            store,
            transcoder,
            profile,
            options or PipelineOptions(),
        )
    except ConversionError as exc:
        logger.error("conversion failed at %s: %s", exc.stage, exc)
        return ConversionResult.failed(
            exc.stage, str(exc), exc.status_code, exc.exit_code
        )
    except Exception as exc:
        logger.exception("unexpected error during conversion")
        error = InternalError(f"internal error: {exc}")
        return ConversionResult.failed(
            error.stage, str(error), error.status_code, error.exit_code
        )
