"""Transport-neutral request handling shared by the HTTP and CLI surfaces."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from pydantic import ValidationError

from wav_converter.api import convert_object
from wav_converter.application.ports import ObjectStore, Transcoder
from wav_converter.application.results import ConversionResult
from wav_converter.config import Settings
from wav_converter.errors import BadRequestError
from wav_converter.schemas import ConversionRequestPayload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionRequest:
    """Normalized conversion request.

    Parameters
    ----------
    source_reference : str
        ``container/name`` path or absolute URL of the source object.
    destination_reference : str
        ``container/name`` path or absolute URL of the WAV destination.
    """

    source_reference: str
    destination_reference: str


def _describe(exc: ValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = str(error.get("msg", "invalid value"))
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages)


def parse_request(payload: Mapping[str, object]) -> ConversionRequest:
    """Validate a raw payload into a ``ConversionRequest``.

    Raises
    ------
    BadRequestError
        If required fields are missing, empty, or of the wrong type.
    """
    try:
        parsed = ConversionRequestPayload.model_validate(dict(payload))
    except ValidationError as exc:
        raise BadRequestError(f"Invalid conversion request: {_describe(exc)}") from exc
    return ConversionRequest(
        source_reference=parsed.source_reference,
        destination_reference=parsed.destination_reference,
    )


def handle_payload(
    payload: Mapping[str, object],
    *,
    settings: Settings,
    store: ObjectStore | None = None,
    transcoder: Transcoder | None = None,
) -> ConversionResult:
    """Validate ``payload`` and run one conversion.

    Validation failures short-circuit before any pipeline stage runs.
    """
    try:
        request = parse_request(payload)
    except BadRequestError as exc:
        logger.warning("rejected conversion request: %s", exc)
        return ConversionResult.failed(
            exc.stage, str(exc), exc.status_code, exc.exit_code
        )
    logger.info(
        "converting %s -> %s",
        request.source_reference,
        request.destination_reference,
    )
    return convert_object(
        request.source_reference,
        request.destination_reference,
        settings=settings,
        store=store,
        transcoder=transcoder,
    )
