"""Error taxonomy for the audio conversion pipeline."""

from __future__ import annotations

from wav_converter.types import StageName


class ConversionError(Exception):
    """Base error for conversion failures surfaced to callers.

    Attributes
    ----------
    status_code : int
        HTTP status used by transport layers.
    exit_code : int
        Process exit code used by the CLI.
    stage : str
        Pipeline stage the error belongs to.
    """

    status_code: int = 500
    exit_code: int = 1
    stage: StageName = "internal"


class BadRequestError(ConversionError):
    """Request payload is missing required fields or is malformed."""

    status_code = 400
    exit_code = 2
    stage = "validation"


class InvalidReferenceError(ConversionError):
    """Source or destination reference cannot be resolved."""

    status_code = 400
    exit_code = 2
    stage = "validation"


class StorageError(ConversionError):
    """Object-storage operation failed inside an adapter."""


class ObjectNotFoundError(StorageError):
    """Requested object does not exist."""


class RetrievalError(ConversionError):
    """Source object could not be fetched."""

    exit_code = 3
    stage = "retrieval"


class TranscodeLaunchError(ConversionError):
    """Transcoder process could not be started."""

    exit_code = 4
    stage = "transcode"


class TranscodeError(ConversionError):
    """Transcoder ran but did not produce a valid output."""

    status_code = 400
    exit_code = 4
    stage = "transcode"

    def __init__(self, message: str, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr = stderr


class TranscodeTimeoutError(TranscodeError):
    """Transcoder exceeded its deadline and was killed."""

    status_code = 500


class PublicationError(ConversionError):
    """Converted object could not be stored at the destination."""

    exit_code = 5
    stage = "publication"


class InternalError(ConversionError):
    """Unanticipated fault caught at the pipeline boundary."""
