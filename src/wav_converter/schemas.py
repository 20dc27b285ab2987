"""Pydantic schemas for runtime validation of conversion payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ConversionRequestPayload(BaseModel):
    """Validated conversion request.

    ``sourceBlobUrl`` and ``sourceBlobPath`` are aliases for the same field;
    the URL form wins when both are sent.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    source_blob_url: str | None = Field(default=None, alias="sourceBlobUrl")
    source_blob_path: str | None = Field(default=None, alias="sourceBlobPath")
    target_blob_path: str | None = Field(default=None, alias="targetBlobPath")

    @model_validator(mode="after")
    def _require_references(self) -> ConversionRequestPayload:
        if not self.source_reference:
            raise ValueError("'sourceBlobUrl' or 'sourceBlobPath' is required")
        if not (self.target_blob_path or "").strip():
            raise ValueError("'targetBlobPath' is required")
        return self

    @property
    def source_reference(self) -> str:
        for value in (self.source_blob_url, self.source_blob_path):
            if value and value.strip():
                return value.strip()
        return ""

    @property
    def destination_reference(self) -> str:
        return (self.target_blob_path or "").strip()


class ConversionResponse(BaseModel):
    """Successful conversion response payload."""

    model_config = ConfigDict(extra="forbid")

    status: str
    message: str
    destination: str
    output_sha256: str
    output_size_bytes: int


class HealthResponse(BaseModel):
    """Health response payload."""

    model_config = ConfigDict(extra="forbid")

    status: str


class ReadyResponse(BaseModel):
    """Readiness response payload."""

    model_config = ConfigDict(extra="forbid")

    status: str
