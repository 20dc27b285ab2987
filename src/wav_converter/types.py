"""Shared type aliases for converter modules."""

from __future__ import annotations

from typing import Literal

type AddressMode = Literal["container", "absolute"]
type StorageBackend = Literal["s3", "local"]
type StageName = Literal[
    "validation",
    "retrieval",
    "transcode",
    "publication",
    "internal",
]
