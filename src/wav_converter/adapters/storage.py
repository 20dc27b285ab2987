"""Object-storage adapters implementing the ``ObjectStore`` port."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import threading
from pathlib import Path
from typing import TYPE_CHECKING

from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError

from wav_converter.errors import (
    InvalidReferenceError,
    ObjectNotFoundError,
    StorageError,
)
from wav_converter.locator import (
    AbsoluteAddress,
    ContainerAddress,
    ResolvedObjectAddress,
    split_absolute,
)

if TYPE_CHECKING:
    from boto3.session import Session
    from botocore.client import BaseClient
    from botocore.config import Config

logger = logging.getLogger(__name__)

WAV_CONTENT_TYPE = "audio/wav"
_MISSING_CODES = {"404", "NoSuchBucket", "NoSuchKey", "NotFound"}
_ALREADY_EXISTS_CODES = {"BucketAlreadyOwnedByYou", "BucketAlreadyExists"}


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class S3ObjectStore:
    """S3-compatible object store backed by boto3.

    Container addresses go to ``endpoint_url``; absolute addresses are read
    path-style (``scheme://host/bucket/key``) against their own host.
    """

    def __init__(
        self,
        session: Session,
        *,
        endpoint_url: str | None = None,
        region: str | None = None,
        client_config: Config | None = None,
    ) -> None:
        self._session = session
        self._endpoint_url = endpoint_url
        self._region = region
        self._client_config = client_config
        self._clients: dict[str | None, BaseClient] = {}
        self._lock = threading.Lock()

    def _client(self, endpoint_url: str | None) -> BaseClient:
        with self._lock:
            client = self._clients.get(endpoint_url)
            if client is None:
                client = self._session.client(
                    "s3",
                    endpoint_url=endpoint_url,
                    region_name=self._region,
                    config=self._client_config,
                )
                self._clients[endpoint_url] = client
            return client

    def _locate(self, address: ResolvedObjectAddress) -> tuple[BaseClient, str, str]:
        if isinstance(address, AbsoluteAddress):
            endpoint, location = split_absolute(address)
            return self._client(endpoint), location.container, location.name
        return self._client(self._endpoint_url), address.container, address.name

    def container_exists(self, container: str) -> bool:
        try:
            self._client(self._endpoint_url).head_bucket(Bucket=container)
        except ClientError as exc:
            if _error_code(exc) in _MISSING_CODES:
                return False
            raise StorageError(f"could not check bucket '{container}': {exc}") from exc
        except BotoCoreError as exc:
            raise StorageError(f"could not check bucket '{container}': {exc}") from exc
        return True

    def create_container_if_absent(self, container: str) -> None:
        params: dict[str, object] = {"Bucket": container}
        if self._region and self._region != "us-east-1":
            params["CreateBucketConfiguration"] = {"LocationConstraint": self._region}
        try:
            self._client(self._endpoint_url).create_bucket(**params)
        except ClientError as exc:
            if _error_code(exc) in _ALREADY_EXISTS_CODES:
                logger.info("bucket %s already exists", container)
                return
            raise StorageError(f"could not create bucket '{container}': {exc}") from exc
        except BotoCoreError as exc:
            raise StorageError(f"could not create bucket '{container}': {exc}") from exc
        logger.info("created bucket %s", container)

    def download(self, address: ResolvedObjectAddress, destination: Path) -> None:
        client, bucket, key = self._locate(address)
        try:
            client.download_file(Bucket=bucket, Key=key, Filename=str(destination))
        except ClientError as exc:
            if _error_code(exc) in _MISSING_CODES:
                raise ObjectNotFoundError(f"object '{address}' not found") from exc
            raise StorageError(f"could not download '{address}': {exc}") from exc
        except (BotoCoreError, Boto3Error) as exc:
            raise StorageError(f"could not download '{address}': {exc}") from exc

    def upload(self, source: Path, address: ResolvedObjectAddress) -> None:
        client, bucket, key = self._locate(address)
        try:
            client.upload_file(
                Filename=str(source),
                Bucket=bucket,
                Key=key,
                ExtraArgs={"ContentType": WAV_CONTENT_TYPE},
            )
        except (ClientError, BotoCoreError, Boto3Error) as exc:
            raise StorageError(f"could not upload '{address}': {exc}") from exc


class LocalObjectStore:
    """Filesystem-backed store: containers are directories under ``root``.

    The host of absolute addresses is ignored; only the path is used.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def _path(self, address: ResolvedObjectAddress | ContainerAddress) -> Path:
        if isinstance(address, AbsoluteAddress):
            _, address = split_absolute(address)
        return self._inside_root(Path(address.container) / address.name)

    def _inside_root(self, relative: Path) -> Path:
        root = self.root.resolve()
        candidate = (root / relative).resolve()
        if candidate != root and root not in candidate.parents:
            raise InvalidReferenceError(f"'{relative}' escapes the storage root")
        return candidate

    def container_exists(self, container: str) -> bool:
        return self._inside_root(Path(container)).is_dir()

    def create_container_if_absent(self, container: str) -> None:
        try:
            self._inside_root(Path(container)).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"could not create container '{container}': {exc}") from exc

    def download(self, address: ResolvedObjectAddress, destination: Path) -> None:
        path = self._path(address)
        if not path.is_file():
            raise ObjectNotFoundError(f"object '{address}' not found")
        try:
            shutil.copyfile(path, destination)
        except OSError as exc:
            raise StorageError(f"could not read '{address}': {exc}") from exc

    def upload(self, source: Path, address: ResolvedObjectAddress) -> None:
        path = self._path(address)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, staging = tempfile.mkstemp(dir=path.parent, prefix=".upload-")
            os.close(fd)
            try:
                shutil.copyfile(source, staging)
                os.replace(staging, path)
            except BaseException:
                Path(staging).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"could not write '{address}': {exc}") from exc
