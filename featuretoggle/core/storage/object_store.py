"""Key-object blob storage used to persist toggle configs.

Provides:
- ``BlobStore`` interface addressed by bucket + key
- AWS S3 / MinIO backend on boto3
- In-memory and local filesystem backends for tests and development

A missing object is reported as ``FileNotFoundError``; every other backend
failure is raised as ``StorageError``.
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import boto3
from botocore.client import BaseClient
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from featuretoggle.core.config import FeatureToggleSettings
from featuretoggle.core.errors import StorageError

logger = logging.getLogger(__name__)

# "404" is what botocore reports for a bodiless 404 response
_NOT_FOUND_CODES = {"NoSuchKey", "404"}


class BlobStore(ABC):
    """Abstract base class for blob stores."""

    @abstractmethod
    async def get_object(self, bucket: str, key: str) -> bytes:
        """Download an object. Raises FileNotFoundError when it does not exist."""
        pass

    @abstractmethod
    async def put_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> None:
        """Upload an object, replacing any existing one."""
        pass

    @abstractmethod
    async def delete_object(self, bucket: str, key: str) -> None:
        """Delete an object. Deleting a missing key succeeds."""
        pass


class InMemoryBlobStore(BlobStore):
    """In-memory storage for testing."""

    def __init__(self) -> None:
        self._objects: Dict[Tuple[str, str], bytes] = {}
        self._content_types: Dict[Tuple[str, str], str] = {}
        self._lock = threading.Lock()

    async def get_object(self, bucket: str, key: str) -> bytes:
        with self._lock:
            if (bucket, key) not in self._objects:
                raise FileNotFoundError(f"Object not found: {bucket}/{key}")
            return self._objects[(bucket, key)]

    async def put_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> None:
        with self._lock:
            self._objects[(bucket, key)] = bytes(data)
            self._content_types[(bucket, key)] = content_type or "application/octet-stream"

    async def delete_object(self, bucket: str, key: str) -> None:
        with self._lock:
            self._objects.pop((bucket, key), None)
            self._content_types.pop((bucket, key), None)

    def content_type(self, bucket: str, key: str) -> Optional[str]:
        return self._content_types.get((bucket, key))

    def keys(self, bucket: str) -> list[str]:
        with self._lock:
            return sorted(k for b, k in self._objects if b == bucket)


def _write_bytes_atomic(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path: Optional[str] = None
    try:
        tmp_fd, tmp_path = tempfile.mkstemp(
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
        with os.fdopen(tmp_fd, "wb") as f:
            f.write(data)
        Path(tmp_path).replace(path)
        tmp_path = None
    finally:
        if tmp_path is not None:
            Path(tmp_path).unlink(missing_ok=True)


class LocalFileBlobStore(BlobStore):
    """Local filesystem storage, one directory per bucket."""

    def __init__(self, base_path: str | Path):
        self._base_path = Path(base_path)
        self._base_path.mkdir(parents=True, exist_ok=True)

    def _get_path(self, bucket: str, key: str) -> Path:
        rel = Path(bucket) / key
        if rel.is_absolute() or ".." in rel.parts:
            raise StorageError("Invalid object path", context={"bucket": bucket, "key": key})
        return self._base_path / rel

    async def get_object(self, bucket: str, key: str) -> bytes:
        path = self._get_path(bucket, key)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            raise FileNotFoundError(f"Object not found: {bucket}/{key}") from None
        except OSError as e:
            raise StorageError(
                f"Failed to read object: {e}", context={"bucket": bucket, "key": key}
            ) from e

    async def put_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: Optional[str] = None,  # noqa: ARG002
    ) -> None:
        path = self._get_path(bucket, key)
        try:
            await asyncio.to_thread(_write_bytes_atomic, path, data)
        except OSError as e:
            raise StorageError(
                f"Failed to write object: {e}", context={"bucket": bucket, "key": key}
            ) from e

    async def delete_object(self, bucket: str, key: str) -> None:
        path = self._get_path(bucket, key)
        try:
            await asyncio.to_thread(path.unlink, True)
        except OSError as e:
            raise StorageError(
                f"Failed to delete object: {e}", context={"bucket": bucket, "key": key}
            ) from e


def _is_not_found(error: ClientError) -> bool:
    """Missing key only; NoSuchBucket and other 404s stay storage failures."""
    code = str(error.response.get("Error", {}).get("Code", ""))
    if code:
        return code in _NOT_FOUND_CODES
    return error.response.get("ResponseMetadata", {}).get("HTTPStatusCode") == 404


class S3BlobStore(BlobStore):
    """AWS S3 compatible storage (S3, MinIO).

    Retries, timeouts and credentials belong to the boto3 client; pass a
    preconfigured ``client`` or a ``botocore.config.Config`` to tune them.
    """

    def __init__(
        self,
        client: Optional[BaseClient] = None,
        endpoint_url: Optional[str] = None,
        region: Optional[str] = None,
        config: Optional[Config] = None,
    ):
        self.client: Any = client or boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            region_name=region,
            config=config,
        )

    async def get_object(self, bucket: str, key: str) -> bytes:
        def _get() -> bytes:
            resp = self.client.get_object(Bucket=bucket, Key=key)
            body = resp.get("Body")
            if body is None:
                return b""
            try:
                return body.read()
            finally:
                body.close()

        try:
            return await asyncio.to_thread(_get)
        except ClientError as e:
            if _is_not_found(e):
                raise FileNotFoundError(f"Object not found: {bucket}/{key}") from e
            raise StorageError(
                f"S3 get_object failed: {e}", context={"bucket": bucket, "key": key}
            ) from e
        except BotoCoreError as e:
            raise StorageError(
                f"S3 get_object failed: {e}", context={"bucket": bucket, "key": key}
            ) from e

    async def put_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> None:
        def _put() -> None:
            self.client.put_object(
                Bucket=bucket,
                Key=key,
                Body=data,
                ContentType=content_type or "application/octet-stream",
            )

        try:
            await asyncio.to_thread(_put)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(
                f"S3 put_object failed: {e}", context={"bucket": bucket, "key": key}
            ) from e

    async def delete_object(self, bucket: str, key: str) -> None:
        # S3 answers 204 for missing keys; a NoSuchKey from compatible stores is
        # treated the same way.
        def _del() -> None:
            self.client.delete_object(Bucket=bucket, Key=key)

        try:
            await asyncio.to_thread(_del)
        except ClientError as e:
            if _is_not_found(e):
                return
            raise StorageError(
                f"S3 delete_object failed: {e}", context={"bucket": bucket, "key": key}
            ) from e
        except BotoCoreError as e:
            raise StorageError(
                f"S3 delete_object failed: {e}", context={"bucket": bucket, "key": key}
            ) from e


def create_blob_store(settings: FeatureToggleSettings) -> BlobStore:
    """Create a blob store based on settings."""
    backend = (settings.FEATURE_TOGGLE_STORE_BACKEND or "").strip().lower()
    if backend == "s3":
        return S3BlobStore(
            endpoint_url=settings.FEATURE_TOGGLE_S3_ENDPOINT,
            region=settings.FEATURE_TOGGLE_S3_REGION,
        )
    if backend == "local":
        return LocalFileBlobStore(settings.FEATURE_TOGGLE_LOCAL_DIR)
    if backend == "memory":
        return InMemoryBlobStore()
    raise ValueError(f"Unknown FEATURE_TOGGLE_STORE_BACKEND: {settings.FEATURE_TOGGLE_STORE_BACKEND}")


__all__ = [
    "BlobStore",
    "InMemoryBlobStore",
    "LocalFileBlobStore",
    "S3BlobStore",
    "create_blob_store",
]
