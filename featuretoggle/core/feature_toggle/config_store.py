"""Config store adapter: toggle name + environment to blob store key."""

from __future__ import annotations

import logging
from typing import Optional

from featuretoggle.core.config import ToggleConfiguration
from featuretoggle.core.errors import StorageError, ValidationError
from featuretoggle.core.storage.object_store import BlobStore

logger = logging.getLogger(__name__)

CONTENT_TYPE_JSON = "application/json"


def build_prefix(namespace: str) -> str:
    return namespace.lower() + "/"


def build_key(namespace: str, feature_name: str) -> str:
    """Storage key for a toggle: ``<lowercased-namespace>/<feature_name>.json``."""
    return build_prefix(namespace) + feature_name + ".json"


class ToggleConfigStore:
    """Reads and writes toggle configs in the configured bucket."""

    def __init__(self, configuration: ToggleConfiguration, blob_store: BlobStore):
        self.configuration = configuration
        self.blob_store = blob_store

    def _bucket(self) -> str:
        bucket, _ = self.configuration.require()
        return bucket

    async def _read(self, key: str) -> Optional[bytes]:
        bucket = self._bucket()
        try:
            data = await self.blob_store.get_object(bucket, key)
        except FileNotFoundError:
            logger.debug("feature_toggle_object_missing", extra={"bucket": bucket, "key": key})
            return None
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(
                f"Failed to read {key}: {e}", context={"bucket": bucket, "key": key}
            ) from e
        return data

    async def get(self, namespace: str, feature_name: str) -> Optional[bytes]:
        """Fetch raw config bytes; ``None`` when the object does not exist."""
        return await self._read(build_key(namespace, feature_name))

    async def get_document(self, namespace: str, key: str) -> Optional[bytes]:
        """Fetch any object under the namespace prefix."""
        if not key:
            raise ValidationError("document key must not be empty")
        return await self._read(build_prefix(namespace) + key)

    async def put(self, namespace: str, feature_name: str, data: bytes) -> None:
        bucket = self._bucket()
        key = build_key(namespace, feature_name)
        try:
            await self.blob_store.put_object(bucket, key, data, content_type=CONTENT_TYPE_JSON)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(
                f"Failed to write {key}: {e}", context={"bucket": bucket, "key": key}
            ) from e
        logger.info(
            "feature_toggle_object_written",
            extra={"bucket": bucket, "key": key, "size": len(data)},
        )

    async def delete(self, namespace: str, feature_name: str) -> None:
        bucket = self._bucket()
        key = build_key(namespace, feature_name)
        try:
            await self.blob_store.delete_object(bucket, key)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(
                f"Failed to delete {key}: {e}", context={"bucket": bucket, "key": key}
            ) from e
        logger.info("feature_toggle_object_deleted", extra={"bucket": bucket, "key": key})


__all__ = [
    "CONTENT_TYPE_JSON",
    "ToggleConfigStore",
    "build_key",
    "build_prefix",
]
