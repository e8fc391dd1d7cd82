import os
from typing import List, Optional, Tuple

import pytest

from featuretoggle.core.config import ToggleConfiguration
from featuretoggle.core.feature_toggle import client as toggle_client
from featuretoggle.core.storage.object_store import InMemoryBlobStore


# List of environment variables that may be modified by tests
_ENV_VARS_TO_ISOLATE = [
    "FEATURE_TOGGLE_BUCKET",
    "APP_ENV",
    "LOG_LEVEL",
    "FEATURE_TOGGLE_STORE_BACKEND",
    "FEATURE_TOGGLE_S3_ENDPOINT",
    "FEATURE_TOGGLE_S3_REGION",
    "FEATURE_TOGGLE_LOCAL_DIR",
]


@pytest.fixture(autouse=True)
def env_isolation():
    """Isolate environment variables between tests."""
    backup = {k: os.environ.get(k) for k in _ENV_VARS_TO_ISOLATE}
    try:
        yield
    finally:
        for k, v in backup.items():
            if v is None:
                os.environ.pop(k, None)
            else:
                os.environ[k] = v


@pytest.fixture(autouse=True)
def toggle_client_isolation():
    """Reset the global feature toggle client between tests."""
    toggle_client.reset_feature_toggle_client()
    try:
        yield
    finally:
        toggle_client.reset_feature_toggle_client()


class RecordingBlobStore(InMemoryBlobStore):
    """In-memory blob store that records every call and can be made to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: List[Tuple[str, str, str]] = []
        self.fail_with: Optional[Exception] = None

    def _record(self, op: str, bucket: str, key: str) -> None:
        self.calls.append((op, bucket, key))
        if self.fail_with is not None:
            raise self.fail_with

    async def get_object(self, bucket, key):
        self._record("get", bucket, key)
        return await super().get_object(bucket, key)

    async def put_object(self, bucket, key, data, content_type=None):
        self._record("put", bucket, key)
        await super().put_object(bucket, key, data, content_type)

    async def delete_object(self, bucket, key):
        self._record("delete", bucket, key)
        await super().delete_object(bucket, key)

    def ops(self, op: str) -> List[Tuple[str, str, str]]:
        return [c for c in self.calls if c[0] == op]


@pytest.fixture
def blob_store() -> RecordingBlobStore:
    return RecordingBlobStore()


@pytest.fixture
def configuration() -> ToggleConfiguration:
    return ToggleConfiguration(store_location="toggle-bucket", environment="prod")
