"""Tests for the in-memory and local filesystem blob stores and the factory."""

import pytest

from featuretoggle.core.config import FeatureToggleSettings
from featuretoggle.core.errors import StorageError
from featuretoggle.core.storage import (
    InMemoryBlobStore,
    LocalFileBlobStore,
    S3BlobStore,
    create_blob_store,
)


class TestInMemoryBlobStore:
    @pytest.mark.asyncio
    async def test_round_trip_and_missing(self):
        store = InMemoryBlobStore()
        await store.put_object("b", "prod/t.json", b"{}", content_type="application/json")

        assert await store.get_object("b", "prod/t.json") == b"{}"
        assert store.content_type("b", "prod/t.json") == "application/json"
        with pytest.raises(FileNotFoundError):
            await store.get_object("other-bucket", "prod/t.json")

    @pytest.mark.asyncio
    async def test_delete_missing_is_noop(self):
        store = InMemoryBlobStore()
        await store.delete_object("b", "prod/missing.json")
        assert store.keys("b") == []


class TestLocalFileBlobStore:
    @pytest.mark.asyncio
    async def test_put_get_delete(self, tmp_path):
        store = LocalFileBlobStore(tmp_path)
        await store.put_object("toggles", "prod/t.json", b'{"Name":"t"}')

        assert (tmp_path / "toggles" / "prod" / "t.json").read_bytes() == b'{"Name":"t"}'
        assert await store.get_object("toggles", "prod/t.json") == b'{"Name":"t"}'

        await store.delete_object("toggles", "prod/t.json")
        with pytest.raises(FileNotFoundError):
            await store.get_object("toggles", "prod/t.json")

    @pytest.mark.asyncio
    async def test_overwrite(self, tmp_path):
        store = LocalFileBlobStore(tmp_path)
        await store.put_object("toggles", "prod/t.json", b"one")
        await store.put_object("toggles", "prod/t.json", b"two")
        assert await store.get_object("toggles", "prod/t.json") == b"two"
        assert [p.name for p in (tmp_path / "toggles" / "prod").iterdir()] == ["t.json"]

    @pytest.mark.asyncio
    async def test_delete_missing_is_noop(self, tmp_path):
        store = LocalFileBlobStore(tmp_path)
        await store.delete_object("toggles", "prod/missing.json")

    @pytest.mark.asyncio
    async def test_path_traversal_rejected(self, tmp_path):
        store = LocalFileBlobStore(tmp_path / "root")
        with pytest.raises(StorageError, match="Invalid object path"):
            await store.put_object("toggles", "../../escape.json", b"{}")


class TestCreateBlobStore:
    def test_memory(self):
        settings = FeatureToggleSettings(_env_file=None, FEATURE_TOGGLE_STORE_BACKEND="memory")
        assert isinstance(create_blob_store(settings), InMemoryBlobStore)

    def test_local(self, tmp_path):
        settings = FeatureToggleSettings(
            _env_file=None,
            FEATURE_TOGGLE_STORE_BACKEND="local",
            FEATURE_TOGGLE_LOCAL_DIR=str(tmp_path),
        )
        assert isinstance(create_blob_store(settings), LocalFileBlobStore)

    def test_s3(self):
        settings = FeatureToggleSettings(
            _env_file=None,
            FEATURE_TOGGLE_STORE_BACKEND="S3",
            FEATURE_TOGGLE_S3_REGION="us-east-1",
            FEATURE_TOGGLE_S3_ENDPOINT="http://localhost:9000",
        )
        store = create_blob_store(settings)
        assert isinstance(store, S3BlobStore)
        assert store.client.meta.endpoint_url == "http://localhost:9000"

    def test_unknown_backend(self):
        settings = FeatureToggleSettings(_env_file=None, FEATURE_TOGGLE_STORE_BACKEND="redis")
        with pytest.raises(ValueError, match="Unknown FEATURE_TOGGLE_STORE_BACKEND"):
            create_blob_store(settings)
