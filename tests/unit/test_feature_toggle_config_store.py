"""Tests for ToggleConfigStore key derivation and storage mapping."""

import pytest

from featuretoggle.core.config import ToggleConfiguration
from featuretoggle.core.errors import ConfigurationError, StorageError, ValidationError
from featuretoggle.core.feature_toggle import ToggleConfigStore, build_key


class TestBuildKey:
    def test_lowercases_namespace(self):
        assert build_key("Prod", "checkout-v2") == "prod/checkout-v2.json"

    def test_feature_name_case_preserved(self):
        assert build_key("STAGING", "NewCheckout") == "staging/NewCheckout.json"


class TestToggleConfigStore:
    @pytest.fixture
    def store(self, configuration, blob_store):
        return ToggleConfigStore(configuration, blob_store)

    @pytest.mark.asyncio
    async def test_put_then_get(self, store, blob_store):
        await store.put("PROD", "checkout-v2", b"{}")

        assert blob_store.ops("put") == [("put", "toggle-bucket", "prod/checkout-v2.json")]
        assert blob_store.content_type("toggle-bucket", "prod/checkout-v2.json") == "application/json"
        assert await store.get("prod", "checkout-v2") == b"{}"

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, store):
        assert await store.get("prod", "missing") is None

    @pytest.mark.asyncio
    async def test_put_overwrites(self, store):
        await store.put("prod", "t", b"first")
        await store.put("prod", "t", b"second")
        assert await store.get("prod", "t") == b"second"

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, store, blob_store):
        await store.put("prod", "t", b"{}")
        await store.delete("prod", "t")
        await store.delete("prod", "t")

        assert await store.get("prod", "t") is None
        assert len(blob_store.ops("delete")) == 2

    @pytest.mark.asyncio
    async def test_namespaces_are_isolated(self, store):
        await store.put("staging", "t", b"staging")
        assert await store.get("prod", "t") is None

    @pytest.mark.asyncio
    async def test_backend_failure_wrapped(self, store, blob_store):
        blob_store.fail_with = ConnectionError("connection reset")

        with pytest.raises(StorageError, match="connection reset"):
            await store.get("prod", "t")
        with pytest.raises(StorageError):
            await store.put("prod", "t", b"{}")
        with pytest.raises(StorageError):
            await store.delete("prod", "t")

    @pytest.mark.asyncio
    async def test_storage_error_passes_through(self, store, blob_store):
        original = StorageError("access denied")
        blob_store.fail_with = original

        with pytest.raises(StorageError) as exc_info:
            await store.get("prod", "t")
        assert exc_info.value is original

    @pytest.mark.asyncio
    async def test_get_document(self, store, blob_store):
        await blob_store.put_object("toggle-bucket", "prod/settings/limits.json", b"[1]")
        assert await store.get_document("Prod", "settings/limits.json") == b"[1]"

    @pytest.mark.asyncio
    async def test_get_document_empty_key(self, store):
        with pytest.raises(ValidationError):
            await store.get_document("prod", "")

    @pytest.mark.asyncio
    async def test_requires_store_location(self, blob_store):
        store = ToggleConfigStore(ToggleConfiguration(environment="prod"), blob_store)

        with pytest.raises(ConfigurationError, match="store location not set"):
            await store.get("prod", "t")
        assert blob_store.calls == []
