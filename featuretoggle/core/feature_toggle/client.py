"""Feature Toggle Client Implementation.

Evaluates toggles stored as ``<environment>/<feature>.json`` objects and
manages their lifecycle. Every evaluation is a live read from the blob store.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Mapping, Optional, Union

from featuretoggle.core.config import ToggleConfiguration
from featuretoggle.core.errors import (
    ConfigurationError,
    DecodeError,
    FeatureToggleError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from featuretoggle.core.feature_toggle.config_store import ToggleConfigStore
from featuretoggle.core.feature_toggle.models import FeatureToggleConfig
from featuretoggle.core.feature_toggle.rollout import RandomizedRollout, decide_for_subject
from featuretoggle.core.storage.object_store import BlobStore, S3BlobStore

logger = logging.getLogger(__name__)

ToggleInput = Union[FeatureToggleConfig, Mapping[str, Any]]


class FeatureToggleClient:
    """Feature toggle client backed by a blob store."""

    def __init__(
        self,
        configuration: ToggleConfiguration,
        blob_store: Optional[BlobStore] = None,
        rollout: Optional[Callable[[int], bool]] = None,
    ):
        """Initialize feature toggle client.

        Args:
            configuration: Store location and environment holder
            blob_store: Storage backend; an S3 store is created on first use if omitted
            rollout: Percentage decision, defaults to a per-call random draw
        """
        self.configuration = configuration
        self._blob_store = blob_store
        self._config_store: Optional[ToggleConfigStore] = None
        self.rollout = rollout or RandomizedRollout()

    @property
    def config_store(self) -> ToggleConfigStore:
        if self._config_store is None:
            if self._blob_store is None:
                self._blob_store = S3BlobStore()
            self._config_store = ToggleConfigStore(self.configuration, self._blob_store)
        return self._config_store

    async def is_enabled(self, feature_name: str, subject: Optional[str] = None) -> bool:
        """Check if a feature toggle is enabled.

        Never raises: missing configuration, missing or malformed toggle data
        and storage failures all resolve to False.

        Args:
            feature_name: Name of the feature toggle
            subject: Optional stable identifier for sticky rollout

        Returns:
            True if the toggle is on and the rollout admits this call
        """
        try:
            return await self._evaluate(feature_name, subject)
        except ConfigurationError as e:
            logger.warning(
                "feature_toggle_not_configured",
                extra={"feature_name": feature_name, "error_code": e.code.value, "error": e.message},
            )
            return False
        except FeatureToggleError as e:
            logger.error(
                "feature_toggle_evaluation_failed",
                extra={"feature_name": feature_name, "error_code": e.code.value, "error": e.message},
            )
            return False
        except Exception:
            logger.exception("feature_toggle_evaluation_error", extra={"feature_name": feature_name})
            return False

    async def _evaluate(self, feature_name: str, subject: Optional[str]) -> bool:
        config = await self.get_feature_toggle_config(feature_name)
        if config is None:
            logger.debug("feature_toggle_not_found", extra={"feature_name": feature_name})
            return False
        if not config.is_enabled:
            return False
        if subject is not None:
            return decide_for_subject(config.percentage, feature_name, subject)
        return self.rollout(config.percentage)

    async def get_feature_toggle_config(self, feature_name: str) -> Optional[FeatureToggleConfig]:
        """Read a toggle config, or ``None`` when it does not exist.

        Raises ConfigurationError, ValidationError, StorageError or DecodeError.
        """
        _, environment = self.configuration.require()
        if not feature_name:
            raise ValidationError("feature toggle name must not be empty")

        raw = await self.config_store.get(environment, feature_name)
        if raw is None:
            return None
        try:
            return FeatureToggleConfig.from_json(raw)
        except DecodeError as e:
            e.context.setdefault("feature_name", feature_name)
            raise

    async def upsert_feature_toggle_config(self, config: Optional[ToggleInput]) -> bool:
        """Create or fully replace a toggle config."""
        _, environment = self.configuration.require()

        if config is None:
            raise ValidationError("feature toggle config must not be None")
        if isinstance(config, Mapping):
            try:
                config = FeatureToggleConfig.from_dict(config)
            except DecodeError as e:
                raise ValidationError(e.message, context=e.context) from e
        if not isinstance(config, FeatureToggleConfig):
            raise ValidationError(
                "feature toggle config has unsupported type",
                context={"type": type(config).__name__},
            )
        config.validate()

        try:
            payload = config.to_json()
        except (TypeError, ValueError) as e:
            logger.error("feature_toggle_encode_failed", extra={"feature_name": config.name})
            raise InternalError(f"Failed to encode feature toggle config: {e}") from e

        await self.config_store.put(environment, config.name, payload)
        logger.info(
            "feature_toggle_upserted",
            extra={
                "feature_name": config.name,
                "environment": environment,
                "enabled": config.is_enabled,
                "percentage": config.percentage,
            },
        )
        return True

    async def delete_feature_toggle_config(self, feature_name: str) -> bool:
        """Delete a toggle config; deleting a missing toggle succeeds."""
        _, environment = self.configuration.require()
        if not feature_name:
            raise ValidationError("feature toggle name must not be empty")

        await self.config_store.delete(environment, feature_name)
        logger.info(
            "feature_toggle_deleted",
            extra={"feature_name": feature_name, "environment": environment},
        )
        return True

    async def get_json(self, key: str) -> Any:
        """Read and decode any JSON document stored under the environment prefix."""
        _, environment = self.configuration.require()
        raw = await self.config_store.get_document(environment, key)
        if raw is None:
            raise NotFoundError(f"Document not found: {key}", context={"key": key})
        try:
            return json.loads(raw)
        except (UnicodeDecodeError, ValueError) as e:
            raise DecodeError(f"Document is not valid JSON: {e}", context={"key": key}) from e


# Global client instance
_configuration = ToggleConfiguration()
_client: Optional[FeatureToggleClient] = None


def get_feature_toggle_client() -> FeatureToggleClient:
    """Get global feature toggle client."""
    global _client
    if _client is None:
        _client = FeatureToggleClient(configuration=_configuration)
    return _client


def configure_feature_toggles(
    configuration: Optional[ToggleConfiguration] = None,
    blob_store: Optional[BlobStore] = None,
    rollout: Optional[Callable[[int], bool]] = None,
) -> FeatureToggleClient:
    """Configure and set the global feature toggle client."""
    global _client, _configuration
    if configuration is not None:
        _configuration = configuration
    _client = FeatureToggleClient(
        configuration=_configuration,
        blob_store=blob_store,
        rollout=rollout,
    )
    return _client


def reset_feature_toggle_client() -> None:
    """Drop the global client and its configuration."""
    global _client, _configuration
    _client = None
    _configuration = ToggleConfiguration()


def set_store_location(identifier: str) -> None:
    get_feature_toggle_client().configuration.set_store_location(identifier)


def set_environment(name: str) -> None:
    get_feature_toggle_client().configuration.set_environment(name)


async def is_enabled(feature_name: str, subject: Optional[str] = None) -> bool:
    """Check if a feature toggle is enabled (convenience function)."""
    return await get_feature_toggle_client().is_enabled(feature_name, subject)


async def get_feature_toggle_config(feature_name: str) -> Optional[FeatureToggleConfig]:
    return await get_feature_toggle_client().get_feature_toggle_config(feature_name)


async def upsert_feature_toggle_config(config: Optional[ToggleInput]) -> bool:
    return await get_feature_toggle_client().upsert_feature_toggle_config(config)


async def delete_feature_toggle_config(feature_name: str) -> bool:
    return await get_feature_toggle_client().delete_feature_toggle_config(feature_name)


async def get_json(key: str) -> Any:
    return await get_feature_toggle_client().get_json(key)


__all__ = [
    "FeatureToggleClient",
    "configure_feature_toggles",
    "delete_feature_toggle_config",
    "get_feature_toggle_client",
    "get_feature_toggle_config",
    "get_json",
    "is_enabled",
    "reset_feature_toggle_client",
    "set_environment",
    "set_store_location",
    "upsert_feature_toggle_config",
]
