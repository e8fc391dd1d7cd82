"""Namespaced feature toggles with percentage rollout, stored in object storage."""

from featuretoggle.core.config import FeatureToggleSettings, ToggleConfiguration
from featuretoggle.core.errors import (
    ConfigurationError,
    DecodeError,
    FeatureToggleError,
    InternalError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from featuretoggle.core.feature_toggle import (
    FeatureToggleClient,
    FeatureToggleConfig,
    configure_feature_toggles,
    delete_feature_toggle_config,
    feature_toggle,
    get_feature_toggle_client,
    get_feature_toggle_config,
    get_json,
    is_enabled,
    set_environment,
    set_store_location,
    upsert_feature_toggle_config,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "DecodeError",
    "FeatureToggleClient",
    "FeatureToggleConfig",
    "FeatureToggleError",
    "FeatureToggleSettings",
    "InternalError",
    "NotFoundError",
    "StorageError",
    "ToggleConfiguration",
    "ValidationError",
    "configure_feature_toggles",
    "delete_feature_toggle_config",
    "feature_toggle",
    "get_feature_toggle_client",
    "get_feature_toggle_config",
    "get_json",
    "is_enabled",
    "set_environment",
    "set_store_location",
    "upsert_feature_toggle_config",
]
