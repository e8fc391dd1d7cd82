"""Feature Toggle System.

Provides runtime feature toggling with:
- Toggle configs stored per environment in object storage
- Percentage rollouts, random per call or sticky per subject
- Fail-closed evaluation
"""

from featuretoggle.core.feature_toggle.client import (
    FeatureToggleClient,
    configure_feature_toggles,
    delete_feature_toggle_config,
    get_feature_toggle_client,
    get_feature_toggle_config,
    get_json,
    is_enabled,
    reset_feature_toggle_client,
    set_environment,
    set_store_location,
    upsert_feature_toggle_config,
)
from featuretoggle.core.feature_toggle.config_store import ToggleConfigStore, build_key
from featuretoggle.core.feature_toggle.decorators import feature_toggle
from featuretoggle.core.feature_toggle.models import FeatureToggleConfig
from featuretoggle.core.feature_toggle.rollout import (
    RandomizedRollout,
    decide,
    decide_for_subject,
    percentage_bucket,
)

__all__ = [
    "FeatureToggleClient",
    "FeatureToggleConfig",
    "RandomizedRollout",
    "ToggleConfigStore",
    "build_key",
    "configure_feature_toggles",
    "decide",
    "decide_for_subject",
    "delete_feature_toggle_config",
    "feature_toggle",
    "get_feature_toggle_client",
    "get_feature_toggle_config",
    "get_json",
    "is_enabled",
    "percentage_bucket",
    "reset_feature_toggle_client",
    "set_environment",
    "set_store_location",
    "upsert_feature_toggle_config",
]
