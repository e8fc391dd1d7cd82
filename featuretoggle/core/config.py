"""Process configuration for feature toggles.

``ToggleConfiguration`` holds the store location (bucket) and the active
environment. It is passed explicitly to the client; nothing here reads the
process environment unless the embedding application asks for it through
``FeatureToggleSettings``.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from pydantic_settings import BaseSettings

from featuretoggle.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


class FeatureToggleSettings(BaseSettings):
    FEATURE_TOGGLE_BUCKET: str = ""
    APP_ENV: str = ""
    LOG_LEVEL: str = "INFO"

    # Blob store backend (s3|local|memory)
    FEATURE_TOGGLE_STORE_BACKEND: str = "s3"
    FEATURE_TOGGLE_S3_ENDPOINT: Optional[str] = None
    FEATURE_TOGGLE_S3_REGION: Optional[str] = None
    FEATURE_TOGGLE_LOCAL_DIR: str = "data/feature_toggles"

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore",
    }


_settings_cache: Optional[FeatureToggleSettings] = None


def get_settings() -> FeatureToggleSettings:
    global _settings_cache
    if _settings_cache is None:
        _settings_cache = FeatureToggleSettings()
    return _settings_cache


class ToggleConfiguration:
    """Store location and environment shared by every toggle operation.

    Values are meant to be written once at startup. Setting the same value
    again is a no-op; changing a value after the configuration has served a
    call raises ``ConfigurationError``.
    """

    def __init__(
        self,
        store_location: Optional[str] = None,
        environment: Optional[str] = None,
    ):
        self._store_location: Optional[str] = None
        self._environment: Optional[str] = None
        self._in_use = False
        if store_location is not None:
            self.set_store_location(store_location)
        if environment is not None:
            self.set_environment(environment)

    @classmethod
    def from_settings(cls, settings: FeatureToggleSettings) -> "ToggleConfiguration":
        """Build a configuration from loaded settings, skipping unset values."""
        return cls(
            store_location=settings.FEATURE_TOGGLE_BUCKET or None,
            environment=settings.APP_ENV or None,
        )

    @property
    def store_location(self) -> Optional[str]:
        return self._store_location

    @property
    def environment(self) -> Optional[str]:
        return self._environment

    @property
    def is_configured(self) -> bool:
        return bool(self._store_location) and bool(self._environment)

    def set_store_location(self, identifier: str) -> None:
        self._store_location = self._checked_update(
            "store location", self._store_location, identifier
        )

    def set_environment(self, name: str) -> None:
        self._environment = self._checked_update("environment", self._environment, name)

    def _checked_update(self, label: str, current: Optional[str], value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError(f"{label} must not be empty")
        if current == value:
            return current
        if self._in_use and current is not None:
            raise ConfigurationError(
                f"{label} cannot change after first use",
                context={"current": current, "requested": value},
            )
        logger.info("feature_toggle_configuration_set", extra={"setting": label, "value": value})
        return value

    def require(self) -> Tuple[str, str]:
        """Return ``(store_location, environment)`` or raise if either is unset."""
        if not self._store_location:
            raise ConfigurationError("store location not set")
        if not self._environment:
            raise ConfigurationError("environment not set")
        self._in_use = True
        return self._store_location, self._environment

    def __repr__(self) -> str:
        return (
            f"ToggleConfiguration(store_location={self._store_location!r}, "
            f"environment={self._environment!r})"
        )


__all__ = [
    "FeatureToggleSettings",
    "ToggleConfiguration",
    "get_settings",
]
