"""Feature toggle config model and its persisted JSON form."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from featuretoggle.core.errors import DecodeError, ValidationError

MIN_PERCENTAGE = 0
MAX_PERCENTAGE = 100

# Persisted key names, in write order
_FIELD_NAME = "Name"
_FIELD_ENABLED = "IsEnabled"
_FIELD_PERCENTAGE = "Percentage"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _lookup(data: Mapping[str, Any], field: str, default: Any) -> Any:
    """Exact key first, then a case-insensitive match; ``null`` reads as the default."""
    if field in data:
        value = data[field]
    else:
        folded = field.casefold()
        value = next(
            (v for k, v in data.items() if isinstance(k, str) and k.casefold() == folded),
            None,
        )
    return default if value is None else value


@dataclass
class FeatureToggleConfig:
    """Feature toggle definition.

    ``is_enabled`` is the master switch. When it is on, ``percentage`` is the
    share of evaluations (0-100) that resolve to enabled.
    """

    name: str
    is_enabled: bool = False
    percentage: int = 0

    def validate(self) -> None:
        """Check write-time invariants, raising ValidationError on failure."""
        if not isinstance(self.name, str) or not self.name:
            raise ValidationError("feature toggle name must not be empty")
        if not isinstance(self.is_enabled, bool):
            raise ValidationError(
                "feature toggle is_enabled must be a boolean",
                context={"name": self.name},
            )
        if not _is_int(self.percentage) or not (
            MIN_PERCENTAGE <= self.percentage <= MAX_PERCENTAGE
        ):
            raise ValidationError(
                "feature toggle percentage must be between 0 and 100",
                context={"name": self.name, "percentage": self.percentage},
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            _FIELD_NAME: self.name,
            _FIELD_ENABLED: self.is_enabled,
            _FIELD_PERCENTAGE: self.percentage,
        }

    def to_json(self) -> bytes:
        """Canonical persisted form: compact JSON, fixed key order."""
        return json.dumps(
            self.to_dict(), separators=(",", ":"), ensure_ascii=False
        ).encode("utf-8")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FeatureToggleConfig":
        """Create from the persisted mapping.

        Keys match case-insensitively. Missing or ``null`` fields default to
        zero values; wrongly typed fields and out-of-range percentages raise
        DecodeError.
        """
        if not isinstance(data, Mapping):
            raise DecodeError(
                "feature toggle config must be a JSON object",
                context={"type": type(data).__name__},
            )

        name = _lookup(data, _FIELD_NAME, "")
        is_enabled = _lookup(data, _FIELD_ENABLED, False)
        percentage = _lookup(data, _FIELD_PERCENTAGE, 0)

        if not isinstance(name, str):
            raise DecodeError(f"{_FIELD_NAME} must be a string")
        if not isinstance(is_enabled, bool):
            raise DecodeError(f"{_FIELD_ENABLED} must be a boolean", context={"name": name})
        if not _is_int(percentage):
            raise DecodeError(f"{_FIELD_PERCENTAGE} must be an integer", context={"name": name})
        if not MIN_PERCENTAGE <= percentage <= MAX_PERCENTAGE:
            raise DecodeError(
                f"{_FIELD_PERCENTAGE} out of range",
                context={"name": name, "percentage": percentage},
            )
        return cls(name=name, is_enabled=is_enabled, percentage=percentage)

    @classmethod
    def from_json(cls, raw: bytes | str) -> "FeatureToggleConfig":
        try:
            data = json.loads(raw)
        except (UnicodeDecodeError, ValueError) as e:
            raise DecodeError(f"feature toggle config is not valid JSON: {e}") from e
        return cls.from_dict(data)


__all__ = [
    "FeatureToggleConfig",
    "MAX_PERCENTAGE",
    "MIN_PERCENTAGE",
]
