"""Error taxonomy for feature toggle evaluation and mutation.

Evaluation never raises (see ``FeatureToggleClient.is_enabled``); these types
surface from mutations, the diagnostic read API and the storage boundary.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"  # bucket/environment not set
    VALIDATION_FAILED = "VALIDATION_FAILED"  # malformed toggle config input
    STORAGE_ERROR = "STORAGE_ERROR"  # backend transport/permission failure
    DECODE_FAILURE = "DECODE_FAILURE"  # stored bytes are not a valid config
    DATA_NOT_FOUND = "DATA_NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class FeatureToggleError(Exception):
    """Base class for all feature toggle errors."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.context:
            result["context"] = self.context
        return result


class ConfigurationError(FeatureToggleError):
    code = ErrorCode.CONFIGURATION_ERROR


class ValidationError(FeatureToggleError):
    code = ErrorCode.VALIDATION_FAILED


class StorageError(FeatureToggleError):
    code = ErrorCode.STORAGE_ERROR


class DecodeError(FeatureToggleError):
    code = ErrorCode.DECODE_FAILURE


class NotFoundError(FeatureToggleError):
    code = ErrorCode.DATA_NOT_FOUND


class InternalError(FeatureToggleError):
    code = ErrorCode.INTERNAL_ERROR


__all__ = [
    "ErrorCode",
    "FeatureToggleError",
    "ConfigurationError",
    "ValidationError",
    "StorageError",
    "DecodeError",
    "NotFoundError",
    "InternalError",
]
