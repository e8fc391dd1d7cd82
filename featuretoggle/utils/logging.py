"""Structured logging setup for feature toggle consumers.

The library only emits records; applications that want JSON lines call
``setup_logging`` once at startup.
"""

import json
import logging
import sys
from typing import Optional, Union

from featuretoggle.core.config import get_settings

# Structured fields emitted through ``extra=`` by the toggle modules
_STRUCTURED_FIELDS = [
    "feature_name",
    "environment",
    "bucket",
    "key",
    "size",
    "enabled",
    "percentage",
    "error_code",
    "error",
    "setting",
    "value",
]


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        data = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        for attr in _STRUCTURED_FIELDS:
            if hasattr(record, attr):
                data[attr] = getattr(record, attr)
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False, default=str)


def setup_logging(level: Optional[Union[int, str]] = None) -> None:
    """Install a JSON handler on the root logger.

    ``level`` defaults to the ``LOG_LEVEL`` setting.
    """
    if level is None:
        level = get_settings().LOG_LEVEL
    root = logging.getLogger()
    root.setLevel(level.upper() if isinstance(level, str) else level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    root.handlers = [handler]
