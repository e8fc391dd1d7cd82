"""Feature Toggle Decorators."""

from __future__ import annotations

import functools
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .client import FeatureToggleClient, get_feature_toggle_client

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def feature_toggle(
    feature_name: str,
    fallback: Optional[Callable[..., Awaitable[Any]]] = None,
    client: Optional[FeatureToggleClient] = None,
    subject_extractor: Optional[Callable[..., Optional[str]]] = None,
) -> Callable[[F], F]:
    """Decorator to gate a coroutine function behind a feature toggle.

    Args:
        feature_name: Name of the feature toggle
        fallback: Coroutine function to await when the toggle is off
        client: Client to evaluate with, defaults to the global client
        subject_extractor: Function returning a stable subject id from args,
            switching the decision to sticky rollout

    Example:
        @feature_toggle("checkout-v2", fallback=legacy_checkout)
        async def checkout(order):
            return await process_v2(order)
    """

    def decorator(func: F) -> F:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"feature_toggle requires a coroutine function, got {func!r}")

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            subject = None
            if subject_extractor:
                try:
                    subject = subject_extractor(*args, **kwargs)
                except Exception as e:
                    logger.warning(f"Failed to extract toggle subject: {e}")

            toggles = client or get_feature_toggle_client()
            if await toggles.is_enabled(feature_name, subject):
                return await func(*args, **kwargs)
            if fallback:
                return await fallback(*args, **kwargs)
            logger.debug(f"Feature toggle '{feature_name}' is disabled, skipping {func.__name__}")
            return None

        return wrapper  # type: ignore

    return decorator


__all__ = ["feature_toggle"]
