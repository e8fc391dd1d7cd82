"""Percentage rollout decisions.

The default decision draws a fresh random number on every call, so two calls
for the same caller may disagree. ``decide_for_subject`` is the sticky
alternative: it hashes a stable identifier into a fixed bucket.
"""

from __future__ import annotations

import hashlib
import random
from typing import Optional

_BUCKETS = 100

# OS entropy; never seeded, safe to share across threads
_system_random = random.SystemRandom()


def decide(percentage: int, rng: Optional[random.Random] = None) -> bool:
    """Return True for roughly ``percentage`` percent of calls.

    0 is always False and 100 is always True.
    """
    draw = (rng or _system_random).randrange(_BUCKETS)
    return draw < percentage


def percentage_bucket(feature_name: str, subject: str) -> int:
    """Get bucket (0-99) for a subject under a feature."""
    key = f"{feature_name}:{subject}"
    digest = hashlib.md5(key.encode()).hexdigest()  # nosec B324
    return int(digest[:8], 16) % _BUCKETS


def decide_for_subject(percentage: int, feature_name: str, subject: str) -> bool:
    return percentage_bucket(feature_name, subject) < percentage


class RandomizedRollout:
    """Per-call random rollout, injectable into the client.

    Pass a seeded ``random.Random`` only in tests; production use relies on
    the unseeded system source.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng

    def __call__(self, percentage: int) -> bool:
        return decide(percentage, self._rng)


__all__ = [
    "RandomizedRollout",
    "decide",
    "decide_for_subject",
    "percentage_bucket",
]
