"""Extension point for checking that external links are reachable.

No network checker ships with doclinks. Honouring robots.txt, rate limits and
per-host timeouts is left to whoever implements :class:`ReachabilityChecker`.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol


class Reachability(Enum):
    REACHABLE = "reachable"
    UNREACHABLE = "unreachable"
    UNKNOWN = "unknown"


class ReachabilityChecker(Protocol):
    """Decides whether a single external URL answers."""

    def check(self, url: str) -> Reachability:
        """Return the reachability of ``url``; ``UNKNOWN`` leaves the row unset."""


__all__ = ["Reachability", "ReachabilityChecker"]
