"""
Module: claims_kernel.selectors.stats_cache
Responsibility: Read-through cache of system-wide claim status counts.

The cache holds one ``ClaimStatusCounts`` tagged with the stats version it
was computed at.  Writers call ``invalidate()`` after committing a claim
change; readers recompute only when the version has moved.
"""

from __future__ import annotations

import threading
from typing import Callable

from sqlalchemy.orm import Session

from claims_kernel.domain.claim import ClaimStatusCounts
from claims_kernel.logging_config import get_logger
from claims_kernel.selectors.claim_selector import ClaimSelector

logger = get_logger("selectors.stats_cache")


class ClaimStatsCache:
    """Versioned cache of ``ClaimSelector.status_counts()``."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory
        self._lock = threading.Lock()
        self._version = 0
        self._cached: tuple[int, ClaimStatusCounts] | None = None

    @property
    def version(self) -> int:
        return self._version

    def invalidate(self) -> int:
        """Bump the stats version.  Returns the new version."""
        with self._lock:
            self._version += 1
            return self._version

    def get(self) -> ClaimStatusCounts:
        with self._lock:
            version = self._version
            cached = self._cached
        if cached is not None and cached[0] == version:
            return cached[1]

        session = self._session_factory()
        try:
            counts = ClaimSelector(session).status_counts()
        finally:
            session.close()

        logger.debug("claim_stats_recomputed", extra={"stats_version": version})
        with self._lock:
            # Keep a newer entry if another reader got there first.
            if self._cached is None or self._cached[0] <= version:
                self._cached = (version, counts)
        return counts
