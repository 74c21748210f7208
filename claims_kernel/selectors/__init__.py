"""Read-only query selectors."""

from claims_kernel.selectors.base import BaseSelector
from claims_kernel.selectors.claim_selector import ClaimSelector
from claims_kernel.selectors.stats_cache import ClaimStatsCache

__all__ = [
    "BaseSelector",
    "ClaimSelector",
    "ClaimStatsCache",
]
