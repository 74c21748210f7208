"""
Claim policy (``claims_kernel.domain.policy``).

Frozen bundle of the numeric limits and switches that gate claim
transitions.  Compiled from YAML by ``claims_config``; the kernel never
reads configuration itself and only receives a ``ClaimPolicy``.

The two workload caps are distinct on purpose: submission accepts up to
``submission_max_workload`` hours while coordinator review (and the
eligibility validator generally) caps at ``coordinator_max_workload``.

``workload_decimal_places`` and ``rate_decimal_places`` bound how precise
hours and hourly rates may be.  Values finer than storage holds would be
rounded on write and the stored amount would no longer equal
workload * hourly_rate.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

DEFAULT_ALLOWED_DOCUMENT_EXTENSIONS: tuple[str, ...] = (
    ".pdf", ".docx", ".xlsx", ".doc", ".xls", ".jpg", ".jpeg", ".png",
)

# Scale of the Numeric columns that hold workload, hourly_rate and amount.
# amount carries workload_decimal_places + rate_decimal_places digits, so
# that sum may not exceed it.
STORAGE_DECIMAL_PLACES = 9


@dataclass(frozen=True)
class ClaimPolicy:
    """Limits applied by the submission checks, validator and approval rules."""

    name: str = "lecturer-claims"
    version: int = 1
    submission_max_workload: Decimal = Decimal("180")
    coordinator_max_workload: Decimal = Decimal("160")
    max_hourly_rate: Decimal = Decimal("500")
    workload_decimal_places: int = 2
    rate_decimal_places: int = 2
    final_approval_max_amount: Decimal = Decimal("10000")
    max_period_length: int = 20
    max_description_length: int = 500
    allowed_document_extensions: tuple[str, ...] = DEFAULT_ALLOWED_DOCUMENT_EXTENSIONS
    max_document_size_bytes: int = 5 * 1024 * 1024
    enforce_separation_of_duties: bool = True
    checksum: str | None = None

    @classmethod
    def default(cls) -> ClaimPolicy:
        return cls()
