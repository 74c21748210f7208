"""
Claim domain types (``claims_kernel.domain.claim``).

Responsibility
--------------
Pure value objects for the lecturer claim lifecycle: the claim snapshot,
its supporting documents, the acting user, and the enums for status, role
and notification severity.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.  No imports
from ``db/``, ``models/``, ``services/`` or outer layers.

Invariants enforced
-------------------
* ``amount == workload * hourly_rate`` (exact Decimal equality).
* ``rejection_reason`` is non-empty iff ``status == REJECTED``.
* ``approved_at`` is set iff ``status == APPROVED``.

``Claim`` does not raise on construction: a snapshot loaded from storage
may be corrupt, and the eligibility validator has to be able to report
that.  ``invariant_violations()`` lists what is wrong; the repository
refuses to write a claim for which it is non-empty.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID


class ClaimStatus(str, Enum):
    """Claim lifecycle states."""

    PENDING = "pending"
    COORDINATOR_APPROVED = "coordinator_approved"
    APPROVED = "approved"
    REJECTED = "rejected"


TERMINAL_CLAIM_STATUSES: frozenset[ClaimStatus] = frozenset({
    ClaimStatus.APPROVED,
    ClaimStatus.REJECTED,
})

# Statuses a claim can still be worked on from (queues, document uploads).
OPEN_CLAIM_STATUSES: frozenset[ClaimStatus] = frozenset({
    ClaimStatus.PENDING,
    ClaimStatus.COORDINATOR_APPROVED,
})


class ActorRole(str, Enum):
    """The single role an actor holds."""

    LECTURER = "lecturer"
    COORDINATOR = "coordinator"
    MANAGER = "manager"
    ADMINISTRATOR = "administrator"


class NotificationSeverity(str, Enum):
    """Severity attached to a claim notification."""

    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


def compute_amount(workload: Decimal, hourly_rate: Decimal) -> Decimal:
    """Claim amount: workload hours times the snapshotted hourly rate."""
    return workload * hourly_rate


def decimal_places(value: Decimal) -> int:
    """Significant fractional digits of a finite Decimal (``Decimal("7.50")`` -> 1)."""
    exponent = value.normalize().as_tuple().exponent
    return -exponent if exponent < 0 else 0


@dataclass(frozen=True)
class Actor:
    """An authenticated user acting on claims.

    ``hourly_rate`` is the HR rate and is read only when the actor submits
    a claim.
    """

    actor_id: UUID
    role: ActorRole
    hourly_rate: Decimal = Decimal("250.00")
    display_name: str = ""


@dataclass(frozen=True)
class SupportingDocument:
    """Metadata for a file attached to a claim.  The bytes live elsewhere."""

    document_id: UUID
    filename: str
    size_bytes: int
    content_type: str
    storage_path: str
    uploaded_at: datetime | None = None


@dataclass(frozen=True)
class Claim:
    """Immutable snapshot of a claim.

    ``version`` is the optimistic-concurrency token read from storage; a
    save succeeds only if the stored version still equals it.
    """

    claim_id: UUID
    owner_id: UUID
    period: str
    workload: Decimal
    hourly_rate: Decimal
    amount: Decimal
    status: ClaimStatus
    submitted_at: datetime
    description: str = ""
    documents: tuple[SupportingDocument, ...] = ()
    processed_by_id: UUID | None = None
    processed_at: datetime | None = None
    approved_at: datetime | None = None
    rejection_reason: str | None = None
    version: int = 0

    @property
    def reference(self) -> str:
        """Short human-facing reference used in notification text."""
        return f"CL-{self.claim_id.hex[:8].upper()}"

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_CLAIM_STATUSES

    def expected_amount(self) -> Decimal:
        return compute_amount(self.workload, self.hourly_rate)

    def invariant_violations(self) -> tuple[str, ...]:
        """Return a description of every broken data invariant (empty if none)."""
        violations: list[str] = []
        if self.amount != self.expected_amount():
            violations.append(
                f"amount {self.amount} != workload * hourly_rate {self.expected_amount()}"
            )
        has_reason = bool(self.rejection_reason and self.rejection_reason.strip())
        if has_reason != (self.status == ClaimStatus.REJECTED):
            violations.append(
                "rejection_reason must be set exactly when status is rejected"
            )
        if (self.approved_at is not None) != (self.status == ClaimStatus.APPROVED):
            violations.append(
                "approved_at must be set exactly when status is approved"
            )
        return tuple(violations)


@dataclass(frozen=True)
class ClaimStatusCounts:
    """Per-status claim counts for dashboards."""

    pending: int = 0
    coordinator_approved: int = 0
    approved: int = 0
    rejected: int = 0

    @property
    def total(self) -> int:
        return self.pending + self.coordinator_approved + self.approved + self.rejected

    @property
    def awaiting_decision(self) -> int:
        return self.pending + self.coordinator_approved
