"""
Claim actions (``claims_kernel.domain.actions``).

Responsibility
--------------
Tagged-variant action types for everything an actor can do to a claim,
plus the lookup tables that drive authorization and state gating:

* ``ACTION_ROLES``          -- which roles may request each action.
* ``ACTION_SOURCE_STATES``  -- which statuses the claim must be in.
* ``ACTION_TARGET_STATES``  -- the status the claim ends up in.

Routing by table keeps the "who may do what from where" rules in one
place instead of spreading role checks across call sites.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import ClassVar
from uuid import UUID

from claims_kernel.domain.claim import (
    ActorRole,
    ClaimStatus,
    NotificationSeverity,
    SupportingDocument,
)


class ClaimActionKind(str, Enum):
    SUBMIT = "submit"
    COORDINATOR_APPROVE = "coordinator_approve"
    COORDINATOR_REJECT = "coordinator_reject"
    MANAGER_FINAL_APPROVE = "manager_final_approve"
    MANAGER_FINAL_REJECT = "manager_final_reject"
    PLAIN_APPROVE = "plain_approve"
    PLAIN_REJECT = "plain_reject"
    ATTACH_DOCUMENT = "attach_document"


class NotificationTemplate(str, Enum):
    """Notification emitted after a successful transition."""

    SUBMITTED = "submitted"
    COORDINATOR_APPROVED = "coordinator_approved"
    APPROVED = "approved"
    REJECTED = "rejected"


NOTIFICATION_SEVERITY: dict[NotificationTemplate, NotificationSeverity] = {
    NotificationTemplate.SUBMITTED: NotificationSeverity.INFO,
    NotificationTemplate.COORDINATOR_APPROVED: NotificationSeverity.SUCCESS,
    NotificationTemplate.APPROVED: NotificationSeverity.SUCCESS,
    NotificationTemplate.REJECTED: NotificationSeverity.ERROR,
}


# =========================================================================
# Action variants
# =========================================================================


@dataclass(frozen=True)
class ClaimAction:
    """Base for all claim actions."""

    kind: ClassVar[ClaimActionKind]


@dataclass(frozen=True)
class Submit(ClaimAction):
    """Create a new claim owned by the acting lecturer."""

    kind: ClassVar[ClaimActionKind] = ClaimActionKind.SUBMIT

    period: str
    workload: Decimal
    description: str = ""
    documents: tuple[SupportingDocument, ...] = ()


@dataclass(frozen=True)
class ExistingClaimAction(ClaimAction):
    """An action on a claim that already exists."""

    claim_id: UUID


@dataclass(frozen=True)
class CoordinatorApprove(ExistingClaimAction):
    kind: ClassVar[ClaimActionKind] = ClaimActionKind.COORDINATOR_APPROVE


@dataclass(frozen=True)
class CoordinatorReject(ExistingClaimAction):
    kind: ClassVar[ClaimActionKind] = ClaimActionKind.COORDINATOR_REJECT

    reason: str = ""


@dataclass(frozen=True)
class ManagerFinalApprove(ExistingClaimAction):
    kind: ClassVar[ClaimActionKind] = ClaimActionKind.MANAGER_FINAL_APPROVE


@dataclass(frozen=True)
class ManagerFinalReject(ExistingClaimAction):
    kind: ClassVar[ClaimActionKind] = ClaimActionKind.MANAGER_FINAL_REJECT

    reason: str = ""


@dataclass(frozen=True)
class PlainApprove(ExistingClaimAction):
    """Single-stage approval that skips the coordinator gate entirely."""

    kind: ClassVar[ClaimActionKind] = ClaimActionKind.PLAIN_APPROVE


@dataclass(frozen=True)
class PlainReject(ExistingClaimAction):
    kind: ClassVar[ClaimActionKind] = ClaimActionKind.PLAIN_REJECT

    reason: str = ""


@dataclass(frozen=True)
class AttachDocument(ExistingClaimAction):
    """Owner adds a supporting document to an open claim."""

    kind: ClassVar[ClaimActionKind] = ClaimActionKind.ATTACH_DOCUMENT

    document: SupportingDocument


REJECT_ACTIONS: frozenset[ClaimActionKind] = frozenset({
    ClaimActionKind.COORDINATOR_REJECT,
    ClaimActionKind.MANAGER_FINAL_REJECT,
    ClaimActionKind.PLAIN_REJECT,
})

# Actions that decide on someone else's claim.
DECISION_ACTIONS: frozenset[ClaimActionKind] = REJECT_ACTIONS | frozenset({
    ClaimActionKind.COORDINATOR_APPROVE,
    ClaimActionKind.MANAGER_FINAL_APPROVE,
    ClaimActionKind.PLAIN_APPROVE,
})


# =========================================================================
# Tables
# =========================================================================

_REVIEWERS = frozenset({ActorRole.COORDINATOR, ActorRole.ADMINISTRATOR})
_APPROVERS = frozenset({ActorRole.MANAGER, ActorRole.ADMINISTRATOR})
_OPEN = frozenset({ClaimStatus.PENDING, ClaimStatus.COORDINATOR_APPROVED})

ACTION_ROLES: dict[ClaimActionKind, frozenset[ActorRole]] = {
    ClaimActionKind.SUBMIT: frozenset({ActorRole.LECTURER}),
    ClaimActionKind.COORDINATOR_APPROVE: _REVIEWERS,
    ClaimActionKind.COORDINATOR_REJECT: _REVIEWERS,
    ClaimActionKind.MANAGER_FINAL_APPROVE: _APPROVERS,
    ClaimActionKind.MANAGER_FINAL_REJECT: _APPROVERS,
    ClaimActionKind.PLAIN_APPROVE: _APPROVERS,
    ClaimActionKind.PLAIN_REJECT: _APPROVERS,
    ClaimActionKind.ATTACH_DOCUMENT: frozenset({ActorRole.LECTURER}),
}

ACTION_SOURCE_STATES: dict[ClaimActionKind, frozenset[ClaimStatus]] = {
    ClaimActionKind.COORDINATOR_APPROVE: frozenset({ClaimStatus.PENDING}),
    ClaimActionKind.COORDINATOR_REJECT: frozenset({ClaimStatus.PENDING}),
    ClaimActionKind.MANAGER_FINAL_APPROVE: _OPEN,
    ClaimActionKind.MANAGER_FINAL_REJECT: _OPEN,
    ClaimActionKind.PLAIN_APPROVE: _OPEN,
    ClaimActionKind.PLAIN_REJECT: _OPEN,
    ClaimActionKind.ATTACH_DOCUMENT: _OPEN,
}

ACTION_TARGET_STATES: dict[ClaimActionKind, ClaimStatus | None] = {
    ClaimActionKind.SUBMIT: ClaimStatus.PENDING,
    ClaimActionKind.COORDINATOR_APPROVE: ClaimStatus.COORDINATOR_APPROVED,
    ClaimActionKind.COORDINATOR_REJECT: ClaimStatus.REJECTED,
    ClaimActionKind.MANAGER_FINAL_APPROVE: ClaimStatus.APPROVED,
    ClaimActionKind.MANAGER_FINAL_REJECT: ClaimStatus.REJECTED,
    ClaimActionKind.PLAIN_APPROVE: ClaimStatus.APPROVED,
    ClaimActionKind.PLAIN_REJECT: ClaimStatus.REJECTED,
    ClaimActionKind.ATTACH_DOCUMENT: None,
}

ACTION_NOTIFICATIONS: dict[ClaimActionKind, NotificationTemplate | None] = {
    ClaimActionKind.SUBMIT: NotificationTemplate.SUBMITTED,
    ClaimActionKind.COORDINATOR_APPROVE: NotificationTemplate.COORDINATOR_APPROVED,
    ClaimActionKind.COORDINATOR_REJECT: NotificationTemplate.REJECTED,
    ClaimActionKind.MANAGER_FINAL_APPROVE: NotificationTemplate.APPROVED,
    ClaimActionKind.MANAGER_FINAL_REJECT: NotificationTemplate.REJECTED,
    ClaimActionKind.PLAIN_APPROVE: NotificationTemplate.APPROVED,
    ClaimActionKind.PLAIN_REJECT: NotificationTemplate.REJECTED,
    ClaimActionKind.ATTACH_DOCUMENT: None,
}
