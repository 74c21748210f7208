"""
Pure domain layer.

This module contains immutable value objects and lookup tables with NO
dependencies on:
- ORM (SQLAlchemy)
- Database
- I/O

Time is injected through ``Clock``.
"""

from claims_kernel.domain.actions import (
    ACTION_NOTIFICATIONS,
    ACTION_ROLES,
    ACTION_SOURCE_STATES,
    ACTION_TARGET_STATES,
    DECISION_ACTIONS,
    NOTIFICATION_SEVERITY,
    REJECT_ACTIONS,
    AttachDocument,
    ClaimAction,
    ClaimActionKind,
    CoordinatorApprove,
    CoordinatorReject,
    ExistingClaimAction,
    ManagerFinalApprove,
    ManagerFinalReject,
    NotificationTemplate,
    PlainApprove,
    PlainReject,
    Submit,
)
from claims_kernel.domain.claim import (
    OPEN_CLAIM_STATUSES,
    TERMINAL_CLAIM_STATUSES,
    Actor,
    ActorRole,
    Claim,
    ClaimStatus,
    ClaimStatusCounts,
    NotificationSeverity,
    SupportingDocument,
    compute_amount,
)
from claims_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from claims_kernel.domain.notification import DEFAULT_SENDER, ClaimNotification
from claims_kernel.domain.policy import ClaimPolicy

__all__ = [
    # Claim
    "Actor",
    "ActorRole",
    "Claim",
    "ClaimStatus",
    "ClaimStatusCounts",
    "NotificationSeverity",
    "OPEN_CLAIM_STATUSES",
    "SupportingDocument",
    "TERMINAL_CLAIM_STATUSES",
    "compute_amount",
    # Actions
    "ACTION_NOTIFICATIONS",
    "ACTION_ROLES",
    "ACTION_SOURCE_STATES",
    "ACTION_TARGET_STATES",
    "AttachDocument",
    "ClaimAction",
    "ClaimActionKind",
    "CoordinatorApprove",
    "CoordinatorReject",
    "DECISION_ACTIONS",
    "ExistingClaimAction",
    "ManagerFinalApprove",
    "ManagerFinalReject",
    "NOTIFICATION_SEVERITY",
    "NotificationTemplate",
    "PlainApprove",
    "PlainReject",
    "REJECT_ACTIONS",
    "Submit",
    # Clock
    "Clock",
    "DeterministicClock",
    "SystemClock",
    # Notification
    "ClaimNotification",
    "DEFAULT_SENDER",
    # Policy
    "ClaimPolicy",
]
