"""Kernel services: persistence, notifications and the claim workflow."""

from claims_kernel.services.claim_repository import (
    ClaimRepository,
    ClaimUnitOfWork,
    SqlClaimRepository,
)
from claims_kernel.services.claim_workflow_service import (
    ClaimWorkflowService,
    TransitionOutcome,
)
from claims_kernel.services.notification_service import (
    NotificationService,
    Notifier,
    render_message,
)

__all__ = [
    "ClaimRepository",
    "ClaimUnitOfWork",
    "ClaimWorkflowService",
    "NotificationService",
    "Notifier",
    "SqlClaimRepository",
    "TransitionOutcome",
    "render_message",
]
