"""
claims_kernel.services.claim_workflow_service -- Applies claim actions.

Responsibility:
    The single entry point for changing a claim.  For each request it
    loads the claim through the caller's unit of work, asks the pure
    transition engine for the new snapshot, saves it with a version check,
    commits, and only then notifies the claim owner.

Architecture position:
    Kernel > Services.  Imports the pure engines from ``claims_engines``
    and persistence from this package.

Invariants enforced:
    - At most one transition per claim per request: the save is a
      compare-and-set on the version read in the same unit of work.
    - A refused action leaves the claim exactly as stored.
    - Notification happens after commit and its failure never undoes or
      fails the transition.

Failure modes:
    Every ``ClaimsKernelError`` raised by the engine or the repository is
    logged as ``claim_transition_refused`` and re-raised unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID, uuid4

from claims_engines.transitions import (
    TransitionPlan,
    authorize,
    plan_submission,
    plan_transition,
)
from claims_kernel.domain.actions import (
    NOTIFICATION_SEVERITY,
    AttachDocument,
    ClaimAction,
    ClaimActionKind,
    CoordinatorApprove,
    CoordinatorReject,
    ExistingClaimAction,
    ManagerFinalApprove,
    ManagerFinalReject,
    PlainApprove,
    PlainReject,
    Submit,
)
from claims_kernel.domain.claim import Actor, Claim, ClaimStatus, SupportingDocument
from claims_kernel.domain.clock import Clock, SystemClock
from claims_kernel.domain.policy import ClaimPolicy
from claims_kernel.exceptions import ClaimsKernelError
from claims_kernel.logging_config import LogContext, get_logger
from claims_kernel.selectors.stats_cache import ClaimStatsCache
from claims_kernel.services.claim_repository import ClaimUnitOfWork
from claims_kernel.services.notification_service import Notifier, render_message

logger = get_logger("services.claim_workflow")


@dataclass(frozen=True)
class TransitionOutcome:
    """Result of a successfully applied action."""

    claim: Claim
    action: ClaimActionKind
    from_status: ClaimStatus | None
    to_status: ClaimStatus
    notified: bool


class ClaimWorkflowService:
    """Runs claim actions against storage."""

    def __init__(
        self,
        notifier: Notifier | None = None,
        clock: Clock | None = None,
        policy: ClaimPolicy | None = None,
        stats_cache: ClaimStatsCache | None = None,
    ) -> None:
        self._notifier = notifier
        self._clock = clock or SystemClock()
        self._policy = policy or ClaimPolicy.default()
        self._stats_cache = stats_cache

    @property
    def policy(self) -> ClaimPolicy:
        return self._policy

    def execute(
        self,
        uow: ClaimUnitOfWork,
        actor: Actor,
        action: ClaimAction,
    ) -> TransitionOutcome:
        """Apply ``action`` for ``actor`` inside ``uow`` and commit.

        ``uow`` must already be entered.  It is committed on success and
        rolled back on refusal.
        """
        if isinstance(action, Submit):
            claim_id = uuid4()
        elif isinstance(action, ExistingClaimAction):
            claim_id = action.claim_id
        else:
            raise TypeError(f"Unsupported claim action: {type(action).__name__}")

        correlation_id = None if "correlation_id" in LogContext.get_all() else str(uuid4())
        with LogContext.bind(
            correlation_id=correlation_id,
            actor_id=str(actor.actor_id),
            claim_id=str(claim_id),
            action=action.kind.value,
        ):
            try:
                plan, stored = self._apply(uow, actor, action, claim_id)
                uow.commit()
            except ClaimsKernelError as exc:
                uow.rollback()
                logger.warning(
                    "claim_transition_refused",
                    extra={
                        "error_code": exc.code,
                        "error_type": type(exc).__name__,
                        "detail": str(exc),
                    },
                )
                raise

            if self._stats_cache is not None:
                self._stats_cache.invalidate()

            logger.info(
                "claim_submitted" if plan.before is None else "claim_transition_applied",
                extra={
                    "from_status": plan.from_status.value if plan.from_status else None,
                    "to_status": stored.status.value,
                    "claim_version": stored.version,
                    "amount": str(stored.amount),
                },
            )

            notified = self._notify(plan, stored)

        return TransitionOutcome(
            claim=stored,
            action=plan.action,
            from_status=plan.from_status,
            to_status=stored.status,
            notified=notified,
        )

    def _apply(
        self,
        uow: ClaimUnitOfWork,
        actor: Actor,
        action: ClaimAction,
        claim_id: UUID,
    ) -> tuple[TransitionPlan, Claim]:
        authorize(actor, action, None, self._policy)
        now = self._clock.now()

        if isinstance(action, Submit):
            existing = uow.claims.find_by_owner_and_period(
                actor.actor_id, action.period.strip(),
            )
            plan = plan_submission(
                actor,
                action,
                claim_id=claim_id,
                now=now,
                existing=existing,
                policy=self._policy,
            )
            return plan, uow.claims.add_claim(plan.after)

        claim = uow.claims.load_claim(claim_id)
        plan = plan_transition(actor, action, claim, now=now, policy=self._policy)
        return plan, uow.claims.save_claim(plan.after)

    def _notify(self, plan: TransitionPlan, claim: Claim) -> bool:
        if plan.notification is None or self._notifier is None:
            return False

        severity = NOTIFICATION_SEVERITY[plan.notification]
        message = render_message(plan.notification, claim)
        try:
            self._notifier.notify(claim.claim_id, claim.owner_id, message, severity)
        except Exception:
            # The claim is already committed; a lost notification is reported only.
            logger.error(
                "notification_failed",
                exc_info=True,
                extra={
                    "template": plan.notification.value,
                    "recipient_id": str(claim.owner_id),
                },
            )
            return False

        logger.info(
            "notification_sent",
            extra={
                "template": plan.notification.value,
                "severity": severity.value,
                "recipient_id": str(claim.owner_id),
            },
        )
        return True

    # ------------------------------------------------------------------
    # Convenience wrappers
    # ------------------------------------------------------------------

    def submit(
        self,
        uow: ClaimUnitOfWork,
        actor: Actor,
        period: str,
        workload: Decimal,
        description: str = "",
        documents: tuple[SupportingDocument, ...] = (),
    ) -> TransitionOutcome:
        return self.execute(
            uow, actor, Submit(period, workload, description, tuple(documents)),
        )

    def coordinator_approve(
        self, uow: ClaimUnitOfWork, actor: Actor, claim_id: UUID,
    ) -> TransitionOutcome:
        return self.execute(uow, actor, CoordinatorApprove(claim_id))

    def coordinator_reject(
        self, uow: ClaimUnitOfWork, actor: Actor, claim_id: UUID, reason: str,
    ) -> TransitionOutcome:
        return self.execute(uow, actor, CoordinatorReject(claim_id, reason))

    def manager_final_approve(
        self, uow: ClaimUnitOfWork, actor: Actor, claim_id: UUID,
    ) -> TransitionOutcome:
        return self.execute(uow, actor, ManagerFinalApprove(claim_id))

    def manager_final_reject(
        self, uow: ClaimUnitOfWork, actor: Actor, claim_id: UUID, reason: str,
    ) -> TransitionOutcome:
        return self.execute(uow, actor, ManagerFinalReject(claim_id, reason))

    def approve(
        self, uow: ClaimUnitOfWork, actor: Actor, claim_id: UUID,
    ) -> TransitionOutcome:
        return self.execute(uow, actor, PlainApprove(claim_id))

    def reject(
        self, uow: ClaimUnitOfWork, actor: Actor, claim_id: UUID, reason: str,
    ) -> TransitionOutcome:
        return self.execute(uow, actor, PlainReject(claim_id, reason))

    def attach_document(
        self,
        uow: ClaimUnitOfWork,
        actor: Actor,
        claim_id: UUID,
        document: SupportingDocument,
    ) -> TransitionOutcome:
        return self.execute(uow, actor, AttachDocument(claim_id, document))
