"""
claims_engines.transitions -- Claim state machine decision function.

Responsibility:
    Given an actor, an action and the claim as currently stored, either
    refuse with a typed error or return the claim snapshot that should be
    written.  The workflow service owns loading, saving and notifying; this
    module owns every rule in between.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  ``now`` is passed in.

Check order (first failure wins, claim left untouched):
    1. role may request the action             -> ForbiddenActionError
    2. actor is not deciding their own claim   -> SelfApprovalError
    3. claim is in an allowed source status    -> InvalidClaimStateError
    4. reject actions carry a reason           -> MissingReasonError
    5. final approval under the amount limit   -> ApprovalLimitExceededError
    6. eligibility validator passes            -> ClaimValidationError

Submission follows the same shape: role, then the one-claim-per-period
rule, then the submission input checks.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from uuid import UUID

from claims_engines.approval_limit import check_final_approval_limit
from claims_engines.eligibility import validate_eligibility
from claims_engines.submission import validate_document, validate_submission
from claims_kernel.domain.actions import (
    ACTION_NOTIFICATIONS,
    ACTION_ROLES,
    ACTION_SOURCE_STATES,
    ACTION_TARGET_STATES,
    DECISION_ACTIONS,
    REJECT_ACTIONS,
    AttachDocument,
    ClaimAction,
    ClaimActionKind,
    ExistingClaimAction,
    NotificationTemplate,
    Submit,
)
from claims_kernel.domain.claim import (
    Actor,
    Claim,
    ClaimStatus,
    compute_amount,
    decimal_places,
)
from claims_kernel.domain.policy import ClaimPolicy
from claims_kernel.exceptions import (
    DuplicateClaimPeriodError,
    ForbiddenActionError,
    InvalidClaimStateError,
    InvalidRateError,
    MissingReasonError,
    SelfApprovalError,
)

# Actions that run the eligibility validator before applying.
_VALIDATED_ACTIONS = frozenset({
    ClaimActionKind.COORDINATOR_APPROVE,
    ClaimActionKind.MANAGER_FINAL_APPROVE,
})


@dataclass(frozen=True)
class TransitionPlan:
    """The outcome of a successful decision: what to write and announce."""

    action: ClaimActionKind
    before: Claim | None
    after: Claim
    notification: NotificationTemplate | None

    @property
    def from_status(self) -> ClaimStatus | None:
        return self.before.status if self.before is not None else None

    @property
    def to_status(self) -> ClaimStatus:
        return self.after.status


def authorize(
    actor: Actor,
    action: ClaimAction,
    claim: Claim | None = None,
    policy: ClaimPolicy | None = None,
) -> None:
    """Role and separation-of-duties checks.

    Raises:
        ForbiddenActionError: role may not request the action, or a
            lecturer acts on a claim they do not own.
        SelfApprovalError: actor would decide on their own claim.
    """
    policy = policy or ClaimPolicy.default()
    kind = action.kind

    if actor.role not in ACTION_ROLES[kind]:
        raise ForbiddenActionError(str(actor.actor_id), actor.role.value, kind.value)

    if claim is None:
        return

    if kind == ClaimActionKind.ATTACH_DOCUMENT and claim.owner_id != actor.actor_id:
        raise ForbiddenActionError(str(actor.actor_id), actor.role.value, kind.value)

    if (
        policy.enforce_separation_of_duties
        and kind in DECISION_ACTIONS
        and claim.owner_id == actor.actor_id
    ):
        raise SelfApprovalError(str(claim.claim_id), str(actor.actor_id), kind.value)


def plan_submission(
    actor: Actor,
    action: Submit,
    *,
    claim_id: UUID,
    now: datetime,
    existing: Claim | None,
    policy: ClaimPolicy | None = None,
) -> TransitionPlan:
    """Decide a Submit.

    ``existing`` is the actor's stored claim for the stripped
    ``action.period`` (or None).  The actor's current hourly rate is
    snapshotted onto the claim.
    """
    policy = policy or ClaimPolicy.default()
    authorize(actor, action, None, policy)
    period = action.period.strip()

    if existing is not None:
        raise DuplicateClaimPeriodError(
            str(actor.actor_id), period, str(existing.claim_id),
        )

    validate_submission(
        period=period,
        workload=action.workload,
        description=action.description,
        documents=action.documents,
        policy=policy,
    )
    rate = actor.hourly_rate
    if not rate.is_finite() or decimal_places(rate) > policy.rate_decimal_places:
        raise InvalidRateError(
            str(rate), str(policy.max_hourly_rate), policy.rate_decimal_places,
        )

    documents = tuple(
        doc if doc.uploaded_at is not None else replace(doc, uploaded_at=now)
        for doc in action.documents
    )
    claim = Claim(
        claim_id=claim_id,
        owner_id=actor.actor_id,
        period=period,
        workload=action.workload,
        hourly_rate=actor.hourly_rate,
        amount=compute_amount(action.workload, actor.hourly_rate),
        status=ClaimStatus.PENDING,
        submitted_at=now,
        description=action.description,
        documents=documents,
    )
    return TransitionPlan(
        action=action.kind,
        before=None,
        after=claim,
        notification=ACTION_NOTIFICATIONS[action.kind],
    )


def plan_transition(
    actor: Actor,
    action: ExistingClaimAction,
    claim: Claim,
    *,
    now: datetime,
    policy: ClaimPolicy | None = None,
) -> TransitionPlan:
    """Decide an action on an existing claim and return the new snapshot."""
    policy = policy or ClaimPolicy.default()
    kind = action.kind

    authorize(actor, action, claim, policy)

    allowed = ACTION_SOURCE_STATES[kind]
    if claim.status not in allowed:
        raise InvalidClaimStateError(
            str(claim.claim_id),
            claim.status.value,
            kind.value,
            tuple(sorted(s.value for s in allowed)),
        )

    reason = ""
    if kind in REJECT_ACTIONS:
        reason = (getattr(action, "reason", "") or "").strip()
        if not reason:
            raise MissingReasonError(str(claim.claim_id), kind.value)

    if kind == ClaimActionKind.MANAGER_FINAL_APPROVE:
        check_final_approval_limit(claim, policy)

    if kind in _VALIDATED_ACTIONS:
        validate_eligibility(claim, policy)

    if isinstance(action, AttachDocument):
        validate_document(action.document, policy)
        document = action.document
        if document.uploaded_at is None:
            document = replace(document, uploaded_at=now)
        after = replace(claim, documents=claim.documents + (document,))
    else:
        after = _decide(claim, ACTION_TARGET_STATES[kind], actor, now, reason)

    return TransitionPlan(
        action=kind,
        before=claim,
        after=after,
        notification=ACTION_NOTIFICATIONS[kind],
    )


def _decide(
    claim: Claim,
    target: ClaimStatus | None,
    actor: Actor,
    now: datetime,
    reason: str,
) -> Claim:
    if target == ClaimStatus.REJECTED:
        return replace(
            claim,
            status=target,
            rejection_reason=reason,
            processed_by_id=actor.actor_id,
            processed_at=now,
            approved_at=None,
        )
    return replace(
        claim,
        status=target,
        rejection_reason=None,
        processed_by_id=actor.actor_id,
        processed_at=now,
        approved_at=now if target == ClaimStatus.APPROVED else None,
    )
