"""
Module: claims_kernel.selectors.claim_selector
Responsibility: Review queues, an owner's claim history and status counts.
Architecture position: Kernel > Selectors.  Read-only.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select

from claims_kernel.domain.claim import (
    OPEN_CLAIM_STATUSES,
    Claim,
    ClaimStatus,
    ClaimStatusCounts,
)
from claims_kernel.models.claim import ClaimModel
from claims_kernel.selectors.base import BaseSelector

_OPEN_VALUES = tuple(sorted(s.value for s in OPEN_CLAIM_STATUSES))


class ClaimSelector(BaseSelector[ClaimModel]):
    """Read-only claim queries."""

    def get(self, claim_id: UUID) -> Claim | None:
        model = self.session.execute(
            select(ClaimModel).where(ClaimModel.claim_id == claim_id)
        ).scalar_one_or_none()
        return model.to_dto() if model is not None else None

    def coordinator_queue(
        self,
        status: ClaimStatus | None = None,
        owner_id: UUID | None = None,
    ) -> list[Claim]:
        """Claims for coordinator review, newest first.

        Without a status filter the queue holds every claim still awaiting a
        decision (pending or coordinator-approved).
        """
        stmt = select(ClaimModel)
        if status is None:
            stmt = stmt.where(ClaimModel.status.in_(_OPEN_VALUES))
        else:
            stmt = stmt.where(ClaimModel.status == status.value)
        if owner_id is not None:
            stmt = stmt.where(ClaimModel.owner_id == owner_id)
        stmt = stmt.order_by(ClaimModel.submitted_at.desc(), ClaimModel.claim_id)
        return [m.to_dto() for m in self.session.execute(stmt).scalars()]

    def manager_queue(self, owner_id: UUID | None = None) -> list[Claim]:
        """Claims awaiting final approval, oldest first."""
        stmt = select(ClaimModel).where(ClaimModel.status.in_(_OPEN_VALUES))
        if owner_id is not None:
            stmt = stmt.where(ClaimModel.owner_id == owner_id)
        stmt = stmt.order_by(ClaimModel.submitted_at.asc(), ClaimModel.claim_id)
        return [m.to_dto() for m in self.session.execute(stmt).scalars()]

    def claims_for_owner(
        self, owner_id: UUID, limit: int | None = None,
    ) -> list[Claim]:
        """An owner's claims, newest first."""
        stmt = (
            select(ClaimModel)
            .where(ClaimModel.owner_id == owner_id)
            .order_by(ClaimModel.submitted_at.desc(), ClaimModel.claim_id)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return [m.to_dto() for m in self.session.execute(stmt).scalars()]

    def status_counts(self, owner_id: UUID | None = None) -> ClaimStatusCounts:
        """Per-status counts, system-wide or for one owner."""
        stmt = select(ClaimModel.status, func.count()).group_by(ClaimModel.status)
        if owner_id is not None:
            stmt = stmt.where(ClaimModel.owner_id == owner_id)
        counts = {status: count for status, count in self.session.execute(stmt)}
        return ClaimStatusCounts(
            pending=counts.get(ClaimStatus.PENDING.value, 0),
            coordinator_approved=counts.get(ClaimStatus.COORDINATOR_APPROVED.value, 0),
            approved=counts.get(ClaimStatus.APPROVED.value, 0),
            rejected=counts.get(ClaimStatus.REJECTED.value, 0),
        )
