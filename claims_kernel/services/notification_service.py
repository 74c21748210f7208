"""
claims_kernel.services.notification_service -- Claim notifications.

Responsibility:
    Renders the message for each notification template and stores it for
    the claim owner.  Delivery (e-mail, push, UI badge) is out of scope; a
    notification is "sent" once the row exists.

Architecture position:
    Kernel > Services.  May import from domain/, models/, db/.

Contract:
    The workflow service calls ``Notifier.notify`` after the claim
    transaction has committed.  ``NotificationService`` therefore writes
    in its own session so a failed insert can never roll back the claim.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Generator, Protocol
from uuid import UUID, uuid4

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from claims_kernel.domain.actions import NotificationTemplate
from claims_kernel.domain.claim import Claim, NotificationSeverity
from claims_kernel.domain.clock import Clock, SystemClock
from claims_kernel.domain.notification import DEFAULT_SENDER, ClaimNotification
from claims_kernel.exceptions import NotificationNotFoundError
from claims_kernel.logging_config import get_logger
from claims_kernel.models.notification import NotificationModel

logger = get_logger("services.notification")

_TEMPLATES: dict[NotificationTemplate, str] = {
    NotificationTemplate.SUBMITTED: (
        "New claim #{ref} submitted for {period}. Amount: R {amount:,.2f}"
    ),
    NotificationTemplate.COORDINATOR_APPROVED: (
        "Your claim #{ref} has been approved by coordinator and sent to "
        "manager for final approval"
    ),
    NotificationTemplate.APPROVED: (
        "Your claim #{ref} for {period} has been approved. Amount: R {amount:,.2f}"
    ),
    NotificationTemplate.REJECTED: (
        "Your claim #{ref} has been rejected. Reason: {reason}"
    ),
}


def render_message(template: NotificationTemplate, claim: Claim) -> str:
    """Fill a notification template from the claim snapshot."""
    return _TEMPLATES[template].format(
        ref=claim.reference,
        period=claim.period,
        amount=claim.amount,
        reason=claim.rejection_reason or "",
    )


class Notifier(Protocol):
    """Anything that can tell a user about a claim."""

    def notify(
        self,
        claim_id: UUID,
        recipient_id: UUID,
        message: str,
        severity: NotificationSeverity,
    ) -> object: ...


class NotificationService:
    """Stores notifications and serves a recipient's inbox."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        clock: Clock | None = None,
        sender: str = DEFAULT_SENDER,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock or SystemClock()
        self._sender = sender

    @contextmanager
    def _transaction(self) -> Generator[Session, None, None]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def notify(
        self,
        claim_id: UUID,
        recipient_id: UUID,
        message: str,
        severity: NotificationSeverity,
    ) -> ClaimNotification:
        notification = ClaimNotification(
            notification_id=uuid4(),
            claim_id=claim_id,
            recipient_id=recipient_id,
            message=message,
            severity=severity,
            created_at=self._clock.now(),
            sender=self._sender,
        )
        with self._transaction() as session:
            session.add(NotificationModel.from_dto(notification))
        return notification

    def list_for_recipient(
        self,
        recipient_id: UUID,
        limit: int = 10,
        unread_only: bool = False,
    ) -> list[ClaimNotification]:
        """Newest first."""
        stmt = select(NotificationModel).where(
            NotificationModel.recipient_id == recipient_id,
        )
        if unread_only:
            stmt = stmt.where(NotificationModel.is_read.is_(False))
        stmt = stmt.order_by(
            NotificationModel.created_at.desc(),
            NotificationModel.id.desc(),
        ).limit(limit)
        with self._transaction() as session:
            return [m.to_dto() for m in session.execute(stmt).scalars()]

    def unread_count(self, recipient_id: UUID) -> int:
        with self._transaction() as session:
            return session.execute(
                select(func.count()).select_from(NotificationModel).where(
                    NotificationModel.recipient_id == recipient_id,
                    NotificationModel.is_read.is_(False),
                )
            ).scalar_one()

    def mark_read(self, notification_id: UUID, recipient_id: UUID) -> ClaimNotification:
        """Mark one of the recipient's notifications read.

        Raises:
            NotificationNotFoundError: unknown id, or owned by someone else.
        """
        with self._transaction() as session:
            model = session.execute(
                select(NotificationModel).where(
                    NotificationModel.notification_id == notification_id,
                    NotificationModel.recipient_id == recipient_id,
                )
            ).scalar_one_or_none()
            if model is None:
                raise NotificationNotFoundError(str(notification_id))
            model.is_read = True
            return model.to_dto()

    def mark_all_read(self, recipient_id: UUID) -> int:
        """Returns the number of notifications that changed."""
        with self._transaction() as session:
            result = session.execute(
                update(NotificationModel)
                .where(
                    NotificationModel.recipient_id == recipient_id,
                    NotificationModel.is_read.is_(False),
                )
                .values(is_read=True)
            )
            return result.rowcount
