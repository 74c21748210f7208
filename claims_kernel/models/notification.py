"""
Module: claims_kernel.models.notification
Responsibility: ORM persistence for claim notifications shown to users.
Architecture position: Kernel > Models.  May import from db/base.py only.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from claims_kernel.db.base import Base, UUIDString

if TYPE_CHECKING:
    from claims_kernel.domain.notification import ClaimNotification


class NotificationModel(Base):
    """Persistent notification.  Only ``is_read`` changes after insert."""

    __tablename__ = "claim_notifications"

    __table_args__ = (
        Index("ix_claim_notifications_recipient", "recipient_id", "created_at"),
    )

    notification_id: Mapped[UUID] = mapped_column(
        UUIDString(), nullable=False, unique=True,
    )
    claim_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)
    recipient_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    severity: Mapped[str] = mapped_column(String(20), nullable=False)
    sender: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<Notification {self.notification_id} to={self.recipient_id} "
            f"severity={self.severity} read={self.is_read}>"
        )

    def to_dto(self) -> ClaimNotification:
        from claims_kernel.domain.claim import NotificationSeverity
        from claims_kernel.domain.notification import (
            ClaimNotification as NotificationDTO,
        )

        return NotificationDTO(
            notification_id=self.notification_id,
            claim_id=self.claim_id,
            recipient_id=self.recipient_id,
            message=self.message,
            severity=NotificationSeverity(self.severity),
            created_at=self.created_at,
            sender=self.sender,
            is_read=self.is_read,
        )

    @classmethod
    def from_dto(cls, dto: ClaimNotification) -> NotificationModel:
        return cls(
            notification_id=dto.notification_id,
            claim_id=dto.claim_id,
            recipient_id=dto.recipient_id,
            message=dto.message,
            severity=dto.severity.value,
            sender=dto.sender,
            created_at=dto.created_at,
            is_read=dto.is_read,
        )
