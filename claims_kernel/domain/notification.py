"""Notification record DTO (``claims_kernel.domain.notification``)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from claims_kernel.domain.claim import NotificationSeverity

DEFAULT_SENDER = "Claims System"


@dataclass(frozen=True)
class ClaimNotification:
    """A message delivered to one recipient about one claim."""

    notification_id: UUID
    claim_id: UUID
    recipient_id: UUID
    message: str
    severity: NotificationSeverity
    created_at: datetime
    sender: str = DEFAULT_SENDER
    is_read: bool = False
