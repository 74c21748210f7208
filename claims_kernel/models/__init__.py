"""SQLAlchemy ORM models.  Importing this package registers every table."""

from claims_kernel.models.claim import ClaimModel, DocumentModel
from claims_kernel.models.notification import NotificationModel

__all__ = [
    "ClaimModel",
    "DocumentModel",
    "NotificationModel",
]
