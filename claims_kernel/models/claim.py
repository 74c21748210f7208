"""
Module: claims_kernel.models.claim
Responsibility: ORM persistence for claims and their supporting document
    metadata.
Architecture position: Kernel > Models.  May import from db/base.py only
    (domain DTOs are imported lazily inside the converters).

Invariants enforced:
    - One claim per owner per period: UNIQUE(owner_id, period).
    - Status values limited by a check constraint.
    - Optimistic concurrency: ``version`` is the mapper's version_id_col,
      so every UPDATE carries ``WHERE version = :read_version`` and a lost
      race surfaces as StaleDataError.

Failure modes:
    - IntegrityError on a duplicate (owner_id, period).
    - StaleDataError on flush when another transaction saved first.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from claims_kernel.db.base import Base, UUIDString

if TYPE_CHECKING:
    from claims_kernel.domain.claim import Claim, SupportingDocument


class ClaimModel(Base):
    """Persistent claim row.

    Contract:
        Rows are created by the repository's ``add_claim`` and mutated only
        through ``save_claim``.  Rows are never deleted by the kernel.
    """

    __tablename__ = "claims"

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'coordinator_approved', 'approved', 'rejected')",
            name="ck_claims_valid_status",
        ),
        UniqueConstraint("owner_id", "period", name="uq_claims_owner_period"),
        Index("ix_claims_status_submitted", "status", "submitted_at"),
        Index("ix_claims_owner_submitted", "owner_id", "submitted_at"),
    )

    claim_id: Mapped[UUID] = mapped_column(
        UUIDString(), nullable=False, unique=True,
    )
    owner_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)
    period: Mapped[str] = mapped_column(String(20), nullable=False)
    workload: Mapped[Decimal] = mapped_column(nullable=False)
    hourly_rate: Mapped[Decimal] = mapped_column(nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    status: Mapped[str] = mapped_column(String(30), nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(nullable=False)
    processed_by_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)
    processed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    version: Mapped[int] = mapped_column(nullable=False)

    documents: Mapped[list["DocumentModel"]] = relationship(
        "DocumentModel",
        back_populates="claim",
        primaryjoin="ClaimModel.claim_id == DocumentModel.claim_id",
        order_by="DocumentModel.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return (
            f"<Claim {self.claim_id} owner={self.owner_id} "
            f"period={self.period!r} status={self.status} v{self.version}>"
        )

    def to_dto(self) -> Claim:
        """Convert ORM model to frozen domain DTO."""
        from claims_kernel.domain.claim import Claim as ClaimDTO, ClaimStatus

        return ClaimDTO(
            claim_id=self.claim_id,
            owner_id=self.owner_id,
            period=self.period,
            workload=self.workload,
            hourly_rate=self.hourly_rate,
            amount=self.amount,
            status=ClaimStatus(self.status),
            submitted_at=self.submitted_at,
            description=self.description,
            documents=tuple(d.to_dto() for d in self.documents),
            processed_by_id=self.processed_by_id,
            processed_at=self.processed_at,
            approved_at=self.approved_at,
            rejection_reason=self.rejection_reason,
            version=self.version,
        )

    @classmethod
    def from_dto(cls, dto: Claim) -> ClaimModel:
        """Create ORM model from domain DTO.  The version is assigned on INSERT."""
        model = cls(
            claim_id=dto.claim_id,
            owner_id=dto.owner_id,
            period=dto.period,
            workload=dto.workload,
            hourly_rate=dto.hourly_rate,
            amount=dto.amount,
            description=dto.description,
            status=dto.status.value,
            submitted_at=dto.submitted_at,
            processed_by_id=dto.processed_by_id,
            processed_at=dto.processed_at,
            approved_at=dto.approved_at,
            rejection_reason=dto.rejection_reason,
        )
        model.documents = [
            DocumentModel.from_dto(doc, claim_id=dto.claim_id, position=i)
            for i, doc in enumerate(dto.documents)
        ]
        return model

    def apply_dto(self, dto: Claim) -> None:
        """Copy the mutable fields of ``dto`` onto this row.

        Identity, ownership, period and the rate snapshot are never
        rewritten.  Documents are append-only: entries not yet stored are
        added in order.
        """
        self.workload = dto.workload
        self.amount = dto.amount
        self.description = dto.description
        self.status = dto.status.value
        self.processed_by_id = dto.processed_by_id
        self.processed_at = dto.processed_at
        self.approved_at = dto.approved_at
        self.rejection_reason = dto.rejection_reason

        stored = {d.document_id for d in self.documents}
        for doc in dto.documents:
            if doc.document_id not in stored:
                self.documents.append(
                    DocumentModel.from_dto(
                        doc, claim_id=self.claim_id, position=len(self.documents),
                    )
                )


class DocumentModel(Base):
    """Supporting document metadata.  File bytes are stored elsewhere."""

    __tablename__ = "claim_documents"

    __table_args__ = (
        Index("ix_claim_documents_claim_id", "claim_id"),
    )

    document_id: Mapped[UUID] = mapped_column(
        UUIDString(), nullable=False, unique=True,
    )
    claim_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("claims.claim_id"),
        nullable=False,
    )
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    size_bytes: Mapped[int] = mapped_column(nullable=False)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    storage_path: Mapped[str] = mapped_column(String(500), nullable=False)
    uploaded_at: Mapped[datetime | None] = mapped_column(nullable=True)
    position: Mapped[int] = mapped_column(nullable=False, default=0)

    claim: Mapped["ClaimModel"] = relationship(
        "ClaimModel",
        back_populates="documents",
        foreign_keys=[claim_id],
        primaryjoin="DocumentModel.claim_id == ClaimModel.claim_id",
    )

    def __repr__(self) -> str:
        return f"<Document {self.document_id} {self.filename!r} claim={self.claim_id}>"

    def to_dto(self) -> SupportingDocument:
        from claims_kernel.domain.claim import SupportingDocument as DocumentDTO

        return DocumentDTO(
            document_id=self.document_id,
            filename=self.filename,
            size_bytes=self.size_bytes,
            content_type=self.content_type,
            storage_path=self.storage_path,
            uploaded_at=self.uploaded_at,
        )

    @classmethod
    def from_dto(
        cls, dto: SupportingDocument, *, claim_id: UUID, position: int,
    ) -> DocumentModel:
        return cls(
            document_id=dto.document_id,
            claim_id=claim_id,
            filename=dto.filename,
            size_bytes=dto.size_bytes,
            content_type=dto.content_type,
            storage_path=dto.storage_path,
            uploaded_at=dto.uploaded_at,
            position=position,
        )
