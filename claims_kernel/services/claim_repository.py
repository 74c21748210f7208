"""
claims_kernel.services.claim_repository -- Claim persistence and unit of work.

Responsibility:
    Load and store ``Claim`` snapshots.  Every write is a compare-and-set on
    the version the caller read, so two requests racing on one claim can
    never both apply.

Architecture position:
    Kernel > Services.  May import from domain/, models/, db/.

Invariants enforced:
    - A claim whose ``invariant_violations()`` is non-empty is never written.
    - ``save_claim`` succeeds only if the stored version equals
      ``claim.version``; every successful save increments it.

Failure modes:
    - ClaimNotFoundError when the claim does not exist.
    - ConcurrentModificationError when the stored version moved.
    - DuplicateClaimPeriodError when the (owner, period) pair is taken by a
      concurrent submission.
    - ClaimInvariantError for a snapshot breaking a data invariant.
    - ClaimStorageError wrapping any other SQLAlchemy failure.
"""

from __future__ import annotations

from typing import Callable, Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified
from sqlalchemy.orm.exc import StaleDataError

from claims_kernel.domain.claim import Claim
from claims_kernel.exceptions import (
    ClaimInvariantError,
    ClaimNotFoundError,
    ClaimStorageError,
    ConcurrentModificationError,
    DuplicateClaimPeriodError,
)
from claims_kernel.logging_config import get_logger
from claims_kernel.models.claim import ClaimModel

logger = get_logger("services.claim_repository")


class ClaimRepository(Protocol):
    """Storage contract the workflow service depends on."""

    def load_claim(self, claim_id: UUID) -> Claim: ...

    def add_claim(self, claim: Claim) -> Claim: ...

    def save_claim(self, claim: Claim) -> Claim: ...

    def find_by_owner_and_period(self, owner_id: UUID, period: str) -> Claim | None: ...


class SqlClaimRepository:
    """SQLAlchemy-backed ClaimRepository bound to one session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _get_model(self, claim_id: UUID) -> ClaimModel:
        model = self._session.execute(
            select(ClaimModel).where(ClaimModel.claim_id == claim_id)
        ).scalar_one_or_none()
        if model is None:
            raise ClaimNotFoundError(str(claim_id))
        return model

    def load_claim(self, claim_id: UUID) -> Claim:
        try:
            return self._get_model(claim_id).to_dto()
        except SQLAlchemyError as exc:
            raise ClaimStorageError("load_claim", str(exc)) from exc

    def find_by_owner_and_period(self, owner_id: UUID, period: str) -> Claim | None:
        try:
            model = self._session.execute(
                select(ClaimModel).where(
                    ClaimModel.owner_id == owner_id,
                    ClaimModel.period == period,
                )
            ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise ClaimStorageError("find_by_owner_and_period", str(exc)) from exc
        return model.to_dto() if model is not None else None

    def add_claim(self, claim: Claim) -> Claim:
        """Insert a new claim.  The stored claim comes back at version 1."""
        _check_invariants(claim)
        model = ClaimModel.from_dto(claim)
        try:
            self._session.add(model)
            self._session.flush()
        except IntegrityError as exc:
            self._session.rollback()
            existing = self.find_by_owner_and_period(claim.owner_id, claim.period)
            if existing is not None:
                raise DuplicateClaimPeriodError(
                    str(claim.owner_id), claim.period, str(existing.claim_id),
                ) from exc
            raise ClaimStorageError("add_claim", str(exc)) from exc
        except SQLAlchemyError as exc:
            raise ClaimStorageError("add_claim", str(exc)) from exc
        return model.to_dto()

    def save_claim(self, claim: Claim) -> Claim:
        """Write ``claim`` if the stored version still equals ``claim.version``."""
        _check_invariants(claim)
        try:
            model = self._get_model(claim.claim_id)
        except SQLAlchemyError as exc:
            raise ClaimStorageError("save_claim", str(exc)) from exc

        if model.version != claim.version:
            logger.warning(
                "claim_concurrent_modification",
                extra={
                    "claim_id": str(claim.claim_id),
                    "expected_version": claim.version,
                    "stored_version": model.version,
                },
            )
            raise ConcurrentModificationError(str(claim.claim_id), claim.version)

        model.apply_dto(claim)
        # Document-only changes touch child rows; force the version bump.
        flag_modified(model, "status")
        try:
            self._session.flush()
        except StaleDataError as exc:
            logger.warning(
                "claim_concurrent_modification",
                extra={
                    "claim_id": str(claim.claim_id),
                    "expected_version": claim.version,
                },
            )
            raise ConcurrentModificationError(
                str(claim.claim_id), claim.version,
            ) from exc
        except SQLAlchemyError as exc:
            raise ClaimStorageError("save_claim", str(exc)) from exc
        return model.to_dto()


def _check_invariants(claim: Claim) -> None:
    violations = claim.invariant_violations()
    if violations:
        raise ClaimInvariantError(str(claim.claim_id), violations)


class ClaimUnitOfWork:
    """One transaction around one claim mutation.

    Usage:
        with ClaimUnitOfWork(session_factory) as uow:
            claim = uow.claims.load_claim(claim_id)
            uow.claims.save_claim(updated)
            uow.commit()

    Leaving the block without ``commit()`` rolls back.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        repository_factory: Callable[[Session], ClaimRepository] = SqlClaimRepository,
    ) -> None:
        self._session_factory = session_factory
        self._repository_factory = repository_factory
        self._session: Session | None = None
        self._committed = False
        self.claims: ClaimRepository | None = None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("ClaimUnitOfWork used outside its 'with' block")
        return self._session

    def __enter__(self) -> ClaimUnitOfWork:
        self._session = self._session_factory()
        self._committed = False
        self.claims = self._repository_factory(self._session)
        return self

    def commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise ClaimStorageError("commit", str(exc)) from exc
        self._committed = True

    def rollback(self) -> None:
        self.session.rollback()

    def __exit__(self, exc_type, exc, tb) -> None:
        session = self.session
        try:
            if not self._committed:
                session.rollback()
                if exc_type is not None:
                    logger.warning(
                        "transaction_rolled_back",
                        extra={"error_type": exc_type.__name__},
                    )
        finally:
            session.close()
            self._session = None
            self.claims = None
