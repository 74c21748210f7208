"""
Typed Exception Hierarchy for the Claims Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Every refused claim transition must tell the caller exactly why, so the UI
can show "only pending claims can be approved" instead of "something went
wrong".  Callers catch by type and read structured attributes; they never
parse message strings.

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example:
    try:
        service.execute(uow, actor, CoordinatorApprove(claim_id))
    except ClaimValidationError as e:
        flash(f"Claim cannot be approved: {e}")      # human text
        api_response(code=e.code, reason=e.reason)   # machine-readable

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    ClaimsKernelError (base)
    |
    +-- ClaimNotFoundError
    +-- NotificationNotFoundError
    |
    +-- AuthorizationError
    |   +-- ForbiddenActionError
    |   +-- SelfApprovalError
    |
    +-- InvalidClaimStateError
    |
    +-- ClaimValidationError
    |   +-- InvalidWorkloadError
    |   +-- InvalidRateError
    |   +-- AmountMismatchError
    |   +-- MissingDocumentsError
    |   +-- InvalidPeriodError
    |   +-- InvalidDescriptionError
    |   +-- InvalidDocumentError
    |
    +-- MissingReasonError
    |
    +-- PolicyViolationError
    |   +-- ApprovalLimitExceededError
    |
    +-- DuplicateClaimPeriodError
    +-- ClaimInvariantError
    |
    +-- ConcurrencyError
    |   +-- ConcurrentModificationError
    |
    +-- ClaimStorageError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Code                       | When Raised
---------------------------|--------------------------------------------------
CLAIM_NOT_FOUND            | Claim ID doesn't exist
NOTIFICATION_NOT_FOUND     | Notification missing or not the caller's
FORBIDDEN                  | Actor's role may not perform the action
SAME_ACTOR                 | Actor would approve/reject their own claim
INVALID_STATE              | Claim's current status is not a legal source
VALIDATION_FAILED          | Eligibility / submission rule violated (.reason)
MISSING_REASON             | Reject action without rejection text
APPROVAL_LIMIT_EXCEEDED    | Final approval above the configured amount limit
DUPLICATE_CLAIM_PERIOD     | Owner already has a claim for the period
CLAIM_INVARIANT_VIOLATION  | Refused to persist a claim breaking an invariant
CONCURRENT_MODIFICATION    | Claim changed between read and write
STORAGE_ERROR              | Persistence failure, surfaced as-is

Notifier failures have no class here: the transition is already committed
when the notifier runs, so they are logged and suppressed.
"""

from __future__ import annotations

from enum import Enum


class ClaimsKernelError(Exception):
    """
    Base exception for all claims kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "CLAIMS_KERNEL_ERROR"


# Lookup


class ClaimNotFoundError(ClaimsKernelError):
    """Claim with given ID was not found."""

    code: str = "CLAIM_NOT_FOUND"

    def __init__(self, claim_id: str):
        self.claim_id = claim_id
        super().__init__(f"Claim not found: {claim_id}")


class NotificationNotFoundError(ClaimsKernelError):
    """Notification does not exist or belongs to another recipient."""

    code: str = "NOTIFICATION_NOT_FOUND"

    def __init__(self, notification_id: str):
        self.notification_id = notification_id
        super().__init__(f"Notification not found: {notification_id}")


# Authorization


class AuthorizationError(ClaimsKernelError):
    """Base exception for actor-vs-action refusals."""

    code: str = "AUTHORIZATION_ERROR"


class ForbiddenActionError(AuthorizationError):
    """Actor's role is not permitted to perform the action."""

    code: str = "FORBIDDEN"

    def __init__(self, actor_id: str, role: str, action: str):
        self.actor_id = actor_id
        self.role = role
        self.action = action
        super().__init__(f"Role '{role}' may not perform '{action}'")


class SelfApprovalError(AuthorizationError):
    """Actor attempted to approve or reject a claim they own."""

    code: str = "SAME_ACTOR"

    def __init__(self, claim_id: str, actor_id: str, action: str):
        self.claim_id = claim_id
        self.actor_id = actor_id
        self.action = action
        super().__init__(
            f"Actor {actor_id} may not perform '{action}' on their own claim {claim_id}"
        )


# State


class InvalidClaimStateError(ClaimsKernelError):
    """Claim is not in a state from which the action may be taken."""

    code: str = "INVALID_STATE"

    def __init__(
        self,
        claim_id: str,
        current_status: str,
        action: str,
        allowed: tuple[str, ...] = (),
    ):
        self.claim_id = claim_id
        self.current_status = current_status
        self.action = action
        self.allowed = allowed
        super().__init__(
            f"Cannot '{action}' claim {claim_id} in status '{current_status}'"
            + (f" (allowed: {', '.join(allowed)})" if allowed else "")
        )


# Validation


class ValidationFailure(str, Enum):
    """Which validation rule a claim failed."""

    INVALID_WORKLOAD = "invalid_workload"
    INVALID_RATE = "invalid_rate"
    AMOUNT_MISMATCH = "amount_mismatch"
    MISSING_DOCUMENTS = "missing_documents"
    INVALID_PERIOD = "invalid_period"
    INVALID_DESCRIPTION = "invalid_description"
    INVALID_DOCUMENT = "invalid_document"


class ClaimValidationError(ClaimsKernelError):
    """
    A claim failed an eligibility or submission rule.

    ``reason`` identifies the rule; ``detail`` is human-readable.
    """

    code: str = "VALIDATION_FAILED"
    reason: ValidationFailure

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class InvalidWorkloadError(ClaimValidationError):
    """Workload hours are out of range or more precise than the policy allows."""

    reason = ValidationFailure.INVALID_WORKLOAD

    def __init__(self, workload: str, max_workload: str, max_places: int | None = None):
        self.workload = workload
        self.max_workload = max_workload
        self.max_places = max_places
        if max_places is not None:
            message = f"Workload {workload} has more than {max_places} decimal places"
        else:
            message = (
                f"Workload {workload} must be greater than 0 and at most {max_workload} hours"
            )
        super().__init__(message)


class InvalidRateError(ClaimValidationError):
    """Hourly rate is outside the acceptable range or too precise."""

    reason = ValidationFailure.INVALID_RATE

    def __init__(self, hourly_rate: str, max_rate: str, max_places: int | None = None):
        self.hourly_rate = hourly_rate
        self.max_rate = max_rate
        self.max_places = max_places
        if max_places is not None:
            message = f"Hourly rate {hourly_rate} has more than {max_places} decimal places"
        else:
            message = f"Hourly rate {hourly_rate} is outside acceptable range (0, {max_rate}]"
        super().__init__(message)


class AmountMismatchError(ClaimValidationError):
    """Stored amount differs from workload * hourly_rate."""

    reason = ValidationFailure.AMOUNT_MISMATCH

    def __init__(self, amount: str, expected: str):
        self.amount = amount
        self.expected = expected
        super().__init__(
            f"Amount calculation is incorrect: stored {amount}, expected {expected}"
        )


class MissingDocumentsError(ClaimValidationError):
    """Claim has no supporting documents."""

    reason = ValidationFailure.MISSING_DOCUMENTS

    def __init__(self, claim_id: str):
        self.claim_id = claim_id
        super().__init__(f"Supporting documents are required for claim {claim_id}")


class InvalidPeriodError(ClaimValidationError):
    """Claim period label is empty or too long."""

    reason = ValidationFailure.INVALID_PERIOD

    def __init__(self, period: str, max_length: int):
        self.period = period
        self.max_length = max_length
        super().__init__(
            f"Period {period!r} must be non-empty and at most {max_length} characters"
        )


class InvalidDescriptionError(ClaimValidationError):
    """Claim description is too long."""

    reason = ValidationFailure.INVALID_DESCRIPTION

    def __init__(self, length: int, max_length: int):
        self.length = length
        self.max_length = max_length
        super().__init__(
            f"Description is {length} characters; at most {max_length} allowed"
        )


class InvalidDocumentError(ClaimValidationError):
    """Supporting document metadata was rejected (type or size)."""

    reason = ValidationFailure.INVALID_DOCUMENT

    def __init__(self, filename: str, problem: str):
        self.filename = filename
        self.problem = problem
        super().__init__(f"Document {filename!r} rejected: {problem}")


# Rejection


class MissingReasonError(ClaimsKernelError):
    """Reject action was requested without rejection text."""

    code: str = "MISSING_REASON"

    def __init__(self, claim_id: str, action: str):
        self.claim_id = claim_id
        self.action = action
        super().__init__(f"Rejection reason is required to '{action}' claim {claim_id}")


# Business policy


class PolicyViolationError(ClaimsKernelError):
    """Base exception for business-policy refusals (not data integrity)."""

    code: str = "POLICY_VIOLATION"


class ApprovalLimitExceededError(PolicyViolationError):
    """Claim amount exceeds the final-approval limit."""

    code: str = "APPROVAL_LIMIT_EXCEEDED"

    def __init__(self, claim_id: str, amount: str, limit: str):
        self.claim_id = claim_id
        self.amount = amount
        self.limit = limit
        super().__init__(
            f"Claim {claim_id} amount {amount} exceeds final approval limit {limit}; "
            "additional review required"
        )


# Submission


class DuplicateClaimPeriodError(ClaimsKernelError):
    """Owner already submitted a claim for this period."""

    code: str = "DUPLICATE_CLAIM_PERIOD"

    def __init__(self, owner_id: str, period: str, existing_claim_id: str):
        self.owner_id = owner_id
        self.period = period
        self.existing_claim_id = existing_claim_id
        super().__init__(
            f"A claim for period {period!r} already exists: {existing_claim_id}"
        )


# Integrity


class ClaimInvariantError(ClaimsKernelError):
    """Refused to persist a claim that violates a data invariant."""

    code: str = "CLAIM_INVARIANT_VIOLATION"

    def __init__(self, claim_id: str, violations: tuple[str, ...]):
        self.claim_id = claim_id
        self.violations = violations
        super().__init__(
            f"Claim {claim_id} violates invariants: {'; '.join(violations)}"
        )


# Concurrency


class ConcurrencyError(ClaimsKernelError):
    """Base exception for concurrency-related errors."""

    code: str = "CONCURRENCY_ERROR"


class ConcurrentModificationError(ConcurrencyError):
    """Claim was modified by another transaction between read and write."""

    code: str = "CONCURRENT_MODIFICATION"

    def __init__(self, claim_id: str, expected_version: int):
        self.claim_id = claim_id
        self.expected_version = expected_version
        super().__init__(
            f"Claim {claim_id} was modified by another transaction "
            f"(expected version {expected_version})"
        )


# Storage


class ClaimStorageError(ClaimsKernelError):
    """Persistence layer failure."""

    code: str = "STORAGE_ERROR"

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"Storage failure during {operation}: {detail}")
