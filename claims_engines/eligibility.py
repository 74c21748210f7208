"""
claims_engines.eligibility -- Eligibility validator for approval transitions.

Responsibility:
    Decide whether a claim is well-formed enough to be approved.  Checks
    run in a fixed order and the first failure wins:

    1. workload must be > 0 and <= ``policy.coordinator_max_workload``
    2. hourly rate must be > 0 and <= ``policy.max_hourly_rate``
    3. amount must equal workload * hourly_rate exactly
    4. at least one supporting document must be attached

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Failure modes:
    - ``validate_eligibility`` raises the ``ClaimValidationError`` subclass
      for the first failing rule.  ``find_eligibility_failure`` returns it
      instead, for callers that only want to report.
"""

from __future__ import annotations

from claims_kernel.domain.claim import Claim
from claims_kernel.domain.policy import ClaimPolicy
from claims_kernel.exceptions import (
    AmountMismatchError,
    ClaimValidationError,
    InvalidRateError,
    InvalidWorkloadError,
    MissingDocumentsError,
)


def find_eligibility_failure(
    claim: Claim, policy: ClaimPolicy | None = None,
) -> ClaimValidationError | None:
    """Return the first rule the claim breaks, or None if it is eligible."""
    policy = policy or ClaimPolicy.default()

    workload = claim.workload
    if (
        not workload.is_finite()
        or workload <= 0
        or workload > policy.coordinator_max_workload
    ):
        return InvalidWorkloadError(str(workload), str(policy.coordinator_max_workload))

    rate = claim.hourly_rate
    if not rate.is_finite() or rate <= 0 or rate > policy.max_hourly_rate:
        return InvalidRateError(str(rate), str(policy.max_hourly_rate))

    expected = claim.expected_amount()
    if claim.amount != expected:
        return AmountMismatchError(str(claim.amount), str(expected))

    if not claim.documents:
        return MissingDocumentsError(str(claim.claim_id))

    return None


def validate_eligibility(claim: Claim, policy: ClaimPolicy | None = None) -> None:
    """Raise the first eligibility failure for ``claim``; return None if eligible."""
    failure = find_eligibility_failure(claim, policy)
    if failure is not None:
        raise failure
