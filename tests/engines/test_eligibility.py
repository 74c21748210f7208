"""
Tests for the eligibility validator.

Covers:
- each failure reason and its boundary
- first-failure-wins ordering
- policy-driven limits
"""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from claims_engines.eligibility import find_eligibility_failure, validate_eligibility
from claims_kernel.domain.claim import Claim, ClaimStatus, SupportingDocument
from claims_kernel.domain.policy import ClaimPolicy
from claims_kernel.exceptions import (
    AmountMismatchError,
    ClaimValidationError,
    InvalidRateError,
    InvalidWorkloadError,
    MissingDocumentsError,
    ValidationFailure,
)

NOW = datetime(2025, 8, 1, 9, 0, tzinfo=timezone.utc)
DOC = SupportingDocument(
    document_id=uuid4(),
    filename="timesheet.pdf",
    size_bytes=1024,
    content_type="application/pdf",
    storage_path="uploads/timesheet.pdf",
)


def claim_with(workload="20", rate="250", amount=None, documents=(DOC,)) -> Claim:
    workload, rate = Decimal(workload), Decimal(rate)
    return Claim(
        claim_id=uuid4(),
        owner_id=uuid4(),
        period="August 2025",
        workload=workload,
        hourly_rate=rate,
        amount=Decimal(amount) if amount is not None else workload * rate,
        status=ClaimStatus.PENDING,
        submitted_at=NOW,
        documents=documents,
    )


class TestEligibilityPasses:
    def test_well_formed_claim_passes(self):
        validate_eligibility(claim_with())
        assert find_eligibility_failure(claim_with()) is None

    def test_boundaries_inclusive(self):
        validate_eligibility(claim_with(workload="160", rate="500"))

    def test_repeatable(self):
        claim = claim_with(documents=())
        first = find_eligibility_failure(claim)
        second = find_eligibility_failure(claim)
        assert type(first) is type(second) is MissingDocumentsError


class TestEligibilityFailures:
    @pytest.mark.parametrize("workload", ["0", "-1", "160.01", "180"])
    def test_invalid_workload(self, workload):
        with pytest.raises(InvalidWorkloadError) as exc_info:
            validate_eligibility(claim_with(workload=workload))
        assert exc_info.value.reason == ValidationFailure.INVALID_WORKLOAD
        assert exc_info.value.code == "VALIDATION_FAILED"

    @pytest.mark.parametrize("rate", ["0", "-250", "500.01"])
    def test_invalid_rate(self, rate):
        with pytest.raises(InvalidRateError):
            validate_eligibility(claim_with(rate=rate))

    def test_amount_mismatch(self):
        with pytest.raises(AmountMismatchError) as exc_info:
            validate_eligibility(claim_with(amount="4999.99"))
        assert exc_info.value.expected == "5000"

    def test_missing_documents(self):
        """workload 20, rate 250, amount 5000, no documents."""
        with pytest.raises(MissingDocumentsError) as exc_info:
            validate_eligibility(claim_with(documents=()))
        assert exc_info.value.reason == ValidationFailure.MISSING_DOCUMENTS


class TestEligibilityOrdering:
    def test_workload_checked_before_rate(self):
        failure = find_eligibility_failure(claim_with(workload="0", rate="0"))
        assert isinstance(failure, InvalidWorkloadError)

    def test_rate_checked_before_amount(self):
        failure = find_eligibility_failure(claim_with(rate="600", amount="1"))
        assert isinstance(failure, InvalidRateError)

    def test_amount_checked_before_documents(self):
        failure = find_eligibility_failure(claim_with(amount="1", documents=()))
        assert isinstance(failure, AmountMismatchError)

    def test_all_failures_are_validation_errors(self):
        failure = find_eligibility_failure(claim_with(documents=()))
        assert isinstance(failure, ClaimValidationError)


class TestEligibilityPolicy:
    def test_stricter_policy_applies(self):
        policy = ClaimPolicy(coordinator_max_workload=Decimal("10"))
        with pytest.raises(InvalidWorkloadError) as exc_info:
            validate_eligibility(claim_with(workload="20"), policy)
        assert exc_info.value.max_workload == "10"

    def test_rate_cap_from_policy(self):
        policy = ClaimPolicy(max_hourly_rate=Decimal("600"))
        validate_eligibility(claim_with(rate="550"), policy)
