"""
claims_engines.submission -- Input checks applied when a claim is created.

Submission has its own workload cap (``policy.submission_max_workload``),
which is looser than the cap the eligibility validator applies at review
time.  A claim submitted with more hours than the review cap is accepted
here and refused later by the coordinator.

Pure; zero I/O.
"""

from __future__ import annotations

import os
from decimal import Decimal

from claims_kernel.domain.claim import SupportingDocument, decimal_places
from claims_kernel.domain.policy import ClaimPolicy
from claims_kernel.exceptions import (
    InvalidDescriptionError,
    InvalidDocumentError,
    InvalidPeriodError,
    InvalidWorkloadError,
)


def validate_document(document: SupportingDocument, policy: ClaimPolicy) -> None:
    """Check a document's extension and size against the policy."""
    _, extension = os.path.splitext(document.filename)
    if extension.lower() not in policy.allowed_document_extensions:
        raise InvalidDocumentError(
            document.filename,
            f"file type {extension or '(none)'} is not allowed; allowed: "
            + ", ".join(policy.allowed_document_extensions),
        )
    if document.size_bytes <= 0:
        raise InvalidDocumentError(document.filename, "file is empty")
    if document.size_bytes > policy.max_document_size_bytes:
        raise InvalidDocumentError(
            document.filename,
            f"file is {document.size_bytes} bytes; "
            f"at most {policy.max_document_size_bytes} allowed",
        )


def validate_submission(
    *,
    period: str,
    workload: Decimal,
    description: str,
    documents: tuple[SupportingDocument, ...],
    policy: ClaimPolicy,
) -> None:
    """Raise the first problem found with a new claim's inputs.

    ``period`` is checked with surrounding whitespace removed, which is
    also how it is stored.
    """
    if (
        not workload.is_finite()
        or workload <= 0
        or workload > policy.submission_max_workload
    ):
        raise InvalidWorkloadError(str(workload), str(policy.submission_max_workload))
    if decimal_places(workload) > policy.workload_decimal_places:
        raise InvalidWorkloadError(
            str(workload),
            str(policy.submission_max_workload),
            policy.workload_decimal_places,
        )

    period = period.strip()
    if not period or len(period) > policy.max_period_length:
        raise InvalidPeriodError(period, policy.max_period_length)

    if len(description) > policy.max_description_length:
        raise InvalidDescriptionError(len(description), policy.max_description_length)

    for document in documents:
        validate_document(document, policy)
