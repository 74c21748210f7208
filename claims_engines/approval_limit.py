"""
claims_engines.approval_limit -- Final-approval amount threshold.

A claim whose amount exceeds ``policy.final_approval_max_amount`` cannot be
given final approval by a manager; it needs review outside this workflow.
Independent of the eligibility validator.
"""

from __future__ import annotations

from claims_kernel.domain.claim import Claim
from claims_kernel.domain.policy import ClaimPolicy
from claims_kernel.exceptions import ApprovalLimitExceededError


def exceeds_final_approval_limit(claim: Claim, policy: ClaimPolicy) -> bool:
    return claim.amount > policy.final_approval_max_amount


def check_final_approval_limit(claim: Claim, policy: ClaimPolicy) -> None:
    """Raise ApprovalLimitExceededError if the claim is above the limit."""
    if exceeds_final_approval_limit(claim, policy):
        raise ApprovalLimitExceededError(
            str(claim.claim_id),
            str(claim.amount),
            str(policy.final_approval_max_amount),
        )
