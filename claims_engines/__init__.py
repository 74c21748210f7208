"""
Claims engines -- pure decision functions.

Every function here takes domain values and a ``ClaimPolicy`` and either
returns a result or raises a typed ``claims_kernel.exceptions`` error.
No I/O, no clock access, no database.
"""

from claims_engines.approval_limit import (
    check_final_approval_limit,
    exceeds_final_approval_limit,
)
from claims_engines.eligibility import find_eligibility_failure, validate_eligibility
from claims_engines.submission import validate_document, validate_submission
from claims_engines.transitions import (
    TransitionPlan,
    authorize,
    plan_submission,
    plan_transition,
)

__all__ = [
    "TransitionPlan",
    "authorize",
    "check_final_approval_limit",
    "exceeds_final_approval_limit",
    "find_eligibility_failure",
    "plan_submission",
    "plan_transition",
    "validate_document",
    "validate_eligibility",
    "validate_submission",
]
