"""
Tests for the claim domain types.

Covers:
- Claim.invariant_violations(): amount, rejection reason, approval stamp
- Claim.reference formatting
- decimal_places() counting of significant fractional digits
- ClaimStatusCounts totals
- action tables: every action kind has roles, targets and notifications
"""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from claims_kernel.domain.actions import (
    ACTION_NOTIFICATIONS,
    ACTION_ROLES,
    ACTION_SOURCE_STATES,
    ACTION_TARGET_STATES,
    NOTIFICATION_SEVERITY,
    ClaimActionKind,
    NotificationTemplate,
)
from claims_kernel.domain.claim import (
    ActorRole,
    Claim,
    ClaimStatus,
    ClaimStatusCounts,
    NotificationSeverity,
    compute_amount,
    decimal_places,
)

NOW = datetime(2025, 8, 1, 9, 0, tzinfo=timezone.utc)


def make_claim(**overrides) -> Claim:
    fields = dict(
        claim_id=uuid4(),
        owner_id=uuid4(),
        period="August 2025",
        workload=Decimal("20"),
        hourly_rate=Decimal("250.00"),
        amount=Decimal("5000.00"),
        status=ClaimStatus.PENDING,
        submitted_at=NOW,
    )
    fields.update(overrides)
    return Claim(**fields)


class TestClaimInvariants:
    def test_well_formed_pending_claim_has_no_violations(self):
        assert make_claim().invariant_violations() == ()

    def test_amount_mismatch_reported(self):
        violations = make_claim(amount=Decimal("4999.99")).invariant_violations()
        assert len(violations) == 1
        assert "amount" in violations[0]

    def test_rejected_without_reason_reported(self):
        claim = make_claim(status=ClaimStatus.REJECTED, rejection_reason="   ")
        assert any("rejection_reason" in v for v in claim.invariant_violations())

    def test_reason_on_pending_claim_reported(self):
        claim = make_claim(rejection_reason="left over")
        assert any("rejection_reason" in v for v in claim.invariant_violations())

    def test_approved_requires_approved_at(self):
        claim = make_claim(status=ClaimStatus.APPROVED)
        assert any("approved_at" in v for v in claim.invariant_violations())

    def test_approved_with_stamp_is_valid(self):
        claim = make_claim(status=ClaimStatus.APPROVED, approved_at=NOW)
        assert claim.invariant_violations() == ()

    def test_decimal_equality_ignores_trailing_zeros(self):
        claim = make_claim(amount=Decimal("5000.000000000"))
        assert claim.invariant_violations() == ()


class TestClaimProperties:
    def test_reference_uses_first_eight_hex_digits(self):
        claim = make_claim(claim_id=UUID("0123abcd-0000-0000-0000-000000000000"))
        assert claim.reference == "CL-0123ABCD"

    @pytest.mark.parametrize("status,terminal", [
        (ClaimStatus.PENDING, False),
        (ClaimStatus.COORDINATOR_APPROVED, False),
        (ClaimStatus.APPROVED, True),
        (ClaimStatus.REJECTED, True),
    ])
    def test_is_terminal(self, status, terminal):
        assert make_claim(status=status).is_terminal is terminal

    def test_compute_amount(self):
        assert compute_amount(Decimal("12.5"), Decimal("333.33")) == Decimal("4166.625")

    @pytest.mark.parametrize("value, places", [
        ("20", 0),
        ("20.000", 0),
        ("7.50", 1),
        ("250.15", 2),
        ("7.3333333333", 10),
        ("1E+2", 0),
    ])
    def test_decimal_places(self, value, places):
        assert decimal_places(Decimal(value)) == places


class TestClaimStatusCounts:
    def test_totals(self):
        counts = ClaimStatusCounts(pending=2, coordinator_approved=1, approved=4, rejected=3)
        assert counts.total == 10
        assert counts.awaiting_decision == 3


class TestActionTables:
    def test_every_action_has_roles_targets_and_notifications(self):
        for kind in ClaimActionKind:
            assert ACTION_ROLES[kind]
            assert kind in ACTION_TARGET_STATES
            assert kind in ACTION_NOTIFICATIONS

    def test_every_existing_claim_action_has_source_states(self):
        for kind in ClaimActionKind:
            if kind != ClaimActionKind.SUBMIT:
                assert ACTION_SOURCE_STATES[kind]

    def test_terminal_states_are_never_sources(self):
        for states in ACTION_SOURCE_STATES.values():
            assert ClaimStatus.APPROVED not in states
            assert ClaimStatus.REJECTED not in states

    def test_only_lecturers_submit(self):
        assert ACTION_ROLES[ClaimActionKind.SUBMIT] == frozenset({ActorRole.LECTURER})

    def test_notification_severities(self):
        assert NOTIFICATION_SEVERITY[NotificationTemplate.SUBMITTED] == NotificationSeverity.INFO
        assert NOTIFICATION_SEVERITY[NotificationTemplate.APPROVED] == NotificationSeverity.SUCCESS
        assert NOTIFICATION_SEVERITY[NotificationTemplate.REJECTED] == NotificationSeverity.ERROR
