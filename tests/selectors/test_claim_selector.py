"""
Tests for ClaimSelector queues and counts, and the ClaimStatsCache.
"""

from uuid import uuid4

from claims_kernel.domain.claim import ClaimStatus, ClaimStatusCounts
from claims_kernel.selectors.claim_selector import ClaimSelector


class TestCoordinatorQueue:
    def test_open_claims_newest_first(self, session, make_claim):
        older = make_claim(submitted_offset=0)
        newer = make_claim(submitted_offset=10, status=ClaimStatus.COORDINATOR_APPROVED)
        make_claim(submitted_offset=20, status=ClaimStatus.APPROVED)
        make_claim(submitted_offset=30, status=ClaimStatus.REJECTED)

        queue = ClaimSelector(session).coordinator_queue()

        assert [c.claim_id for c in queue] == [newer.claim_id, older.claim_id]

    def test_status_filter(self, session, make_claim):
        make_claim()
        approved = make_claim(status=ClaimStatus.APPROVED)

        queue = ClaimSelector(session).coordinator_queue(status=ClaimStatus.APPROVED)

        assert [c.claim_id for c in queue] == [approved.claim_id]

    def test_owner_filter(self, session, make_claim, other_lecturer):
        make_claim()
        theirs = make_claim(owner=other_lecturer, hourly_rate=other_lecturer.hourly_rate)

        queue = ClaimSelector(session).coordinator_queue(owner_id=other_lecturer.actor_id)

        assert [c.claim_id for c in queue] == [theirs.claim_id]


class TestManagerQueue:
    def test_oldest_first(self, session, make_claim):
        later = make_claim(submitted_offset=5)
        earlier = make_claim(submitted_offset=-5)
        make_claim(status=ClaimStatus.REJECTED)

        queue = ClaimSelector(session).manager_queue()

        assert [c.claim_id for c in queue] == [earlier.claim_id, later.claim_id]


class TestOwnerHistory:
    def test_claims_for_owner(self, session, make_claim, lecturer, other_lecturer):
        first = make_claim(submitted_offset=0)
        second = make_claim(submitted_offset=1, status=ClaimStatus.APPROVED)
        make_claim(owner=other_lecturer)

        selector = ClaimSelector(session)
        assert [c.claim_id for c in selector.claims_for_owner(lecturer.actor_id)] == [
            second.claim_id, first.claim_id,
        ]
        assert len(selector.claims_for_owner(lecturer.actor_id, limit=1)) == 1

    def test_get(self, session, make_claim):
        claim = make_claim()
        selector = ClaimSelector(session)
        assert selector.get(claim.claim_id) == claim
        assert selector.get(uuid4()) is None


class TestStatusCounts:
    def test_counts(self, session, make_claim, lecturer, other_lecturer):
        make_claim()
        make_claim()
        make_claim(status=ClaimStatus.COORDINATOR_APPROVED)
        make_claim(status=ClaimStatus.APPROVED)
        make_claim(owner=other_lecturer, status=ClaimStatus.REJECTED)

        selector = ClaimSelector(session)
        counts = selector.status_counts()
        assert counts == ClaimStatusCounts(
            pending=2, coordinator_approved=1, approved=1, rejected=1,
        )
        assert counts.total == 5
        assert counts.awaiting_decision == 3
        assert selector.status_counts(other_lecturer.actor_id) == ClaimStatusCounts(rejected=1)

    def test_empty(self, session, db_engine):
        assert ClaimSelector(session).status_counts() == ClaimStatusCounts()


class TestStatsCache:
    def test_cached_until_invalidated(self, stats_cache, make_claim, captured_logs):
        make_claim()
        assert stats_cache.get().pending == 1

        make_claim()
        assert stats_cache.get().pending == 1

        assert stats_cache.invalidate() == 1
        assert stats_cache.get().pending == 2

        recomputed = [r for r in captured_logs() if r["message"] == "claim_stats_recomputed"]
        assert [r["stats_version"] for r in recomputed] == [0, 1]
