"""Unit tests for the session lifecycle operations.

Run with: pytest tests/test_lifecycle.py -v
"""

from datetime import timedelta

import pytest

from studysessions.domain import ResourceType, TimeSlotId
from studysessions.domain.errors import (
    AlreadyVotedError,
    DuplicateFeedbackError,
    ForbiddenError,
    InvalidRangeError,
    InvalidRatingError,
    InvalidResourceError,
    NoFinalizedSlotError,
    SessionNotEndedError,
    TimeSlotNotFoundError,
)
from studysessions.domain.lifecycle import (
    add_resource,
    finalize_time_slot,
    propose_time_slot,
    submit_feedback,
    vote_for_time_slot,
)


@pytest.fixture
def voting_session(session, host, alice, now):
    """Session with two proposed slots, A then B."""
    session = propose_time_slot(
        session, host, now + timedelta(days=1), now + timedelta(days=1, hours=2), now=now
    )
    return propose_time_slot(
        session, alice, now + timedelta(days=2), now + timedelta(days=2, hours=1), now=now,
        location="Library room 2",
    )


def _slot_ids(session):
    return [slot.id for slot in session.time_slots]


class TestProposeTimeSlot:
    """Tests for proposing time slots."""

    def test_appends_one_slot_without_votes(self, session, alice, now):
        updated = propose_time_slot(
            session, alice, now + timedelta(hours=1), now + timedelta(hours=2), now=now
        )
        assert len(updated.time_slots) == 1
        slot = updated.time_slots[0]
        assert slot.votes == ()
        assert slot.proposed_by == alice
        assert slot.location is None

    def test_preserves_proposal_order(self, voting_session, host, now):
        updated = propose_time_slot(
            voting_session, host, now + timedelta(days=3), now + timedelta(days=3, hours=1), now=now
        )
        assert _slot_ids(updated)[:2] == _slot_ids(voting_session)
        assert updated.time_slots[1].location == "Library room 2"

    @pytest.mark.parametrize("offset", [timedelta(0), timedelta(minutes=-30)])
    def test_rejects_end_not_after_start(self, session, alice, now, offset):
        with pytest.raises(InvalidRangeError):
            propose_time_slot(session, alice, now, now + offset, now=now)
        assert session.time_slots == ()

    def test_does_not_touch_finalized_slot(self, voting_session, host, now):
        finalized = finalize_time_slot(voting_session, host, voting_session.time_slots[0].id)
        updated = propose_time_slot(
            finalized, host, now + timedelta(days=5), now + timedelta(days=5, hours=1), now=now
        )
        assert updated.finalized_slot == finalized.finalized_slot


class TestVoteForTimeSlot:
    """Tests for the single-vote-per-session rule."""

    def test_records_vote(self, voting_session, alice, now):
        slot_a = voting_session.time_slots[0].id
        updated = vote_for_time_slot(voting_session, alice, slot_a, now=now)
        assert [vote.user for vote in updated.time_slots[0].votes] == [alice]
        assert updated.time_slots[0].votes[0].created_at == now
        assert updated.time_slots[0].has_vote_from(alice.id)

    def test_switching_slots_moves_the_vote(self, voting_session, alice, now):
        slot_a, slot_b = _slot_ids(voting_session)
        updated = vote_for_time_slot(voting_session, alice, slot_a, now=now)
        updated = vote_for_time_slot(updated, alice, slot_b, now=now)

        assert not updated.time_slots[0].has_vote_from(alice.id)
        assert [v.user.id for v in updated.time_slots[1].votes] == [alice.id]

    def test_revote_same_slot_rejected(self, voting_session, alice, bob, now):
        slot_a = voting_session.time_slots[0].id
        updated = vote_for_time_slot(voting_session, bob, slot_a, now=now)
        updated = vote_for_time_slot(updated, alice, slot_a, now=now)
        with pytest.raises(AlreadyVotedError):
            vote_for_time_slot(updated, alice, slot_a, now=now)

    def test_other_voters_are_kept(self, voting_session, alice, bob, now):
        slot_a, slot_b = _slot_ids(voting_session)
        updated = vote_for_time_slot(voting_session, bob, slot_a, now=now)
        updated = vote_for_time_slot(updated, alice, slot_a, now=now)
        updated = vote_for_time_slot(updated, alice, slot_b, now=now)
        assert [len(slot.votes) for slot in updated.time_slots] == [1, 1]
        assert updated.time_slots[0].has_vote_from(bob.id)

    def test_unknown_slot_rejected(self, voting_session, alice, now):
        with pytest.raises(TimeSlotNotFoundError):
            vote_for_time_slot(voting_session, alice, TimeSlotId.generate(), now=now)

    def test_rejected_vote_leaves_session_unchanged(self, voting_session, alice, now):
        slot_a = voting_session.time_slots[0].id
        voted = vote_for_time_slot(voting_session, alice, slot_a, now=now)
        with pytest.raises(AlreadyVotedError):
            vote_for_time_slot(voted, alice, slot_a, now=now + timedelta(minutes=1))
        assert voted.time_slots[0].votes[0].created_at == now


class TestFinalizeTimeSlot:
    """Tests for host-only finalization."""

    def test_host_finalizes_any_slot(self, voting_session, host, alice, bob, now):
        slot_a, slot_b = _slot_ids(voting_session)
        voted = vote_for_time_slot(voting_session, alice, slot_a, now=now)
        voted = vote_for_time_slot(voted, bob, slot_a, now=now)

        finalized = finalize_time_slot(voted, host, slot_b)
        assert finalized.finalized_slot.id == slot_b

    @pytest.mark.parametrize("requester", ["alice", "bob", "outsider"])
    def test_non_host_forbidden(self, voting_session, requester, request):
        user = request.getfixturevalue(requester)
        with pytest.raises(ForbiddenError):
            finalize_time_slot(voting_session, user, voting_session.time_slots[0].id)
        assert voting_session.finalized_slot is None

    def test_unknown_slot_rejected(self, voting_session, host):
        with pytest.raises(TimeSlotNotFoundError):
            finalize_time_slot(voting_session, host, TimeSlotId.generate())

    def test_snapshot_ignores_later_votes(self, voting_session, host, alice, now):
        slot_a = voting_session.time_slots[0].id
        finalized = finalize_time_slot(voting_session, host, slot_a)
        voted = vote_for_time_slot(finalized, alice, slot_a, now=now)

        assert len(voted.time_slots[0].votes) == 1
        assert voted.finalized_slot.votes == ()

    def test_refinalize_overwrites(self, voting_session, host):
        slot_a, slot_b = _slot_ids(voting_session)
        finalized = finalize_time_slot(voting_session, host, slot_a)
        finalized = finalize_time_slot(finalized, host, slot_b)
        assert finalized.finalized_slot.id == slot_b


class TestSubmitFeedback:
    """Tests for post-session feedback."""

    @pytest.fixture
    def finalized(self, voting_session, host):
        return finalize_time_slot(voting_session, host, voting_session.time_slots[0].id)

    def test_requires_finalized_slot(self, voting_session, alice, now):
        with pytest.raises(NoFinalizedSlotError):
            submit_feedback(voting_session, alice, 5, now=now)

    def test_rejected_before_end(self, finalized, alice):
        end = finalized.finalized_slot.end_time
        with pytest.raises(SessionNotEndedError):
            submit_feedback(finalized, alice, 4, now=end - timedelta(seconds=1))

    def test_accepted_exactly_at_end(self, finalized, alice):
        end = finalized.finalized_slot.end_time
        updated = submit_feedback(finalized, alice, 4, now=end, comment="Helpful")
        assert len(updated.feedback) == 1
        entry = updated.feedback[0]
        assert (entry.rating, entry.comment, entry.user) == (4, "Helpful", alice)

    def test_duplicate_rejected(self, finalized, alice):
        after = finalized.finalized_slot.end_time + timedelta(hours=1)
        updated = submit_feedback(finalized, alice, 4, now=after)
        with pytest.raises(DuplicateFeedbackError):
            submit_feedback(updated, alice, 2, now=after)
        assert len(updated.feedback) == 1

    @pytest.mark.parametrize("rating", [0, 6, -1, 4.5, True])
    def test_invalid_rating_rejected(self, finalized, alice, rating):
        after = finalized.finalized_slot.end_time
        with pytest.raises(InvalidRatingError):
            submit_feedback(finalized, alice, rating, now=after)

    @pytest.mark.parametrize("rating", [1, 5])
    def test_rating_bounds_inclusive(self, finalized, alice, rating):
        after = finalized.finalized_slot.end_time
        assert submit_feedback(finalized, alice, rating, now=after).feedback[0].rating == rating


class TestAddResource:
    """Tests for sharing resources."""

    def test_appends_link(self, session, alice, now):
        updated = add_resource(session, alice, "Lecture notes", "link", now=now, url="https://example.com/notes")
        resource = updated.resources[0]
        assert resource.type is ResourceType.LINK
        assert resource.url == "https://example.com/notes"
        assert resource.user == alice

    def test_note_without_url(self, session, alice, now):
        updated = add_resource(session, alice, "Summary", "note", now=now, description="Key ideas")
        assert updated.resources[0].url is None

    def test_link_requires_url(self, session, alice, now):
        with pytest.raises(InvalidResourceError):
            add_resource(session, alice, "Slides", "link", now=now)

    def test_unknown_type_rejected(self, session, alice, now):
        with pytest.raises(InvalidResourceError):
            add_resource(session, alice, "Video", "video", now=now, url="https://example.com")

    def test_blank_title_rejected(self, session, alice, now):
        with pytest.raises(InvalidResourceError):
            add_resource(session, alice, "   ", "note", now=now)
