"""Unit tests for SessionService and UserService.

These test error handling, membership checks and domain error mapping
against in-memory stores.
Run with: pytest tests/test_services.py -v
"""

from datetime import timedelta

import pytest

from studysessions.domain.errors import (
    AlreadyVotedError,
    ForbiddenError,
    InvalidRangeError,
    InvalidSessionIdError,
    NotAMemberError,
    SessionNotEndedError,
    SessionNotFoundError,
    TimeSlotNotFoundError,
    UserNotFoundError,
)
from studysessions.services import SessionService, UserService


@pytest.fixture
def service(session_store, user_store, clock) -> SessionService:
    return SessionService(session_store, user_store, clock=clock)


def _propose(service, session, user, now, days=1, hours=2):
    start = now + timedelta(days=days)
    return service.propose_time_slot(str(session.id), user, start, start + timedelta(hours=hours))


class TestGetSession:
    """Tests for loading sessions by ID."""

    def test_invalid_id_raises_error(self, service):
        """get_session raises InvalidSessionIdError for malformed UUID."""
        with pytest.raises(InvalidSessionIdError):
            service.get_session("not-a-uuid")

    def test_not_found_raises_error(self, service):
        """get_session raises SessionNotFoundError when store returns None."""
        with pytest.raises(SessionNotFoundError):
            service.get_session("6f1c1a52-3f56-4a3e-9a7e-1f2d3c4b5a69")

    def test_returns_session(self, service, session):
        assert service.get_session(str(session.id)) == session


class TestCreateSession:
    """Tests for creating sessions."""

    def test_invites_by_email_and_excludes_host(self, service, host, alice):
        created = service.create_session(
            host,
            "Organic chemistry",
            subject="Chemistry",
            participant_emails=[alice.email, host.email, "new@example.com"],
        )
        emails = [p.email for p in created.participants]
        assert emails == [alice.email, "new@example.com"]
        assert created.host == host
        assert created.time_slots == ()
        assert created.finalized_slot is None

    def test_blank_subject_stored_as_none(self, service, host):
        assert service.create_session(host, "Untitled", subject="").subject is None


class TestTimeSlots:
    """Tests for proposing, voting and finalizing through the service."""

    def test_member_proposes_slot(self, service, session, alice, now):
        updated = _propose(service, session, alice, now)
        assert len(updated.time_slots) == 1
        assert updated.time_slots[0].proposed_by == alice

    def test_outsider_cannot_propose(self, service, session, outsider, now, session_store):
        with pytest.raises(NotAMemberError):
            _propose(service, session, outsider, now)
        assert session_store.saves == 0

    def test_invalid_range_not_saved(self, service, session, alice, now, session_store):
        with pytest.raises(InvalidRangeError):
            service.propose_time_slot(str(session.id), alice, now, now)
        assert session_store.saves == 0

    def test_propose_on_missing_session(self, service, alice, now, session_store):
        with pytest.raises(SessionNotFoundError):
            service.propose_time_slot(
                "6f1c1a52-3f56-4a3e-9a7e-1f2d3c4b5a69", alice, now, now + timedelta(hours=1)
            )
        assert session_store.saves == 0

    def test_each_proposal_builds_on_the_stored_record(self, service, session, host, alice, now, session_store):
        first = _propose(service, session, host, now, days=1)
        second = _propose(service, session, alice, now, days=2)
        assert second.time_slots[0] == first.time_slots[0]
        assert session_store.get_session(session.id) == second

    def test_vote_moves_between_slots(self, service, session, host, alice, now):
        _propose(service, session, host, now, days=1)
        updated = _propose(service, session, alice, now, days=2)
        slot_a, slot_b = (str(slot.id) for slot in updated.time_slots)

        service.vote_for_time_slot(str(session.id), alice, slot_a)
        updated = service.vote_for_time_slot(str(session.id), alice, slot_b)

        assert [len(slot.votes) for slot in updated.time_slots] == [0, 1]
        with pytest.raises(AlreadyVotedError):
            service.vote_for_time_slot(str(session.id), alice, slot_b)

    def test_malformed_slot_id_is_not_found(self, service, session, alice):
        with pytest.raises(TimeSlotNotFoundError):
            service.vote_for_time_slot(str(session.id), alice, "nope")

    def test_only_host_finalizes(self, service, session, host, alice, now):
        updated = _propose(service, session, alice, now)
        slot_id = str(updated.time_slots[0].id)

        with pytest.raises(ForbiddenError):
            service.finalize_time_slot(str(session.id), alice, slot_id)

        finalized = service.finalize_time_slot(str(session.id), host, slot_id)
        assert str(finalized.finalized_slot.id) == slot_id


class TestFeedbackAndResources:
    """Tests for feedback timing and resource sharing."""

    def test_feedback_after_session_ends(self, service, session, host, alice, now, clock):
        updated = _propose(service, session, host, now, days=1, hours=2)
        service.finalize_time_slot(str(session.id), host, str(updated.time_slots[0].id))

        with pytest.raises(SessionNotEndedError):
            service.submit_feedback(str(session.id), alice, 5)

        clock.now = now + timedelta(days=1, hours=2)
        result = service.submit_feedback(str(session.id), alice, 5, comment="Great")
        assert [(f.user, f.rating) for f in result.feedback] == [(alice, 5)]

    def test_outsider_cannot_add_resource(self, service, session, outsider):
        with pytest.raises(NotAMemberError):
            service.add_resource(str(session.id), outsider, "Notes", "note")

    def test_participant_adds_resource(self, service, session, bob):
        updated = service.add_resource(
            str(session.id), bob, "Past paper", "pdf", url="https://example.com/p.pdf"
        )
        assert updated.resources[0].title == "Past paper"


class TestReadSide:
    """Tests for analytics, dashboard and calendar through the service."""

    def test_analytics_for_viewer(self, service, alice):
        summary = service.get_analytics(alice)
        assert summary.total_sessions == 1
        assert summary.participation_rate == 100

    def test_analytics_for_outsider_is_empty(self, service, outsider):
        assert service.get_analytics(outsider).total_sessions == 0

    def test_dashboard_and_calendar(self, service, session, host, now):
        updated = _propose(service, session, host, now, days=1)
        assert len(service.get_dashboard(host).pending) == 1

        service.finalize_time_slot(str(session.id), host, str(updated.time_slots[0].id))
        start = updated.time_slots[0].start_time
        month = service.get_calendar(host, start.year, start.month)
        assert [s.id for s in month.days[start.day - 1].sessions] == [session.id]
        assert [s.id for s in month.upcoming] == [session.id]


class TestUserService:
    """Tests for UserService."""

    def test_get_user_invalid_id(self, user_store):
        with pytest.raises(UserNotFoundError):
            UserService(user_store).get_user("abc")

    def test_get_user_missing(self, user_store):
        with pytest.raises(UserNotFoundError):
            UserService(user_store).get_user("404")

    def test_get_user(self, user_store, alice):
        assert UserService(user_store).get_user(str(alice.id)) == alice

    def test_search_users(self, user_store, bob):
        assert UserService(user_store).search_users(" BOB@ ") == [bob]

    def test_blank_search_returns_nothing(self, user_store):
        assert UserService(user_store).search_users("  ") == []
