"""Session service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Each mutation hands a pure lifecycle transform to the store, which applies
it to the current record under a lock. A rejected operation never writes.
"""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from django.utils import timezone

from studysessions.domain import lifecycle
from studysessions.domain.analytics import AnalyticsSummary, aggregate
from studysessions.domain.errors import (
    InvalidSessionIdError,
    NotAMemberError,
    SessionNotFoundError,
    TimeSlotNotFoundError,
)
from studysessions.domain.models import Session
from studysessions.domain.schedule import (
    CalendarMonth,
    DashboardGroups,
    calendar_month,
    group_for_dashboard,
    upcoming_sessions,
)
from studysessions.domain.value_objects import SessionId, TimeSlotId, UserRef
from studysessions.stores.interfaces import SessionStore, UserStore

logger = logging.getLogger(__name__)


class SessionService:
    """Service for study session coordination."""

    def __init__(
        self,
        session_store: SessionStore,
        user_store: UserStore,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._sessions = session_store
        self._users = user_store
        self._clock = clock

    def list_sessions(self) -> list[Session]:
        """Return all sessions, newest first."""
        return self._sessions.list_sessions()

    def list_sessions_for_user(self, user: UserRef) -> list[Session]:
        """Return sessions the user hosts or participates in."""
        return self._sessions.list_sessions_for_user(user.id)

    def get_session(self, session_id: str) -> Session:
        """Return a session by ID.

        Raises:
            InvalidSessionIdError: If the session_id is not a valid UUID.
            SessionNotFoundError: If the session does not exist.
        """
        session = self._sessions.get_session(self._parse_session_id(session_id))
        if session is None:
            raise SessionNotFoundError()
        return session

    def create_session(
        self,
        host: UserRef,
        title: str,
        description: str = "",
        subject: str | None = None,
        participant_emails: Iterable[str] = (),
    ) -> Session:
        """Create a session, inviting participants by email.

        Unknown emails get placeholder accounts. The host is never listed
        as a participant of their own session.
        """
        invited = self._users.get_or_create_by_email(participant_emails)
        participants = [user for user in invited if user.id != host.id]
        session = self._sessions.create_session(
            title=title,
            description=description or "",
            subject=subject or None,
            host=host,
            participants=participants,
        )
        logger.info(
            "Session %s created by user %s with %d participants",
            session.id,
            host.id,
            len(participants),
        )
        return session

    def propose_time_slot(
        self,
        session_id: str,
        user: UserRef,
        start_time: datetime,
        end_time: datetime,
        location: str | None = None,
    ) -> Session:
        """Propose a meeting window.

        Raises:
            NotAMemberError: If the user is not host or participant.
            InvalidRangeError: If end_time is not after start_time.
        """
        now = self._clock()

        def change(session: Session) -> Session:
            self._require_member(session, user)
            return lifecycle.propose_time_slot(
                session, user, start_time, end_time, now=now, location=location
            )

        saved = self._update(session_id, change)
        logger.info(
            "Time slot %s proposed for session %s by user %s",
            saved.time_slots[-1].id,
            saved.id,
            user.id,
        )
        return saved

    def vote_for_time_slot(self, session_id: str, user: UserRef, slot_id: str) -> Session:
        """Cast the user's vote, moving it off any other slot.

        Raises:
            NotAMemberError: If the user is not host or participant.
            TimeSlotNotFoundError: If the slot does not exist.
            AlreadyVotedError: If the user already voted for this slot.
        """
        now = self._clock()

        def change(session: Session) -> Session:
            self._require_member(session, user)
            return lifecycle.vote_for_time_slot(session, user, self._parse_slot_id(slot_id), now=now)

        saved = self._update(session_id, change)
        logger.info("User %s voted for slot %s in session %s", user.id, slot_id, saved.id)
        return saved

    def finalize_time_slot(self, session_id: str, user: UserRef, slot_id: str) -> Session:
        """Confirm a slot. Only the host may do this.

        Raises:
            ForbiddenError: If the user is not the host.
            TimeSlotNotFoundError: If the slot does not exist.
        """

        def change(session: Session) -> Session:
            return lifecycle.finalize_time_slot(session, user, self._parse_slot_id(slot_id))

        saved = self._update(session_id, change)
        logger.info("Session %s finalized on slot %s", saved.id, slot_id)
        return saved

    def add_resource(
        self,
        session_id: str,
        user: UserRef,
        title: str,
        resource_type: str = "link",
        url: str | None = None,
        description: str | None = None,
    ) -> Session:
        """Share study material with the session.

        Raises:
            NotAMemberError: If the user is not host or participant.
            InvalidResourceError: If the resource is missing required fields.
        """
        now = self._clock()

        def change(session: Session) -> Session:
            self._require_member(session, user)
            return lifecycle.add_resource(
                session,
                user,
                title,
                resource_type,
                now=now,
                url=url,
                description=description,
            )

        saved = self._update(session_id, change)
        logger.info("Resource added to session %s by user %s", saved.id, user.id)
        return saved

    def submit_feedback(
        self,
        session_id: str,
        user: UserRef,
        rating: int,
        comment: str | None = None,
    ) -> Session:
        """Leave a review after the finalized slot has ended.

        Raises:
            NotAMemberError: If the user is not host or participant.
            NoFinalizedSlotError, SessionNotEndedError, DuplicateFeedbackError,
            InvalidRatingError: See lifecycle.submit_feedback.
        """
        now = self._clock()

        def change(session: Session) -> Session:
            self._require_member(session, user)
            return lifecycle.submit_feedback(session, user, rating, now=now, comment=comment)

        saved = self._update(session_id, change)
        logger.info("Feedback submitted for session %s by user %s", saved.id, user.id)
        return saved

    def get_analytics(self, user: UserRef) -> AnalyticsSummary:
        return aggregate(self.list_sessions_for_user(user), user.id, self._clock())

    def get_dashboard(self, user: UserRef) -> DashboardGroups:
        return group_for_dashboard(self.list_sessions_for_user(user), self._clock())

    def get_calendar(self, user: UserRef, year: int, month: int) -> CalendarMonth:
        sessions = self.list_sessions_for_user(user)
        now = self._clock()
        return CalendarMonth(
            year=year,
            month=month,
            days=calendar_month(sessions, year, month, timezone.get_current_timezone()),
            upcoming=upcoming_sessions(sessions, now),
        )

    def now(self) -> datetime:
        return self._clock()

    def _update(self, session_id: str, change: Callable[[Session], Session]) -> Session:
        saved = self._sessions.update_session(self._parse_session_id(session_id), change)
        if saved is None:
            raise SessionNotFoundError()
        return saved

    @staticmethod
    def _require_member(session: Session, user: UserRef) -> None:
        if not session.is_member(user.id):
            raise NotAMemberError()

    @staticmethod
    def _parse_session_id(session_id: str) -> SessionId:
        try:
            return SessionId.from_string(session_id)
        except ValueError:
            raise InvalidSessionIdError() from None

    @staticmethod
    def _parse_slot_id(slot_id: str) -> TimeSlotId:
        try:
            return TimeSlotId.from_string(slot_id)
        except ValueError:
            raise TimeSlotNotFoundError() from None
