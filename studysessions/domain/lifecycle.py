"""Session lifecycle: the state-changing operations on a study Session.

Every operation takes a Session and returns a new Session. A rejected
operation raises a DomainError and the input Session is left as it was,
so callers can save the result as a single replace of the record.

States are never stored. ``derive_state`` recomputes them from the time
slots, the finalized slot and the current time:

    NEW -> VOTING -> CONFIRMED -> COMPLETED
"""

from dataclasses import replace
from datetime import datetime

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
from studysessions.domain.models import (
    Feedback,
    Resource,
    Session,
    SessionState,
    TimeSlot,
    Vote,
)
from studysessions.domain.value_objects import (
    FeedbackId,
    ResourceId,
    ResourceType,
    TimeSlotId,
    UserRef,
)

MIN_RATING = 1
MAX_RATING = 5


def derive_state(session: Session, now: datetime) -> SessionState:
    """Return the scheduling state of a session at ``now``."""
    if session.finalized_slot is not None:
        if now < session.finalized_slot.end_time:
            return SessionState.CONFIRMED
        return SessionState.COMPLETED
    if session.time_slots:
        return SessionState.VOTING
    return SessionState.NEW


def propose_time_slot(
    session: Session,
    proposer: UserRef,
    start_time: datetime,
    end_time: datetime,
    *,
    now: datetime,
    location: str | None = None,
) -> Session:
    """Append a new time slot with no votes.

    Raises:
        InvalidRangeError: If end_time is not after start_time.
    """
    if end_time <= start_time:
        raise InvalidRangeError()

    slot = TimeSlot(
        id=TimeSlotId.generate(),
        start_time=start_time,
        end_time=end_time,
        proposed_by=proposer,
        created_at=now,
        location=location or None,
    )
    return replace(session, time_slots=session.time_slots + (slot,))


def vote_for_time_slot(
    session: Session,
    voter: UserRef,
    slot_id: TimeSlotId,
    *,
    now: datetime,
) -> Session:
    """Record the voter's single active vote on the given slot.

    Any vote the voter holds on another slot of the session is removed.

    Raises:
        TimeSlotNotFoundError: If the slot is not part of the session.
        AlreadyVotedError: If the voter already voted for this slot.
    """
    target = session.find_time_slot(slot_id)
    if target is None:
        raise TimeSlotNotFoundError()
    if target.has_vote_from(voter.id):
        raise AlreadyVotedError()

    slots = []
    for slot in session.time_slots:
        votes = tuple(vote for vote in slot.votes if vote.user.id != voter.id)
        if slot.id == slot_id:
            votes += (Vote(user=voter, created_at=now),)
        slots.append(replace(slot, votes=votes))
    return replace(session, time_slots=tuple(slots))


def finalize_time_slot(
    session: Session,
    requester: UserRef,
    slot_id: TimeSlotId,
) -> Session:
    """Freeze one slot as the session's confirmed meeting time.

    The host may pick any slot regardless of votes, and may finalize again
    to replace an earlier choice.

    Raises:
        ForbiddenError: If the requester is not the host.
        TimeSlotNotFoundError: If the slot is not part of the session.
    """
    if not session.is_host(requester.id):
        raise ForbiddenError()
    slot = session.find_time_slot(slot_id)
    if slot is None:
        raise TimeSlotNotFoundError()

    return replace(session, finalized_slot=replace(slot))


def submit_feedback(
    session: Session,
    submitter: UserRef,
    rating: int,
    *,
    now: datetime,
    comment: str | None = None,
) -> Session:
    """Append the submitter's review once the finalized slot has ended.

    Raises:
        NoFinalizedSlotError: If no slot has been finalized.
        SessionNotEndedError: If ``now`` is before the finalized slot's end.
        DuplicateFeedbackError: If the submitter already left feedback.
        InvalidRatingError: If the rating is not an integer from 1 to 5.
    """
    if session.finalized_slot is None:
        raise NoFinalizedSlotError()
    if now < session.finalized_slot.end_time:
        raise SessionNotEndedError()
    if session.feedback_from(submitter.id) is not None:
        raise DuplicateFeedbackError()
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidRatingError()
    if not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidRatingError()

    entry = Feedback(
        id=FeedbackId.generate(),
        rating=rating,
        user=submitter,
        created_at=now,
        comment=comment or None,
    )
    return replace(session, feedback=session.feedback + (entry,))


def add_resource(
    session: Session,
    contributor: UserRef,
    title: str,
    resource_type: str = ResourceType.LINK.value,
    *,
    now: datetime,
    url: str | None = None,
    description: str | None = None,
) -> Session:
    """Append a shared resource.

    Raises:
        InvalidResourceError: If the title is blank, the type is unknown,
            or a link has no url.
    """
    if not title or not title.strip():
        raise InvalidResourceError("Resource title is required")
    try:
        kind = ResourceType(resource_type)
    except ValueError:
        raise InvalidResourceError(f"Unknown resource type: {resource_type}") from None
    if kind is ResourceType.LINK and not url:
        raise InvalidResourceError("A link resource requires a url")

    resource = Resource(
        id=ResourceId.generate(),
        title=title.strip(),
        type=kind,
        user=contributor,
        created_at=now,
        url=url or None,
        description=description or None,
    )
    return replace(session, resources=session.resources + (resource,))
