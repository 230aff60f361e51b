"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in studysessions/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from studysessions.domain.value_objects import (
    FeedbackId,
    ResourceId,
    ResourceType,
    SessionId,
    TimeSlotId,
    UserRef,
)


class SessionState(Enum):
    """Scheduling state derived from a session's slots and the current time."""

    NEW = "new"
    VOTING = "voting"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Vote:
    """A user's vote for a time slot."""

    user: UserRef
    created_at: datetime


@dataclass(frozen=True)
class TimeSlot:
    """Domain representation of a candidate or confirmed meeting window."""

    id: TimeSlotId
    start_time: datetime
    end_time: datetime
    proposed_by: UserRef
    created_at: datetime
    location: str | None = None
    votes: tuple[Vote, ...] = ()

    @property
    def duration_hours(self) -> float:
        return (self.end_time - self.start_time).total_seconds() / 3600

    def has_vote_from(self, user_id: int) -> bool:
        return any(vote.user.id == user_id for vote in self.votes)


@dataclass(frozen=True)
class Resource:
    """Domain representation of shared study material."""

    id: ResourceId
    title: str
    type: ResourceType
    user: UserRef
    created_at: datetime
    url: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class Feedback:
    """Domain representation of a post-session review."""

    id: FeedbackId
    rating: int
    user: UserRef
    created_at: datetime
    comment: str | None = None


@dataclass(frozen=True)
class Session:
    """Domain representation of a study Session (aggregate root)."""

    id: SessionId
    title: str
    host: UserRef
    created_at: datetime
    description: str = ""
    subject: str | None = None
    participants: tuple[UserRef, ...] = ()
    time_slots: tuple[TimeSlot, ...] = ()
    finalized_slot: TimeSlot | None = None
    resources: tuple[Resource, ...] = ()
    feedback: tuple[Feedback, ...] = ()
    updated_at: datetime | None = None

    def find_time_slot(self, slot_id: TimeSlotId) -> TimeSlot | None:
        for slot in self.time_slots:
            if slot.id == slot_id:
                return slot
        return None

    def is_host(self, user_id: int) -> bool:
        return self.host.id == user_id

    def is_member(self, user_id: int) -> bool:
        """Return True if the user hosts or participates in this session."""
        return self.is_host(user_id) or any(p.id == user_id for p in self.participants)

    def feedback_from(self, user_id: int) -> Feedback | None:
        for entry in self.feedback:
            if entry.user.id == user_id:
                return entry
        return None
