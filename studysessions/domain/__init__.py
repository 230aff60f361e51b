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
    SessionId,
    TimeSlotId,
    UserRef,
)

__all__ = [
    "Session",
    "SessionState",
    "TimeSlot",
    "Vote",
    "Resource",
    "Feedback",
    "SessionId",
    "TimeSlotId",
    "ResourceId",
    "FeedbackId",
    "ResourceType",
    "UserRef",
]
