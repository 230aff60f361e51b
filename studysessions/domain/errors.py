"""Domain error codes for the study sessions module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_RANGE = "INVALID_RANGE"
    INVALID_SESSION_ID = "INVALID_SESSION_ID"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    TIME_SLOT_NOT_FOUND = "TIME_SLOT_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    NOT_A_MEMBER = "NOT_A_MEMBER"
    ALREADY_VOTED = "ALREADY_VOTED"
    NO_FINALIZED_SLOT = "NO_FINALIZED_SLOT"
    SESSION_NOT_ENDED = "SESSION_NOT_ENDED"
    DUPLICATE_FEEDBACK = "DUPLICATE_FEEDBACK"
    INVALID_RATING = "INVALID_RATING"
    INVALID_RESOURCE = "INVALID_RESOURCE"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidRangeError(DomainError):
    """Raised when a proposed time slot does not end after it starts."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_RANGE,
            message="End time must be after start time",
        )


class InvalidSessionIdError(DomainError):
    """Raised when a session ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_SESSION_ID,
            message="Invalid session ID format",
        )


class SessionNotFoundError(DomainError):
    """Raised when a session is not found."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.SESSION_NOT_FOUND,
            message="Session not found",
        )


class TimeSlotNotFoundError(DomainError):
    """Raised when a time slot is not part of the session."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.TIME_SLOT_NOT_FOUND,
            message="Time slot not found",
        )


class UserNotFoundError(DomainError):
    """Raised when a user is not found."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.USER_NOT_FOUND,
            message="User not found",
        )


class ForbiddenError(DomainError):
    """Raised when someone other than the host tries to finalize a slot."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.FORBIDDEN,
            message="Only the host can finalize a time slot",
        )


class NotAMemberError(DomainError):
    """Raised when the acting user is neither host nor participant."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NOT_A_MEMBER,
            message="You are not a member of this session",
        )


class AlreadyVotedError(DomainError):
    """Raised when a user votes twice for the same time slot."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_VOTED,
            message="You have already voted for this time slot",
        )


class NoFinalizedSlotError(DomainError):
    """Raised when feedback is submitted before any slot is finalized."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NO_FINALIZED_SLOT,
            message="Cannot submit feedback for a session without a finalized time slot",
        )


class SessionNotEndedError(DomainError):
    """Raised when feedback is submitted before the finalized slot ends."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.SESSION_NOT_ENDED,
            message="Cannot submit feedback for a session that has not ended yet",
        )


class DuplicateFeedbackError(DomainError):
    """Raised when a user submits feedback for the same session twice."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_FEEDBACK,
            message="You have already submitted feedback for this session",
        )


class InvalidRatingError(DomainError):
    """Raised when a rating is not an integer between 1 and 5."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_RATING,
            message="Rating must be an integer between 1 and 5",
        )


class InvalidResourceError(DomainError):
    """Raised when a resource is missing required fields."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_RESOURCE, message=message)
