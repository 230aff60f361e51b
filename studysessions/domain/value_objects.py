"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from enum import Enum
from typing import Self
from uuid import UUID, uuid4


@dataclass(frozen=True)
class SessionId:
    """Unique identifier for a study Session."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def generate(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class TimeSlotId:
    """Unique identifier for a TimeSlot within a Session."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def generate(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ResourceId:
    """Unique identifier for a shared Resource."""

    value: UUID

    @classmethod
    def generate(cls) -> Self:
        return cls(value=uuid4())


@dataclass(frozen=True)
class FeedbackId:
    """Unique identifier for a Feedback entry."""

    value: UUID

    @classmethod
    def generate(cls) -> Self:
        return cls(value=uuid4())


@dataclass(frozen=True)
class UserRef:
    """A verified user identity with its resolved display name.

    Identity is the ``id``; ``name`` and ``email`` are display data only.
    """

    id: int
    name: str
    email: str = ""


class ResourceType(Enum):
    """Kinds of shared study material."""

    LINK = "link"
    NOTE = "note"
    PDF = "pdf"
    OTHER = "other"
