"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable

from studysessions.domain import Session, SessionId, UserRef


class SessionStore(ABC):
    """Interface for study session persistence operations."""

    @abstractmethod
    def list_sessions(self) -> list[Session]:
        """Return all sessions ordered by created_at descending."""
        ...

    @abstractmethod
    def list_sessions_for_user(self, user_id: int) -> list[Session]:
        """Return sessions the user hosts or participates in, newest first."""
        ...

    @abstractmethod
    def get_session(self, session_id: SessionId) -> Session | None:
        """Return a session by ID, or None if not found."""
        ...

    @abstractmethod
    def create_session(
        self,
        title: str,
        description: str,
        subject: str | None,
        host: UserRef,
        participants: Iterable[UserRef],
    ) -> Session:
        """Persist a new session with no slots, resources or feedback."""
        ...

    @abstractmethod
    def save_session(self, session: Session) -> Session:
        """Write ``session`` over the stored record and return it reloaded.

        Slots, resources and feedback already stored are never removed, so
        a save from an older copy cannot drop rows added since it was read.
        """
        ...

    @abstractmethod
    def update_session(
        self, session_id: SessionId, change: Callable[[Session], Session]
    ) -> Session | None:
        """Apply ``change`` to the current record and save the result.

        The record is locked from read to write, so concurrent updates of
        one session apply in turn. Returns None if the session does not
        exist. A DomainError raised by ``change`` leaves the record as it was.
        """
        ...


class UserStore(ABC):
    """Interface for looking up user identities."""

    @abstractmethod
    def get_user(self, user_id: int) -> UserRef | None:
        """Return a user by ID, or None if not found."""
        ...

    @abstractmethod
    def list_users(self) -> list[UserRef]:
        """Return all users."""
        ...

    @abstractmethod
    def search_users(self, email_fragment: str, limit: int = 10) -> list[UserRef]:
        """Return users whose email contains the fragment, ignoring case."""
        ...

    @abstractmethod
    def get_or_create_by_email(self, emails: Iterable[str]) -> list[UserRef]:
        """Resolve emails to users, creating placeholder accounts as needed."""
        ...
