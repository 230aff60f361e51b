"""Pytest configuration and shared fixtures."""

from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest
from rest_framework.test import APIClient

from studysessions.domain import Session, SessionId, UserRef
from studysessions.stores.interfaces import SessionStore, UserStore

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class InMemorySessionStore(SessionStore):
    """Dict-backed SessionStore for service tests."""

    def __init__(self, sessions: Iterable[Session] = ()) -> None:
        self.sessions = {session.id: session for session in sessions}
        self.saves = 0

    def list_sessions(self) -> list[Session]:
        return sorted(self.sessions.values(), key=lambda s: s.created_at, reverse=True)

    def list_sessions_for_user(self, user_id: int) -> list[Session]:
        return [s for s in self.list_sessions() if s.is_member(user_id)]

    def get_session(self, session_id: SessionId) -> Session | None:
        return self.sessions.get(session_id)

    def create_session(self, title, description, subject, host, participants) -> Session:
        session = Session(
            id=SessionId.generate(),
            title=title,
            host=host,
            created_at=NOW,
            description=description,
            subject=subject,
            participants=tuple(participants),
        )
        self.sessions[session.id] = session
        return session

    def save_session(self, session: Session) -> Session:
        self.saves += 1
        self.sessions[session.id] = session
        return session

    def update_session(self, session_id, change) -> Session | None:
        current = self.sessions.get(session_id)
        if current is None:
            return None
        return self.save_session(change(current))


class InMemoryUserStore(UserStore):
    """List-backed UserStore for service tests."""

    def __init__(self, users: Iterable[UserRef] = ()) -> None:
        self.users = list(users)

    def get_user(self, user_id: int) -> UserRef | None:
        return next((u for u in self.users if u.id == user_id), None)

    def list_users(self) -> list[UserRef]:
        return list(self.users)

    def search_users(self, email_fragment: str, limit: int = 10) -> list[UserRef]:
        fragment = email_fragment.lower()
        return [u for u in self.users if fragment in u.email.lower()][:limit]

    def get_or_create_by_email(self, emails: Iterable[str]) -> list[UserRef]:
        resolved = []
        for email in emails:
            user = next((u for u in self.users if u.email == email), None)
            if user is None:
                user = UserRef(id=len(self.users) + 100, name=email.split("@")[0], email=email)
                self.users.append(user)
            resolved.append(user)
        return resolved


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def host() -> UserRef:
    return UserRef(id=1, name="Hana", email="hana@example.com")


@pytest.fixture
def alice() -> UserRef:
    return UserRef(id=2, name="Alice", email="alice@example.com")


@pytest.fixture
def bob() -> UserRef:
    return UserRef(id=3, name="Bob", email="bob@example.com")


@pytest.fixture
def outsider() -> UserRef:
    return UserRef(id=4, name="Olga", email="olga@example.com")


@pytest.fixture
def session(host, alice, bob, now) -> Session:
    return Session(
        id=SessionId.generate(),
        title="Linear algebra review",
        host=host,
        created_at=now - timedelta(days=2),
        description="Chapter 4 problems",
        subject="Math",
        participants=(alice, bob),
    )


@pytest.fixture
def make_session(host, now):
    """Build a session with overrides."""

    def build(**overrides) -> Session:
        base = Session(
            id=SessionId.generate(),
            title="Study group",
            host=host,
            created_at=now,
        )
        return replace(base, **overrides)

    return build


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def session_store(session) -> InMemorySessionStore:
    return InMemorySessionStore([session])


@pytest.fixture
def user_store(host, alice, bob, outsider) -> InMemoryUserStore:
    return InMemoryUserStore([host, alice, bob, outsider])


@pytest.fixture
def clock(now):
    """Mutable clock; set ``clock.now`` to move time."""

    class Clock:
        def __init__(self) -> None:
            self.now = now

        def __call__(self) -> datetime:
            return self.now

    return Clock()
