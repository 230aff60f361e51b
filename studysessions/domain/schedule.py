"""Read-side groupings for the dashboard and calendar views."""

import calendar
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, tzinfo

from studysessions.domain.lifecycle import derive_state
from studysessions.domain.models import Session, SessionState


@dataclass(frozen=True)
class DashboardGroups:
    """Sessions grouped by scheduling progress."""

    upcoming: tuple[Session, ...]
    pending: tuple[Session, ...]
    new: tuple[Session, ...]


@dataclass(frozen=True)
class CalendarDay:
    day: int
    sessions: tuple[Session, ...]


@dataclass(frozen=True)
class CalendarMonth:
    """One month grid of finalized sessions, plus what is coming up next."""

    year: int
    month: int
    days: tuple[CalendarDay, ...]
    upcoming: tuple[Session, ...]


def group_for_dashboard(sessions: Sequence[Session], now: datetime) -> DashboardGroups:
    upcoming = []
    pending = []
    new = []
    for session in sessions:
        state = derive_state(session, now)
        if state is SessionState.NEW:
            new.append(session)
        elif state is SessionState.VOTING:
            pending.append(session)
        elif session.finalized_slot.start_time > now:
            upcoming.append(session)
    return DashboardGroups(upcoming=tuple(upcoming), pending=tuple(pending), new=tuple(new))


def upcoming_sessions(sessions: Sequence[Session], now: datetime) -> tuple[Session, ...]:
    """Return finalized sessions that start after ``now``, soonest first."""
    finalized = [
        session
        for session in sessions
        if session.finalized_slot is not None and session.finalized_slot.start_time > now
    ]
    return tuple(sorted(finalized, key=lambda session: session.finalized_slot.start_time))


def calendar_month(
    sessions: Sequence[Session],
    year: int,
    month: int,
    tz: tzinfo | None = None,
) -> tuple[CalendarDay, ...]:
    """Place finalized sessions on the days of one month.

    Every day of the month is present; days without sessions are empty.
    Start times are converted to ``tz`` before picking the day.
    """
    _, days_in_month = calendar.monthrange(year, month)
    by_day: dict[int, list[tuple[datetime, Session]]] = {
        day: [] for day in range(1, days_in_month + 1)
    }
    for session in sessions:
        if session.finalized_slot is None:
            continue
        start = session.finalized_slot.start_time
        if tz is not None and start.tzinfo is not None:
            start = start.astimezone(tz)
        if start.year == year and start.month == month:
            by_day[start.day].append((start, session))

    return tuple(
        CalendarDay(
            day=day,
            sessions=tuple(session for _, session in sorted(entries, key=lambda entry: entry[0])),
        )
        for day, entries in by_day.items()
    )
