"""Analytics aggregation over a viewer's sessions.

``aggregate`` is a pure read-side transform: it never touches storage and
tolerates an empty input by returning zeroed results.
"""

import calendar
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from studysessions.domain.models import Session

TOP_SUBJECTS_LIMIT = 5
ACTIVITY_MONTHS = 6


@dataclass(frozen=True)
class SubjectCount:
    subject: str
    count: int


@dataclass(frozen=True)
class MonthlyActivity:
    month: str
    count: int


@dataclass(frozen=True)
class AnalyticsSummary:
    """Summary statistics for one viewer's sessions."""

    total_sessions: int
    completed_sessions: int
    average_rating: float
    top_subjects: tuple[SubjectCount, ...]
    average_duration: float
    participation_rate: int
    monthly_activity: tuple[MonthlyActivity, ...]


def _round(value: float, places: str) -> Decimal:
    return Decimal(str(value)).quantize(Decimal(places), rounding=ROUND_HALF_UP)


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return float(_round(sum(values) / len(values), "0.1"))


def _top_subjects(sessions: Sequence[Session]) -> tuple[SubjectCount, ...]:
    # Counter keeps first-seen order, and most_common is stable on ties.
    counts = Counter(session.subject for session in sessions if session.subject)
    return tuple(
        SubjectCount(subject=subject, count=count)
        for subject, count in counts.most_common(TOP_SUBJECTS_LIMIT)
    )


def _participation_rate(sessions: Sequence[Session], viewer_id: int) -> int:
    if not sessions:
        return 0
    participated = sum(1 for session in sessions if not session.is_host(viewer_id))
    return int(_round(participated / len(sessions) * 100, "1"))


def _recent_months(now: datetime) -> list[tuple[int, int]]:
    """Return (year, month) pairs for the last months up to now, oldest first."""
    current = now.year * 12 + now.month - 1
    months = []
    for offset in range(ACTIVITY_MONTHS - 1, -1, -1):
        year, index = divmod(current - offset, 12)
        months.append((year, index + 1))
    return months


def _monthly_activity(sessions: Sequence[Session], now: datetime) -> tuple[MonthlyActivity, ...]:
    created = Counter()
    for session in sessions:
        moment = session.created_at
        if now.tzinfo is not None and moment.tzinfo is not None:
            moment = moment.astimezone(now.tzinfo)
        created[(moment.year, moment.month)] += 1

    return tuple(
        MonthlyActivity(month=calendar.month_abbr[month], count=created[(year, month)])
        for year, month in _recent_months(now)
    )


def aggregate(sessions: Sequence[Session], viewer_id: int, now: datetime) -> AnalyticsSummary:
    """Derive summary statistics for ``viewer_id`` from a session snapshot.

    The viewer is always passed explicitly; it is never inferred from the
    sessions themselves.
    """
    ratings = [entry.rating for session in sessions for entry in session.feedback]
    durations = [
        session.finalized_slot.duration_hours
        for session in sessions
        if session.finalized_slot is not None
    ]

    return AnalyticsSummary(
        total_sessions=len(sessions),
        completed_sessions=sum(1 for session in sessions if session.feedback),
        average_rating=_mean(ratings),
        top_subjects=_top_subjects(sessions),
        average_duration=_mean(durations),
        participation_rate=_participation_rate(sessions, viewer_id),
        monthly_activity=_monthly_activity(sessions, now),
    )
