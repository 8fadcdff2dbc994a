"""
Streak calculation over a user's log activity.

Every log contributes its creation time and, when it has been edited since,
its last update time. Two policies are available and exactly one is active
for a deployment (see ``settings.STREAK_POLICY``):

* ``rolling_window``: consecutive activity instants may be at most
  ``window_hours`` apart, and the newest one must be within ``window_hours``
  of now.
* ``calendar_day``: activity is bucketed into UTC calendar days and the
  streak is the run of consecutive days ending at the newest active day,
  which must be today or yesterday.

Everything here is pure: callers pass ``now`` (or let it default to the
current UTC time) and get the same answer for the same snapshot.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Union

import pytz

from app.exceptions import MalformedTimestampError

DEFAULT_WINDOW_HOURS = 32
DEFAULT_MAX_STREAK_LOOKBACK = 1000

Timestamp = Union[datetime, str]


class StreakPolicy(str, Enum):
    ROLLING_WINDOW = "rolling_window"
    CALENDAR_DAY = "calendar_day"


class StreakStatus(str, Enum):
    NO_ACTIVITY = "no_activity"
    ACTIVE = "active"
    LAPSED = "lapsed"


@dataclass(frozen=True)
class ActivityRecord:
    """Timestamps of a single log as read from the store."""
    created_at: Optional[Timestamp]
    updated_at: Optional[Timestamp] = None
    log_id: Optional[str] = None


@dataclass(frozen=True)
class StreakResult:
    streak: int
    status: StreakStatus
    policy: StreakPolicy
    last_activity_at: Optional[datetime] = None


def to_utc(value: Timestamp, log_id: Optional[str] = None, field: str = "timestamp") -> datetime:
    """
    Normalize a stored timestamp to an aware UTC datetime.

    Naive datetimes are taken to already be UTC (that is how the database
    stores them). Strings must be ISO-8601; a trailing ``Z`` is accepted.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return pytz.utc.localize(value)
        return value.astimezone(pytz.utc)

    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise MalformedTimestampError(log_id, field, value) from e
        return to_utc(parsed, log_id, field)

    raise MalformedTimestampError(log_id, field, value)


def extract_activity_instants(records: Iterable[ActivityRecord]) -> List[datetime]:
    """Collect creation times plus any real edit times from the given records."""
    instants: List[datetime] = []
    for record in records:
        created = to_utc(record.created_at, record.log_id, "created_at")
        instants.append(created)

        if record.updated_at is not None:
            updated = to_utc(record.updated_at, record.log_id, "updated_at")
            if updated != created:
                instants.append(updated)
    return instants


def rolling_window_streak(
    instants: Iterable[datetime],
    now: datetime,
    window_hours: int = DEFAULT_WINDOW_HOURS,
    max_lookback: int = DEFAULT_MAX_STREAK_LOOKBACK,
) -> int:
    """
    Count activity instants chained together by gaps of at most ``window_hours``.

    At most ``max_lookback`` gaps are compared, so the result never exceeds
    ``max_lookback + 1``.
    """
    ordered = sorted((to_utc(i) for i in instants), reverse=True)
    if not ordered:
        return 0

    window = timedelta(hours=window_hours)
    if to_utc(now) - ordered[0] > window:
        return 0

    streak = 1
    for newer, older in zip(ordered, ordered[1:max_lookback + 1]):
        if newer - older > window:
            break
        streak += 1
    return streak


def calendar_day_streak(
    instants: Iterable[datetime],
    now: datetime,
    max_lookback: int = DEFAULT_MAX_STREAK_LOOKBACK,
) -> int:
    """
    Count consecutive UTC days with activity, ending at the most recent active day.

    Several instants on the same day count once. The streak has lapsed when
    the most recent active day is before yesterday. At most ``max_lookback``
    days are walked.
    """
    days = {to_utc(i).date() for i in instants}
    if not days:
        return 0

    today = to_utc(now).date()
    day = max(days)
    if day < today - timedelta(days=1):
        return 0

    streak = 0
    while day in days and streak < max_lookback:
        streak += 1
        day -= timedelta(days=1)
    return streak


def calculate_streak(
    records: Iterable[ActivityRecord],
    now: Optional[datetime] = None,
    policy: StreakPolicy = StreakPolicy.ROLLING_WINDOW,
    window_hours: int = DEFAULT_WINDOW_HOURS,
    max_lookback: int = DEFAULT_MAX_STREAK_LOOKBACK,
) -> StreakResult:
    """Compute the streak for a snapshot of activity records under one policy."""
    policy = StreakPolicy(policy)
    now = to_utc(now) if now is not None else datetime.now(pytz.utc)

    instants = extract_activity_instants(records)
    if not instants:
        return StreakResult(streak=0, status=StreakStatus.NO_ACTIVITY, policy=policy)

    if policy is StreakPolicy.CALENDAR_DAY:
        streak = calendar_day_streak(instants, now, max_lookback=max_lookback)
    else:
        streak = rolling_window_streak(instants, now, window_hours=window_hours, max_lookback=max_lookback)

    return StreakResult(
        streak=streak,
        status=StreakStatus.ACTIVE if streak > 0 else StreakStatus.LAPSED,
        policy=policy,
        last_activity_at=max(instants),
    )
