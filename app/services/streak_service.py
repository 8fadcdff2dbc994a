from __future__ import annotations
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session

from app.config import settings
from app.crud.activity import fetch_activity_records
from app.schemas.user import CurrentUser
from app.services.streak_calculator import StreakPolicy, StreakResult, calculate_streak
from app.utils.logger import get_logger

logger = get_logger(__name__)


def configured_policy() -> StreakPolicy:
    """The streak policy selected for this deployment."""
    return StreakPolicy(settings.STREAK_POLICY)


def get_streak_result(
    db: Session,
    user_id: str,
    now: Optional[datetime] = None,
    policy: Optional[StreakPolicy] = None,
) -> StreakResult:
    """
    Read a user's activity and compute their streak.

    ActivityReadError from the reader propagates unchanged so a failed read is
    never reported as a broken streak.
    """
    records = fetch_activity_records(db, user_id)
    result = calculate_streak(
        records,
        now=now,
        policy=policy or configured_policy(),
        window_hours=settings.STREAK_WINDOW_HOURS,
        max_lookback=settings.MAX_STREAK_LOOKBACK,
    )
    logger.debug(
        f"Streak for user {user_id}: streak={result.streak}, status={result.status.value}, "
        f"policy={result.policy.value}, records={len(records)}"
    )
    return result


def get_streak(
    db: Session,
    user_id: str,
    now: Optional[datetime] = None,
    policy: Optional[StreakPolicy] = None,
) -> int:
    """Current streak of a user (0 when they have no activity)."""
    return get_streak_result(db, user_id, now=now, policy=policy).streak


def get_current_user_streak(
    db: Session,
    current_user: Optional[CurrentUser],
    now: Optional[datetime] = None,
) -> int:
    """Streak of the authenticated caller, or 0 when nobody is signed in."""
    if current_user is None:
        return 0
    return get_streak(db, current_user.id, now=now)
