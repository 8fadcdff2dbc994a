from __future__ import annotations
from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from app.exceptions import ActivityReadError
from app.models.log import Log
from app.services.streak_calculator import ActivityRecord
from app.utils.logger import get_logger

logger = get_logger(__name__)


def fetch_activity_records(db: Session, user_id: str) -> List[ActivityRecord]:
    """
    Read the complete log activity history of a user.

    Args:
        db: Database session
        user_id: User ID

    Returns:
        One ActivityRecord per log, newest first. Empty when the user has no logs.

    Raises:
        ActivityReadError: If the store could not be queried
    """
    try:
        rows = db.query(Log.id, Log.created_at, Log.updated_at).filter(
            Log.user_id == user_id
        ).order_by(Log.created_at.desc()).all()
    except SQLAlchemyError as e:
        logger.error(f"Error reading activity for user {user_id}: {e}")
        raise ActivityReadError(user_id, e) from e

    return [
        ActivityRecord(created_at=row.created_at, updated_at=row.updated_at, log_id=row.id)
        for row in rows
    ]
