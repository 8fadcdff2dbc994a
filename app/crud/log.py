from __future__ import annotations
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import or_
from app.models.log import Log
from app.models.follow import Follow


def create_log(db: Session, user_id: str, log_data: dict) -> Log:
    """
    Create a new log for a user.

    Args:
        db: Database session
        user_id: Owner of the log
        log_data: Log fields (title, content_type, consumed_date, ...)

    Returns:
        Created Log object
    """
    db_log = Log(user_id=user_id, **log_data)
    db.add(db_log)
    db.commit()
    db.refresh(db_log)
    return db_log


def get_visible_log(db: Session, log_id: str, viewer_id: Optional[str]) -> Optional[Log]:
    """Get a log the viewer may see: their own, or any shared log."""
    query = db.query(Log).filter(Log.id == log_id)
    if viewer_id:
        query = query.filter(or_(Log.is_shared.is_(True), Log.user_id == viewer_id))
    else:
        query = query.filter(Log.is_shared.is_(True))
    return query.first()


def get_owned_log(db: Session, log_id: str, user_id: str) -> Optional[Log]:
    """Get a log only if it belongs to the user."""
    return db.query(Log).filter(Log.id == log_id, Log.user_id == user_id).first()


def get_user_logs(db: Session, user_id: str, page: int = 1, page_size: int = 20) -> Tuple[List[Log], int]:
    """All logs of a user, newest first."""
    query = db.query(Log).filter(Log.user_id == user_id).order_by(Log.created_at.desc())
    total = query.count()
    logs = query.offset((page - 1) * page_size).limit(page_size).all()
    return logs, total


def get_all_user_logs(db: Session, user_id: str) -> List[Log]:
    """Every log of a user without pagination (used for export)."""
    return db.query(Log).filter(Log.user_id == user_id).order_by(Log.created_at.desc()).all()


def get_shared_logs(db: Session, user_id: str, limit: int = 100) -> List[Log]:
    """Shared logs of a user, newest first, as shown on their public profile."""
    return db.query(Log).filter(
        Log.user_id == user_id,
        Log.is_shared.is_(True)
    ).order_by(Log.created_at.desc()).limit(limit).all()


def get_feed_logs(db: Session, user_id: str, page: int = 1, page_size: int = 20) -> Tuple[List[Log], int]:
    """
    Shared logs from everyone the user follows, newest first, with authors loaded.

    Returns an empty page when the user follows nobody.
    """
    following_ids = [
        row.following_id for row in
        db.query(Follow.following_id).filter(Follow.follower_id == user_id).all()
    ]
    if not following_ids:
        return [], 0

    query = db.query(Log).filter(
        Log.user_id.in_(following_ids),
        Log.is_shared.is_(True)
    ).options(
        joinedload(Log.user)
    ).order_by(Log.created_at.desc())

    total = query.count()
    logs = query.offset((page - 1) * page_size).limit(page_size).all()
    return logs, total


def update_log(db: Session, log: Log, update_data: dict) -> Log:
    """Apply a partial update to a log. updated_at is bumped by the database."""
    for field, value in update_data.items():
        if hasattr(log, field):
            setattr(log, field, value)
    db.commit()
    db.refresh(log)
    return log


def delete_log(db: Session, log: Log) -> None:
    """Delete a log together with its reactions and comments."""
    db.delete(log)
    db.commit()
