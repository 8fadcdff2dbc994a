from __future__ import annotations
from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from app.models.reaction import Reaction, ReactionType


def add_like(db: Session, log_id: str, user_id: str) -> Reaction:
    """Like a log. Liking twice keeps the original like."""
    existing = db.query(Reaction).filter(
        Reaction.log_id == log_id,
        Reaction.user_id == user_id,
        Reaction.reaction_type == ReactionType.LIKE.value
    ).first()
    if existing:
        return existing

    reaction = Reaction(log_id=log_id, user_id=user_id, reaction_type=ReactionType.LIKE.value)
    db.add(reaction)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return db.query(Reaction).filter(
            Reaction.log_id == log_id,
            Reaction.user_id == user_id,
            Reaction.reaction_type == ReactionType.LIKE.value
        ).first()
    db.refresh(reaction)
    return reaction


def remove_like(db: Session, log_id: str, user_id: str) -> bool:
    """Remove a like. Returns False if the user had not liked the log."""
    deleted = db.query(Reaction).filter(
        Reaction.log_id == log_id,
        Reaction.user_id == user_id,
        Reaction.reaction_type == ReactionType.LIKE.value
    ).delete(synchronize_session=False)
    db.commit()
    return deleted > 0


def count_likes(db: Session, log_id: str) -> int:
    return db.query(Reaction).filter(
        Reaction.log_id == log_id,
        Reaction.reaction_type == ReactionType.LIKE.value
    ).count()


def has_liked(db: Session, log_id: str, user_id: str) -> bool:
    return db.query(Reaction).filter(
        Reaction.log_id == log_id,
        Reaction.user_id == user_id,
        Reaction.reaction_type == ReactionType.LIKE.value
    ).first() is not None


def get_likes_on_logs(db: Session, log_ids: List[str], exclude_user_id: str, limit: int = 50) -> List[Reaction]:
    """Most recent likes on the given logs, leaving out the excluded user's own likes."""
    if not log_ids:
        return []
    return db.query(Reaction).filter(
        Reaction.log_id.in_(log_ids),
        Reaction.reaction_type == ReactionType.LIKE.value,
        Reaction.user_id != exclude_user_id
    ).order_by(Reaction.created_at.desc()).limit(limit).all()
