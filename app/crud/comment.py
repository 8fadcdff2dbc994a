from __future__ import annotations
from typing import List, Optional
from sqlalchemy.orm import Session, joinedload
from app.models.comment import Comment


def create_comment(db: Session, log_id: str, user_id: str, content: str) -> Comment:
    """
    Add a comment to a log.

    Args:
        db: Database session
        log_id: Log being commented on
        user_id: Author of the comment
        content: Already-trimmed comment text

    Returns:
        Created Comment object
    """
    comment = Comment(log_id=log_id, user_id=user_id, content=content)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


def get_log_comments(db: Session, log_id: str) -> List[Comment]:
    """Comments on a log, oldest first, with their authors loaded."""
    return db.query(Comment).filter(
        Comment.log_id == log_id
    ).options(
        joinedload(Comment.user)
    ).order_by(Comment.created_at.asc()).all()


def get_comment(db: Session, comment_id: str) -> Optional[Comment]:
    return db.query(Comment).filter(Comment.id == comment_id).first()


def delete_comment(db: Session, comment: Comment) -> None:
    db.delete(comment)
    db.commit()


def get_comments_on_logs(db: Session, log_ids: List[str], exclude_user_id: str, limit: int = 50) -> List[Comment]:
    """Most recent comments on the given logs, leaving out the excluded user's own comments."""
    if not log_ids:
        return []
    return db.query(Comment).filter(
        Comment.log_id.in_(log_ids),
        Comment.user_id != exclude_user_id
    ).order_by(Comment.created_at.desc()).limit(limit).all()
