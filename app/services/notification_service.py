from __future__ import annotations
from typing import Dict, List
from sqlalchemy.orm import Session

from app.crud.comment import get_comments_on_logs
from app.crud.follows import FollowsCRUD
from app.crud.reaction import get_likes_on_logs
from app.models.log import Log
from app.models.user import User
from app.schemas.notification import Notification, NotificationType
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _load_profiles(db: Session, user_ids: set) -> Dict[str, User]:
    if not user_ids:
        return {}
    return {u.id: u for u in db.query(User).filter(User.id.in_(user_ids)).all()}


def build_notifications(db: Session, user_id: str, limit: int = 50) -> List[Notification]:
    """
    Build the activity feed shown to a user about their own account.

    Three sources are merged: new followers, likes on the user's shared logs
    and comments on the user's shared logs. Each source contributes at most
    ``limit`` entries, the user's own likes and comments are left out, and
    entries whose actor profile has disappeared are dropped. The result is
    sorted newest first.
    """
    followers = FollowsCRUD.get_recent_followers(db, user_id, limit=limit)

    shared_logs = db.query(Log.id, Log.title).filter(
        Log.user_id == user_id,
        Log.is_shared.is_(True)
    ).all()
    log_titles = {row.id: row.title for row in shared_logs}

    likes = get_likes_on_logs(db, list(log_titles), exclude_user_id=user_id, limit=limit)
    comments = get_comments_on_logs(db, list(log_titles), exclude_user_id=user_id, limit=limit)

    actor_ids = {f.follower_id for f in followers}
    actor_ids.update(like.user_id for like in likes)
    actor_ids.update(comment.user_id for comment in comments)
    profiles = _load_profiles(db, actor_ids)

    notifications: List[Notification] = []

    for follow in followers:
        actor = profiles.get(follow.follower_id)
        if not actor:
            continue
        username = actor.username or "unknown"
        notifications.append(Notification(
            id=f"follow-{follow.follower_id}-{follow.created_at.isoformat()}",
            type=NotificationType.FOLLOW,
            created_at=follow.created_at,
            actor_id=actor.id,
            actor_username=username,
            message=f"@{username} started following you",
        ))

    for like in likes:
        actor = profiles.get(like.user_id)
        title = log_titles.get(like.log_id)
        if not actor or title is None:
            continue
        username = actor.username or "unknown"
        notifications.append(Notification(
            id=f"like-{like.id}",
            type=NotificationType.LIKE,
            created_at=like.created_at,
            actor_id=actor.id,
            actor_username=username,
            log_id=like.log_id,
            log_title=title,
            message=f'@{username} liked your log "{title}"',
        ))

    for comment in comments:
        actor = profiles.get(comment.user_id)
        title = log_titles.get(comment.log_id)
        if not actor or title is None:
            continue
        username = actor.username or "unknown"
        notifications.append(Notification(
            id=f"comment-{comment.id}",
            type=NotificationType.COMMENT,
            created_at=comment.created_at,
            actor_id=actor.id,
            actor_username=username,
            log_id=comment.log_id,
            log_title=title,
            comment_content=comment.content,
            message=f'@{username} commented on your log "{title}"',
        ))

    notifications.sort(key=lambda n: n.created_at, reverse=True)
    logger.debug(
        f"Built {len(notifications)} notifications for user {user_id}: "
        f"followers={len(followers)}, likes={len(likes)}, comments={len(comments)}"
    )
    return notifications
