from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from typing import List, Optional, Set, Tuple
from app.models.follow import Follow
from app.models.user import User
from app.utils.logger import get_logger

logger = get_logger(__name__)

class FollowsCRUD:

    @staticmethod
    def follow(db: Session, follower_id: str, following_id: str) -> Optional[Follow]:
        """
        Make follower_id follow following_id.

        Returns the existing row when already following, None when the target
        does not exist or is the follower themselves.
        """
        if follower_id == following_id:
            return None

        target = db.query(User).filter(User.id == following_id).first()
        if not target:
            return None

        existing = FollowsCRUD.get_follow(db, follower_id, following_id)
        if existing:
            return existing

        follow = Follow(follower_id=follower_id, following_id=following_id)
        db.add(follow)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent follow of the same user
            db.rollback()
            return FollowsCRUD.get_follow(db, follower_id, following_id)
        db.refresh(follow)
        return follow

    @staticmethod
    def unfollow(db: Session, follower_id: str, following_id: str) -> bool:
        """Remove a follow. Returns False when there was nothing to remove."""
        follow = FollowsCRUD.get_follow(db, follower_id, following_id)
        if not follow:
            return False

        db.delete(follow)
        db.commit()
        return True

    @staticmethod
    def get_follow(db: Session, follower_id: str, following_id: str) -> Optional[Follow]:
        return db.query(Follow).filter(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id
        ).first()

    @staticmethod
    def is_following(db: Session, follower_id: str, following_id: str) -> bool:
        return FollowsCRUD.get_follow(db, follower_id, following_id) is not None

    @staticmethod
    def get_following_ids(db: Session, user_id: str, candidate_ids: Optional[List[str]] = None) -> Set[str]:
        """IDs the user follows, optionally restricted to candidate_ids."""
        query = db.query(Follow.following_id).filter(Follow.follower_id == user_id)
        if candidate_ids is not None:
            if not candidate_ids:
                return set()
            query = query.filter(Follow.following_id.in_(candidate_ids))
        return {row.following_id for row in query.all()}

    @staticmethod
    def get_followers(db: Session, user_id: str, page: int = 1, page_size: int = 20) -> Tuple[List[Follow], int]:
        """People following the user, newest first, with their profiles loaded."""
        query = db.query(Follow).filter(
            Follow.following_id == user_id
        ).options(
            joinedload(Follow.follower)
        ).order_by(Follow.created_at.desc())

        total = query.count()
        follows = query.offset((page - 1) * page_size).limit(page_size).all()
        return follows, total

    @staticmethod
    def get_following(db: Session, user_id: str, page: int = 1, page_size: int = 20) -> Tuple[List[Follow], int]:
        """People the user follows, newest first, with their profiles loaded."""
        query = db.query(Follow).filter(
            Follow.follower_id == user_id
        ).options(
            joinedload(Follow.followed)
        ).order_by(Follow.created_at.desc())

        total = query.count()
        follows = query.offset((page - 1) * page_size).limit(page_size).all()
        return follows, total

    @staticmethod
    def get_recent_followers(db: Session, user_id: str, limit: int = 50) -> List[Follow]:
        """Most recent follows of the user, excluding self-follows."""
        return db.query(Follow).filter(
            Follow.following_id == user_id,
            Follow.follower_id != user_id
        ).order_by(Follow.created_at.desc()).limit(limit).all()
