from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func
from app.models import User, Log, Follow
from typing import List, Optional


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    """Look a profile up by handle, ignoring case."""
    return db.query(User).filter(func.lower(User.username) == username.lower()).first()


def search_users_by_username(db: Session, query: str, limit: int = 20) -> List[User]:
    """
    Profiles whose username contains ``query`` anywhere, ignoring case.

    Users who never picked a username cannot be found. Results are ordered
    alphabetically so repeated searches are stable.
    """
    return db.query(User).filter(
        User.username.isnot(None),
        func.lower(User.username).contains(query.lower(), autoescape=True)
    ).order_by(User.username).limit(limit).all()


def is_username_available(db: Session, username: str, exclude_user_id: Optional[str] = None) -> bool:
    """
    Whether nobody else holds ``username`` (case-insensitive).

    Args:
        db: Database session
        username: Handle to check
        exclude_user_id: Caller's own ID, so keeping your own handle counts as available

    Returns:
        True if the handle is free
    """
    taken = db.query(User.id).filter(func.lower(User.username) == username.lower())
    if exclude_user_id:
        taken = taken.filter(User.id != exclude_user_id)
    return taken.first() is None


def create_user(db: Session, user_id: str, email: Optional[str], display_name: Optional[str] = None) -> User:
    """Profile row for a Firebase user seen for the first time. The username is chosen later."""
    db_user = User(id=user_id, email=email, display_name=display_name)
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def update_user_fields(db: Session, user: User, update_data: dict) -> User:
    """
    Apply a profile edit.

    Raises:
        ValueError: If the requested username belongs to someone else
    """
    new_username = update_data.get('username')
    if new_username is not None and not is_username_available(db, new_username, exclude_user_id=user.id):
        raise ValueError(f"Username '{new_username}' is already taken")

    for field, value in update_data.items():
        if hasattr(user, field):
            setattr(user, field, value)

    try:
        db.commit()
    except IntegrityError:
        # Another request claimed the username between the check and the commit
        db.rollback()
        raise ValueError(f"Username '{new_username}' is already taken")

    db.refresh(user)
    return user


def update_user_display_name(db: Session, user_id: str, display_name: str) -> Optional[User]:
    """Keep the display name in sync with the identity token."""
    db_user = get_user(db, user_id)
    if db_user is None:
        return None
    db_user.display_name = display_name
    db.commit()
    db.refresh(db_user)
    return db_user


def get_user_stats(db: Session, user_id: str) -> dict:
    """Follower, following and log counts shown on profiles."""
    return {
        "followers": db.query(func.count(Follow.id)).filter(Follow.following_id == user_id).scalar(),
        "following": db.query(func.count(Follow.id)).filter(Follow.follower_id == user_id).scalar(),
        "logs": db.query(func.count(Log.id)).filter(Log.user_id == user_id).scalar(),
    }
