from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app import schemas
from app.auth import get_current_user
from app.crud.follows import FollowsCRUD
from app.crud.user import get_user, get_user_by_username
from app.database import get_db
from app.dependencies import Pagination
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/follows", tags=["follows"])

@router.post("/{user_id}", response_model=schemas.FollowActionResponse)
async def follow_user(
    user_id: str,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Follow another user"""
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot follow yourself")

    try:
        follow = FollowsCRUD.follow(db, current_user.id, user_id)
        if not follow:
            raise HTTPException(status_code=404, detail="User not found")

        logger.info(f"User {current_user.id} followed {user_id}")
        return schemas.FollowActionResponse(message="Following!", status="following")

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in follow_user: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.delete("/{user_id}", response_model=schemas.FollowActionResponse)
async def unfollow_user(
    user_id: str,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Stop following a user"""
    try:
        if not FollowsCRUD.unfollow(db, current_user.id, user_id):
            raise HTTPException(status_code=404, detail="You are not following this user")

        logger.info(f"User {current_user.id} unfollowed {user_id}")
        return schemas.FollowActionResponse(message="Unfollowed", status="not_following")

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in unfollow_user: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.get("/{user_id}/status", response_model=schemas.FollowStatusResponse)
async def get_follow_status(
    user_id: str,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Whether the current user follows the given user"""
    if not get_user(db, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return schemas.FollowStatusResponse(
        user_id=user_id,
        is_following=FollowsCRUD.is_following(db, current_user.id, user_id),
    )

@router.get("/users/{username}/followers", response_model=schemas.ConnectionsListResponse)
async def list_followers(
    username: str,
    pagination: Pagination = Depends(),
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """People following the given user"""
    user = get_user_by_username(db, username)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    follows, total = FollowsCRUD.get_followers(db, user.id, pagination.page, pagination.page_size)
    return schemas.ConnectionsListResponse(
        users=[
            schemas.ConnectionUser(
                id=f.follower.id,
                username=f.follower.username,
                full_name=f.follower.full_name,
                avatar_url=f.follower.avatar_url,
                followed_at=f.created_at,
            )
            for f in follows if f.follower
        ],
        total_count=total,
        page=pagination.page,
        page_size=pagination.page_size,
    )

@router.get("/users/{username}/following", response_model=schemas.ConnectionsListResponse)
async def list_following(
    username: str,
    pagination: Pagination = Depends(),
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """People the given user follows"""
    user = get_user_by_username(db, username)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    follows, total = FollowsCRUD.get_following(db, user.id, pagination.page, pagination.page_size)
    return schemas.ConnectionsListResponse(
        users=[
            schemas.ConnectionUser(
                id=f.followed.id,
                username=f.followed.username,
                full_name=f.followed.full_name,
                avatar_url=f.followed.avatar_url,
                followed_at=f.created_at,
            )
            for f in follows if f.followed
        ],
        total_count=total,
        page=pagination.page,
        page_size=pagination.page_size,
    )
