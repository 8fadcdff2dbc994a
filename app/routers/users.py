from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional

from app import schemas
from app.auth import get_current_user, get_optional_current_user
from app.config import settings
from app.crud.follows import FollowsCRUD
from app.crud.log import get_shared_logs
from app.crud.user import (
    get_user, get_user_by_username, get_user_stats, is_username_available,
    search_users_by_username, update_user_fields,
)
from app.database import get_db
from app.exceptions import ActivityReadError, MalformedTimestampError
from app.services.streak_service import get_current_user_streak, get_streak
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

@router.get("/me", response_model=schemas.MyProfileResponse)
async def get_my_profile(
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get the current user's profile, connection counts and streak"""
    db_user = get_user(db, current_user.id)
    if not db_user:
        raise HTTPException(status_code=404, detail="User not found")

    return schemas.MyProfileResponse(
        user=schemas.UserResponse.model_validate(db_user),
        stats=schemas.UserStats(**get_user_stats(db, current_user.id)),
        streak=get_current_user_streak(db, current_user),
    )

@router.patch("/me", response_model=schemas.UserResponse)
async def update_my_profile(
    user_update: schemas.UserUpdate,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update the current user's profile"""
    db_user = get_user(db, current_user.id)
    if not db_user:
        raise HTTPException(status_code=404, detail="User not found")

    update_data = user_update.model_dump(exclude_unset=True)
    if update_data:
        try:
            db_user = update_user_fields(db, db_user, update_data)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        logger.info(f"Updated profile for user {current_user.id}: fields={sorted(update_data)}")

    return db_user

@router.get("/check-username")
async def check_username_availability(
    username: str,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Check if a username is available"""
    is_available = is_username_available(db, username, exclude_user_id=current_user.id)
    return {"username": username, "available": is_available}

@router.get("/search", response_model=schemas.UserSearchResponse)
async def search_users(
    q: str = Query(..., description="Part of a username"),
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Search users by username, flagging the ones the caller already follows"""
    query = q.strip()
    if not query:
        raise HTTPException(status_code=400, detail="Search query cannot be empty")

    users = search_users_by_username(db, query, limit=settings.USER_SEARCH_LIMIT + 1)
    users = [u for u in users if u.id != current_user.id][:settings.USER_SEARCH_LIMIT]

    following_ids = FollowsCRUD.get_following_ids(db, current_user.id, [u.id for u in users])

    return schemas.UserSearchResponse(
        users=[
            schemas.UserSearchResult(
                id=user.id,
                username=user.username,
                full_name=user.full_name,
                display_name=user.display_name,
                avatar_url=user.avatar_url,
                is_following=user.id in following_ids,
            )
            for user in users
        ]
    )

@router.get("/{username}", response_model=schemas.PublicProfileResponse)
async def get_public_profile(
    username: str,
    current_user: Optional[schemas.CurrentUser] = Depends(get_optional_current_user),
    db: Session = Depends(get_db)
):
    """Public profile of a user: connection counts, streak and shared logs"""
    try:
        profile = get_user_by_username(db, username)
        if not profile:
            raise HTTPException(status_code=404, detail="User not found")

        is_following = False
        if current_user and current_user.id != profile.id:
            is_following = FollowsCRUD.is_following(db, current_user.id, profile.id)

        return schemas.PublicProfileResponse(
            user=schemas.PublicUserResponse.model_validate(profile),
            stats=schemas.UserStats(**get_user_stats(db, profile.id)),
            streak=get_streak(db, profile.id),
            is_following=is_following,
            logs=[schemas.LogResponse.model_validate(log) for log in get_shared_logs(db, profile.id)],
        )

    except (HTTPException, ActivityReadError, MalformedTimestampError):
        raise
    except Exception as e:
        logger.error(f"Error in get_public_profile for {username}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
