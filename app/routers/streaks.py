from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Optional

from app.database import get_db
from app.auth import get_optional_current_user, get_current_user
from app.crud.user import get_user
from app.schemas import CurrentUser
from app.schemas.streak import StreakResponse
from app.services.streak_calculator import StreakResult, StreakStatus
from app.services.streak_service import configured_policy, get_streak_result
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/streaks", tags=["streaks"])


def _to_response(user_id: Optional[str], result: StreakResult) -> StreakResponse:
    return StreakResponse(
        user_id=user_id,
        streak=result.streak,
        status=result.status.value,
        policy=result.policy.value,
        last_activity_at=result.last_activity_at,
    )


@router.get("/me", response_model=StreakResponse)
async def get_my_streak(
    current_user: Optional[CurrentUser] = Depends(get_optional_current_user),
    db: Session = Depends(get_db),
):
    """Current user's streak. Anonymous callers get a streak of 0."""
    if current_user is None:
        return StreakResponse(
            streak=0,
            status=StreakStatus.NO_ACTIVITY.value,
            policy=configured_policy().value,
        )

    result = get_streak_result(db, current_user.id)
    return _to_response(current_user.id, result)


@router.get("/{user_id}", response_model=StreakResponse)
async def get_user_streak(
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Streak of any user."""
    if not get_user(db, user_id):
        raise HTTPException(status_code=404, detail="User not found")

    result = get_streak_result(db, user_id)
    return _to_response(user_id, result)
