from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app import schemas
from app.auth import get_current_user
from app.config import settings
from app.database import get_db
from app.services.notification_service import build_notifications
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=schemas.NotificationsListResponse)
async def get_notifications(
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """New followers, likes and comments on the current user's shared logs, newest first"""
    try:
        notifications = build_notifications(db, current_user.id, limit=settings.NOTIFICATIONS_LIMIT)
        return schemas.NotificationsListResponse(
            notifications=notifications,
            total_count=len(notifications),
        )
    except Exception as e:
        logger.exception(f"Failed to build notifications for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to load notifications")
