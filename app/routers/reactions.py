from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
from typing import Optional

from app import schemas
from app.auth import get_current_user, get_optional_current_user
from app.crud.log import get_visible_log
from app.crud.reaction import add_like, count_likes, has_liked, remove_like
from app.database import get_db
from app.middleware.rate_limit import rate_limit_api_write
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/logs", tags=["reactions"])


def _like_summary(db: Session, log_id: str, user_id: Optional[str]) -> schemas.LikeSummaryResponse:
    return schemas.LikeSummaryResponse(
        log_id=log_id,
        like_count=count_likes(db, log_id),
        has_liked=has_liked(db, log_id, user_id) if user_id else False,
    )


@router.get("/{log_id}/likes", response_model=schemas.LikeSummaryResponse)
async def get_likes(
    log_id: str,
    current_user: Optional[schemas.CurrentUser] = Depends(get_optional_current_user),
    db: Session = Depends(get_db),
):
    """Like count of a log and whether the caller has liked it"""
    user_id = current_user.id if current_user else None
    if not get_visible_log(db, log_id, user_id):
        raise HTTPException(status_code=404, detail="Log not found")
    return _like_summary(db, log_id, user_id)


@router.post("/{log_id}/like", response_model=schemas.LikeSummaryResponse)
@rate_limit_api_write
async def like_log(
    request: Request,
    log_id: str,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Like a log"""
    if not get_visible_log(db, log_id, current_user.id):
        raise HTTPException(status_code=404, detail="Log not found")

    add_like(db, log_id, current_user.id)
    logger.info(f"User {current_user.id} liked log {log_id}")
    return _like_summary(db, log_id, current_user.id)


@router.delete("/{log_id}/like", response_model=schemas.LikeSummaryResponse)
async def unlike_log(
    log_id: str,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Remove the caller's like from a log"""
    if not get_visible_log(db, log_id, current_user.id):
        raise HTTPException(status_code=404, detail="Log not found")

    if not remove_like(db, log_id, current_user.id):
        raise HTTPException(status_code=404, detail="Like not found")
    return _like_summary(db, log_id, current_user.id)
