from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from typing import Optional

from app import schemas
from app.auth import get_current_user, get_optional_current_user
from app.crud.comment import create_comment, delete_comment, get_comment, get_log_comments
from app.crud.log import get_visible_log
from app.database import get_db
from app.middleware.rate_limit import rate_limit_api_write
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["comments"])


def _to_response(comment, username: Optional[str] = None) -> schemas.CommentResponse:
    if username is None:
        username = comment.user.username if comment.user and comment.user.username else "unknown"
    return schemas.CommentResponse(
        id=comment.id,
        log_id=comment.log_id,
        user_id=comment.user_id,
        content=comment.content,
        created_at=comment.created_at,
        username=username,
    )


@router.get("/logs/{log_id}/comments", response_model=schemas.CommentsListResponse)
async def list_comments(
    log_id: str,
    current_user: Optional[schemas.CurrentUser] = Depends(get_optional_current_user),
    db: Session = Depends(get_db),
):
    """Comments on a log, oldest first"""
    if not get_visible_log(db, log_id, current_user.id if current_user else None):
        raise HTTPException(status_code=404, detail="Log not found")

    comments = get_log_comments(db, log_id)
    return schemas.CommentsListResponse(
        comments=[_to_response(c) for c in comments],
        total_count=len(comments),
    )


@router.post("/logs/{log_id}/comments", response_model=schemas.CommentResponse, status_code=status.HTTP_201_CREATED)
@rate_limit_api_write
async def add_comment(
    request: Request,
    log_id: str,
    body: schemas.CommentCreate,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Comment on a log"""
    if not get_visible_log(db, log_id, current_user.id):
        raise HTTPException(status_code=404, detail="Log not found")

    comment = create_comment(db, log_id, current_user.id, body.content)
    logger.info(f"User {current_user.id} commented on log {log_id}")
    return _to_response(comment, current_user.username or "unknown")


@router.delete("/comments/{comment_id}")
async def remove_comment(
    comment_id: str,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete one of the caller's comments"""
    comment = get_comment(db, comment_id)
    if not comment or comment.user_id != current_user.id:
        raise HTTPException(status_code=404, detail="Comment not found")

    delete_comment(db, comment)
    return {"message": "Comment deleted successfully"}
