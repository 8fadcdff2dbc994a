from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from datetime import datetime, timezone as dt_timezone
from typing import Optional

from app import schemas
from app.auth import get_current_user, get_optional_current_user
from app.crud.log import (
    create_log, delete_log, get_all_user_logs, get_feed_logs, get_owned_log,
    get_user_logs, get_visible_log, update_log,
)
from app.database import get_db
from app.dependencies import Pagination
from app.exceptions import ImportParseError
from app.middleware.rate_limit import rate_limit_api_write, rate_limit_import
from app.services.log_import import import_books, parse_goodreads_csv
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/logs", tags=["logs"])


@router.post("", response_model=schemas.LogResponse, status_code=status.HTTP_201_CREATED)
@rate_limit_api_write
async def create_learning_log(
    request: Request,
    log_in: schemas.LogCreate,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Record what the current user learned"""
    try:
        db_log = create_log(db, current_user.id, log_in.model_dump())
        logger.info(f"Created log {db_log.id} for user {current_user.id} (shared={db_log.is_shared})")
        return db_log
    except Exception as e:
        logger.exception(f"Log creation failed for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create log")


@router.get("/me", response_model=schemas.LogsListResponse)
async def list_my_logs(
    pagination: Pagination = Depends(),
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The current user's library, newest first"""
    logs, total = get_user_logs(db, current_user.id, pagination.page, pagination.page_size)
    return schemas.LogsListResponse(
        logs=[schemas.LogResponse.model_validate(log) for log in logs],
        total_count=total,
        page=pagination.page,
        page_size=pagination.page_size,
    )


@router.get("/me/export")
async def export_my_logs(
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Download every log of the current user as a JSON document"""
    logs = get_all_user_logs(db, current_user.id)
    payload = jsonable_encoder([schemas.LogResponse.model_validate(log) for log in logs])
    stamp = datetime.now(dt_timezone.utc).strftime("%Y-%m-%dT%H-%M-%SZ")
    logger.info(f"Exported {len(logs)} logs for user {current_user.id}")
    return JSONResponse(
        content=payload,
        headers={"Content-Disposition": f'attachment; filename="learning-logs-{stamp}.json"'},
    )


@router.get("/feed", response_model=schemas.FeedResponse)
async def get_feed(
    pagination: Pagination = Depends(),
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Shared logs from the people the current user follows"""
    try:
        logs, total = get_feed_logs(db, current_user.id, pagination.page, pagination.page_size)
        return schemas.FeedResponse(
            logs=[
                schemas.FeedLogResponse(
                    **schemas.LogResponse.model_validate(log).model_dump(),
                    author=schemas.LogAuthor.model_validate(log.user) if log.user else None,
                )
                for log in logs
            ],
            total_count=total,
            page=pagination.page,
            page_size=pagination.page_size,
        )
    except Exception as e:
        logger.error(f"Error in get_feed for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/import/preview", response_model=schemas.ImportPreviewResponse)
async def preview_import(
    body: schemas.ImportPreviewRequest,
    current_user: schemas.CurrentUser = Depends(get_current_user),
):
    """Parse a Goodreads export and show which books would be imported"""
    try:
        books = parse_goodreads_csv(body.csv_text)
    except ImportParseError as e:
        logger.warning(f"Import preview parse failure for user {current_user.id}: {e}")
        raise HTTPException(status_code=400, detail="Failed to parse file. Please make sure it is a valid CSV export.")
    if not books:
        raise HTTPException(
            status_code=400,
            detail="No books found in file. Make sure it has Title and Author columns.",
        )
    return schemas.ImportPreviewResponse(books=books, total_count=len(books))


@router.post("/import", response_model=schemas.ImportResponse)
@rate_limit_import
async def import_logs(
    request: Request,
    body: schemas.ImportRequest,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create private book logs for the selected imported books"""
    selected = [book for book in body.books if book.selected]
    if not selected:
        raise HTTPException(status_code=400, detail="Select at least one book to import")

    imported, failed = import_books(db, current_user.id, selected)
    return schemas.ImportResponse(
        imported_count=imported,
        failed_count=failed,
        message=f"Imported {imported} books" + (f", {failed} failed" if failed else ""),
    )


@router.get("/{log_id}", response_model=schemas.LogResponse)
async def get_learning_log(
    log_id: str,
    current_user: Optional[schemas.CurrentUser] = Depends(get_optional_current_user),
    db: Session = Depends(get_db),
):
    """A single log: the caller's own, or anyone's shared log"""
    db_log = get_visible_log(db, log_id, current_user.id if current_user else None)
    if not db_log:
        raise HTTPException(status_code=404, detail="Log not found")
    return db_log


@router.patch("/{log_id}", response_model=schemas.LogResponse)
async def update_learning_log(
    log_id: str,
    log_update: schemas.LogUpdate,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Edit one of the current user's logs (counts as activity for the streak)"""
    db_log = get_owned_log(db, log_id, current_user.id)
    if not db_log:
        raise HTTPException(status_code=404, detail="Log not found")

    update_data = log_update.model_dump(exclude_unset=True)
    for required in ("title", "content_type", "consumed_date", "key_points", "practical_application", "summary", "is_shared"):
        if required in update_data and update_data[required] is None:
            raise HTTPException(status_code=400, detail=f"{required} cannot be null")

    if update_data:
        db_log = update_log(db, db_log, update_data)
        logger.info(f"Updated log {log_id} for user {current_user.id}: fields={sorted(update_data)}")
    return db_log


@router.delete("/{log_id}")
async def delete_learning_log(
    log_id: str,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete one of the current user's logs"""
    db_log = get_owned_log(db, log_id, current_user.id)
    if not db_log:
        raise HTTPException(status_code=404, detail="Log not found")

    delete_log(db, db_log)
    logger.info(f"Deleted log {log_id} for user {current_user.id}")
    return {"message": "Log deleted successfully"}
