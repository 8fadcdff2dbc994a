"""
Import of reading history exported from Goodreads.

The export is a CSV whose header row names the columns; only the title,
author, read/added dates and the user's own rating are used. Imported books
become private ``book`` logs with placeholder text for the user to fill in.
"""
from __future__ import annotations
import csv
import io
from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.crud.log import create_log
from app.exceptions import ImportParseError
from app.schemas.log_import import ImportedBook
from app.utils.logger import get_logger

logger = get_logger(__name__)

DATE_FORMATS = ("%Y/%m/%d", "%Y-%m-%d", "%m/%d/%Y")

DEFAULT_KEY_POINTS = "Imported - add your key points"
DEFAULT_PRACTICAL_APPLICATION = "Imported - add how you'll use this"
DEFAULT_SUMMARY = "Imported - add your summary"


def _find_column(headers: List[str], *needles: str) -> int:
    """Index of the first header containing any of the needles, or -1."""
    for index, header in enumerate(headers):
        if any(needle in header for needle in needles):
            return index
    return -1


def _cell(values: List[str], index: int) -> str:
    if index < 0 or index >= len(values):
        return ""
    return values[index].replace('"', '').strip()


def _parse_date(value: str) -> Optional[date]:
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def _parse_rating(value: str) -> Optional[int]:
    try:
        rating = int(value)
    except ValueError:
        return None
    return rating if 1 <= rating <= 5 else None


def parse_goodreads_csv(text: str, today: Optional[date] = None) -> List[ImportedBook]:
    """
    Parse a Goodreads library export into books ready for import.

    Rows without a title are skipped. The consumed date is the date read,
    falling back to the date added and then to ``today``.

    Raises:
        ImportParseError: If the text is not readable CSV (e.g. an oversized field)
    """
    today = today or date.today()
    try:
        rows = list(csv.reader(io.StringIO(text.lstrip("\ufeff"))))
    except csv.Error as e:
        raise ImportParseError(f"Failed to parse file: {e}") from e
    if not rows:
        return []

    headers = [h.strip().lower().replace('"', '') for h in rows[0]]
    title_index = _find_column(headers, "title")
    author_index = _find_column(headers, "author")
    date_read_index = _find_column(headers, "date read", "dateread")
    date_added_index = _find_column(headers, "date added", "dateadded")
    rating_index = _find_column(headers, "my rating", "rating")

    books: List[ImportedBook] = []
    for values in rows[1:]:
        if not any(v.strip() for v in values):
            continue

        title = _cell(values, title_index)
        if not title:
            continue

        consumed = (
            _parse_date(_cell(values, date_read_index))
            or _parse_date(_cell(values, date_added_index))
            or today
        )
        books.append(ImportedBook(
            title=title[:300],
            creator=_cell(values, author_index)[:200] or None,
            consumed_date=consumed,
            rating=_parse_rating(_cell(values, rating_index)),
        ))

    return books


def build_log_data(book: ImportedBook) -> dict:
    """Log fields for an imported book."""
    key_points = DEFAULT_KEY_POINTS
    if book.rating:
        key_points = f"{'⭐' * book.rating} ({book.rating}/5 stars)\n\nAdd your key points here..."

    return {
        "content_type": "book",
        "title": book.title,
        "creator": book.creator or None,
        "consumed_date": book.consumed_date,
        "key_points": key_points,
        "practical_application": DEFAULT_PRACTICAL_APPLICATION,
        "summary": DEFAULT_SUMMARY,
        "is_shared": False,
    }


def import_books(db: Session, user_id: str, books: Iterable[ImportedBook]) -> Tuple[int, int]:
    """
    Create a private log for every selected book.

    Returns:
        Tuple of (imported_count, failed_count)
    """
    imported = 0
    failed = 0
    for book in books:
        if not book.selected:
            continue
        try:
            create_log(db, user_id, build_log_data(book))
            imported += 1
        except SQLAlchemyError as e:
            db.rollback()
            failed += 1
            logger.error(f"Failed to import book {book.title!r} for user {user_id}: {e}")

    logger.info(f"Imported {imported} books for user {user_id} ({failed} failed)")
    return imported, failed
