from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date


class ImportedBook(BaseModel):
    """A book parsed from a reading-history export, before it becomes a log."""
    title: str = Field(..., min_length=1, max_length=300)
    creator: Optional[str] = Field(None, max_length=200)
    consumed_date: date
    rating: Optional[int] = Field(None, ge=1, le=5)
    selected: bool = True


class ImportPreviewRequest(BaseModel):
    csv_text: str = Field(..., min_length=1, description="Contents of a Goodreads library export")


class ImportPreviewResponse(BaseModel):
    books: List[ImportedBook]
    total_count: int


class ImportRequest(BaseModel):
    books: List[ImportedBook]


class ImportResponse(BaseModel):
    imported_count: int
    failed_count: int
    message: str
