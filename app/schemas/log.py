from pydantic import BaseModel, Field, validator
from typing import List, Optional
from datetime import datetime, date

from app.config import CONTENT_TYPES


def _check_content_type(v):
    if v is not None and v not in CONTENT_TYPES:
        raise ValueError(f"content_type must be one of: {', '.join(CONTENT_TYPES)}")
    return v


class LogBase(BaseModel):
    content_type: str = Field("book", description="What the learning came from")
    title: str = Field(..., min_length=1, max_length=300)
    creator: Optional[str] = Field(None, max_length=200, description="Author, host or channel")
    consumed_date: date
    key_points: str = Field(..., min_length=1)
    practical_application: str = Field(..., min_length=1)
    summary: str = Field(..., min_length=1)
    is_shared: bool = False

    @validator('content_type')
    def validate_content_type(cls, v):
        return _check_content_type(v)


class LogCreate(LogBase):
    pass


class LogUpdate(BaseModel):
    """Partial update of a log. Only the fields sent are changed."""
    content_type: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    creator: Optional[str] = Field(None, max_length=200)
    consumed_date: Optional[date] = None
    key_points: Optional[str] = Field(None, min_length=1)
    practical_application: Optional[str] = Field(None, min_length=1)
    summary: Optional[str] = Field(None, min_length=1)
    is_shared: Optional[bool] = None

    @validator('content_type')
    def validate_content_type(cls, v):
        return _check_content_type(v)


class LogResponse(LogBase):
    id: str
    user_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LogAuthor(BaseModel):
    id: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True


class FeedLogResponse(LogResponse):
    author: Optional[LogAuthor] = None


class LogsListResponse(BaseModel):
    logs: List[LogResponse]
    total_count: int
    page: int
    page_size: int


class FeedResponse(BaseModel):
    logs: List[FeedLogResponse]
    total_count: int
    page: int
    page_size: int
