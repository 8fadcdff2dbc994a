from pydantic import BaseModel, Field, validator
from typing import List
from datetime import datetime


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)

    @validator('content')
    def strip_content(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Comment cannot be empty')
        return v


class CommentResponse(BaseModel):
    id: str
    log_id: str
    user_id: str
    content: str
    created_at: datetime
    username: str = "unknown"


class CommentsListResponse(BaseModel):
    comments: List[CommentResponse]
    total_count: int
