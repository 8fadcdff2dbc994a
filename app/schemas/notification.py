from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from enum import Enum

class NotificationType(str, Enum):
    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"

class Notification(BaseModel):
    id: str
    type: NotificationType
    created_at: datetime
    actor_id: str
    actor_username: str
    log_id: Optional[str] = None
    log_title: Optional[str] = None
    comment_content: Optional[str] = None
    message: str

class NotificationsListResponse(BaseModel):
    notifications: List[Notification]
    total_count: int
