from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

class FollowActionResponse(BaseModel):
    message: str
    status: str

class FollowStatusResponse(BaseModel):
    user_id: str
    is_following: bool

class ConnectionUser(BaseModel):
    id: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    followed_at: Optional[datetime] = None

class ConnectionsListResponse(BaseModel):
    users: List[ConnectionUser]
    total_count: int
    page: int
    page_size: int
