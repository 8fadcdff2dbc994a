from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class StreakResponse(BaseModel):
    user_id: Optional[str] = None
    streak: int
    status: str
    policy: str
    last_activity_at: Optional[datetime] = None
