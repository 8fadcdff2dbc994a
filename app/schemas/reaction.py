from pydantic import BaseModel


class LikeSummaryResponse(BaseModel):
    log_id: str
    like_count: int
    has_liked: bool
