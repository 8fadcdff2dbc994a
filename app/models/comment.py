from sqlalchemy import Column, String, ForeignKey, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.types import UTCDateTime
import uuid


class Comment(Base):
    """A comment on a log."""
    __tablename__ = "comments"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    log_id = Column(String, ForeignKey("logs.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(UTCDateTime, server_default=func.now(), nullable=False)

    # Relationships
    log = relationship("Log", back_populates="comments")
    user = relationship("User", back_populates="comments")

    def __repr__(self) -> str:
        return f"<Comment id={self.id} log_id={self.log_id} user_id={self.user_id}>"
