from sqlalchemy import Column, String, Date, Boolean, Text, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.types import UTCDateTime
import uuid


class Log(Base):
    """A learning log entry: what a user took away from a book, podcast, article, etc."""
    __tablename__ = "logs"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    content_type = Column(String(20), nullable=False, default="book")  # book, podcast, article, course, video, other
    title = Column(String, nullable=False)
    creator = Column(String, nullable=True)  # Author, host, channel...
    consumed_date = Column(Date, nullable=False)
    key_points = Column(Text, nullable=False)
    practical_application = Column(Text, nullable=False)
    summary = Column(Text, nullable=False)
    is_shared = Column(Boolean, nullable=False, default=False)

    # updated_at stays NULL until the log is actually edited
    created_at = Column(UTCDateTime, server_default=func.now(), nullable=False)
    updated_at = Column(UTCDateTime, nullable=True, onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="logs")
    reactions = relationship("Reaction", back_populates="log", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="log", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_logs_user_id_created_at", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Log id={self.id} user_id={self.user_id} type={self.content_type} title={self.title!r}>"
