from sqlalchemy import Column, String, UniqueConstraint, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.types import UTCDateTime
import enum
import uuid

class ReactionType(enum.Enum):
    LIKE = "like"

class Reaction(Base):
    """A reaction left by a user on a log. Only likes exist today."""
    __tablename__ = "reactions"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    log_id = Column(String, ForeignKey("logs.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    reaction_type = Column(String(20), default=ReactionType.LIKE.value, nullable=False)
    created_at = Column(UTCDateTime, server_default=func.now())

    # Relationships
    log = relationship("Log", back_populates="reactions")
    user = relationship("User", back_populates="reactions")

    __table_args__ = (
        UniqueConstraint('log_id', 'user_id', 'reaction_type', name='unique_reaction'),
    )

    def __repr__(self):
        return f"<Reaction id={self.id} log={self.log_id} user={self.user_id} type={self.reaction_type}>"
