from sqlalchemy import Column, String
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.types import UTCDateTime

class User(Base):
    """Profile of a Firebase-authenticated user."""
    __tablename__ = "users"

    id = Column(String, primary_key=True)  # Firebase UID
    email = Column(String, unique=True, index=True, nullable=True)
    username = Column(String, unique=True, index=True, nullable=True)  # Set by the user after sign-up
    full_name = Column(String, nullable=True)
    display_name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, server_default=func.now(), onupdate=func.now())

    # Relationships - one to many
    logs = relationship("Log", back_populates="user", cascade="all, delete-orphan")
    reactions = relationship("Reaction", back_populates="user", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="user", cascade="all, delete-orphan")

    # Follow relationships
    following = relationship("Follow", foreign_keys="Follow.follower_id", back_populates="follower", cascade="all, delete-orphan")
    followers = relationship("Follow", foreign_keys="Follow.following_id", back_populates="followed", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User id={self.id} email={self.email} username={self.username}>"
