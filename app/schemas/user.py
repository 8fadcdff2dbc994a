from pydantic import BaseModel, EmailStr, validator
from typing import Optional, List
from datetime import datetime
import re

from app.schemas.log import LogResponse

RESERVED_USERNAMES = ['admin', 'root', 'system', 'user', 'test', 'guest', 'me', 'search']

class UserBase(BaseModel):
    """Base user schema with common profile attributes"""
    username: Optional[str] = None
    full_name: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None

    @validator('username')
    def validate_username(cls, v):
        if v is not None:
            if len(v) < 3:
                raise ValueError('Username must be at least 3 characters long')
            if len(v) > 30:
                raise ValueError('Username must be at most 30 characters long')
            if not re.match(r'^[a-zA-Z0-9_]+$', v):
                raise ValueError('Username can only contain letters, numbers, and underscores')
            if v.lower() in RESERVED_USERNAMES:
                raise ValueError('Username is not allowed')
        return v

class UserUpdate(UserBase):
    """Schema for updating the current user's profile"""
    pass

class UserResponse(UserBase):
    """Schema for user response"""
    id: str
    email: Optional[EmailStr] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class PublicUserResponse(UserBase):
    """Profile fields anyone may see"""
    id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CurrentUser(BaseModel):
    """Simplified user model for authentication responses"""
    id: str
    email: Optional[str] = None
    username: Optional[str] = None
    display_name: Optional[str] = None

class UserStats(BaseModel):
    followers: int = 0
    following: int = 0
    logs: int = 0

class MyProfileResponse(BaseModel):
    user: UserResponse
    stats: UserStats
    streak: int = 0

class UserSearchResult(BaseModel):
    id: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    is_following: bool = False

class UserSearchResponse(BaseModel):
    users: List[UserSearchResult]

class PublicProfileResponse(BaseModel):
    user: PublicUserResponse
    stats: UserStats
    streak: int = 0
    is_following: bool = False
    logs: List[LogResponse] = []
