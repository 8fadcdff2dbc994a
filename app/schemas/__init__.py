from app.schemas.user import (
    UserBase, UserResponse, PublicUserResponse, CurrentUser, UserUpdate, UserStats,
    MyProfileResponse, PublicProfileResponse, UserSearchResult, UserSearchResponse
)
from app.schemas.log import (
    LogBase, LogCreate, LogUpdate, LogResponse, LogAuthor, FeedLogResponse,
    LogsListResponse, FeedResponse
)
from app.schemas.log_import import (
    ImportedBook, ImportPreviewRequest, ImportPreviewResponse, ImportRequest, ImportResponse
)
from app.schemas.follow import (
    FollowActionResponse, FollowStatusResponse, ConnectionUser, ConnectionsListResponse
)
from app.schemas.reaction import LikeSummaryResponse
from app.schemas.comment import CommentCreate, CommentResponse, CommentsListResponse
from app.schemas.notification import NotificationType, Notification, NotificationsListResponse
from app.schemas.streak import StreakResponse

__all__ = [
    "UserBase", "UserResponse", "PublicUserResponse", "CurrentUser", "UserUpdate", "UserStats",
    "MyProfileResponse", "PublicProfileResponse", "UserSearchResult", "UserSearchResponse",
    "LogBase", "LogCreate", "LogUpdate", "LogResponse", "LogAuthor", "FeedLogResponse",
    "LogsListResponse", "FeedResponse",
    "ImportedBook", "ImportPreviewRequest", "ImportPreviewResponse", "ImportRequest", "ImportResponse",
    "FollowActionResponse", "FollowStatusResponse", "ConnectionUser", "ConnectionsListResponse",
    "LikeSummaryResponse",
    "CommentCreate", "CommentResponse", "CommentsListResponse",
    "NotificationType", "Notification", "NotificationsListResponse",
    "StreakResponse",
]
