from app.crud.user import (
    get_user,
    get_user_by_username,
    search_users_by_username,
    is_username_available,
    create_user,
    update_user_fields,
    update_user_display_name,
    get_user_stats,
)
from app.crud.log import (
    create_log,
    get_visible_log,
    get_owned_log,
    get_user_logs,
    get_all_user_logs,
    get_shared_logs,
    get_feed_logs,
    update_log,
    delete_log,
)
from app.crud.reaction import (
    add_like,
    remove_like,
    count_likes,
    has_liked,
    get_likes_on_logs,
)
from app.crud.comment import (
    create_comment,
    get_log_comments,
    get_comment,
    delete_comment,
    get_comments_on_logs,
)
from app.crud.activity import fetch_activity_records
from app.crud.follows import FollowsCRUD

__all__ = [
    # User operations
    "get_user",
    "get_user_by_username",
    "search_users_by_username",
    "is_username_available",
    "create_user",
    "update_user_fields",
    "update_user_display_name",
    "get_user_stats",

    # Log operations
    "create_log",
    "get_visible_log",
    "get_owned_log",
    "get_user_logs",
    "get_all_user_logs",
    "get_shared_logs",
    "get_feed_logs",
    "update_log",
    "delete_log",

    # Reaction operations
    "add_like",
    "remove_like",
    "count_likes",
    "has_liked",
    "get_likes_on_logs",

    # Comment operations
    "create_comment",
    "get_log_comments",
    "get_comment",
    "delete_comment",
    "get_comments_on_logs",

    # Activity operations
    "fetch_activity_records",

    # Follow operations
    "FollowsCRUD",
]
