from app.database import Base
from app.models.user import User
from app.models.log import Log
from app.models.follow import Follow
from app.models.reaction import Reaction, ReactionType
from app.models.comment import Comment

__all__ = [
    "Base", "User", "Log", "Follow", "Reaction", "ReactionType", "Comment"
]
