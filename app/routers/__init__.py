# API Routers
from app.routers import users, logs, follows, reactions, comments, notifications, streaks

__all__ = ["users", "logs", "follows", "reactions", "comments", "notifications", "streaks"]
