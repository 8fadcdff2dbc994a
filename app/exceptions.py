from typing import Any, Optional


class ActivityReadError(Exception):
    """Raised when a user's activity history could not be read from the store."""

    def __init__(self, user_id: str, cause: Optional[BaseException] = None):
        self.user_id = user_id
        self.cause = cause
        message = f"Failed to read activity for user {user_id}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class MalformedTimestampError(ValueError):
    """Raised when a log carries a timestamp that cannot be parsed."""

    def __init__(self, log_id: Optional[str], field: str, value: Any):
        self.log_id = log_id
        self.field = field
        self.value = value
        super().__init__(f"Log {log_id} has an unparseable {field}: {value!r}")


class ImportParseError(ValueError):
    """Raised when an uploaded reading-history export cannot be read as CSV."""
