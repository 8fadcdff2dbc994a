from logging.config import dictConfig
import logging

from app.config import settings
from app.utils.logger import get_request_context, get_user_context


class ContextFormatter(logging.Formatter):
    """
    Formatter for records that may lack the tracing fields.

    Third-party loggers (uvicorn, SQLAlchemy) never pass request_id or
    user_id, so they are filled from the current context or a placeholder.
    """

    def format(self, record):
        if not getattr(record, 'request_id', None):
            record.request_id = get_request_context() or '-'
        if not getattr(record, 'user_id', None):
            record.user_id = get_user_context() or 'anonymous'
        return super().format(record)


def build_logging_config(debug: bool) -> dict:
    """dictConfig for the API process."""
    level = "DEBUG" if debug else "INFO"

    def console_logger(handler="console", logger_level=level):
        return {"level": logger_level, "handlers": [handler], "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "app": {
                "()": ContextFormatter,
                "format": "%(asctime)s %(levelname)s %(name)s [req=%(request_id)s user=%(user_id)s] %(message)s",
            },
            "access": {
                "()": ContextFormatter,
                "format": "%(asctime)s %(levelname)s [req=%(request_id)s] %(message)s",
            },
        },
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "app"},
            "access_console": {"class": "logging.StreamHandler", "formatter": "access"},
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": {
            "app": console_logger(),
            # SQL echo only when debugging
            "sqlalchemy.engine": console_logger(logger_level="INFO" if debug else "WARNING"),
            "uvicorn.error": console_logger(logger_level="INFO"),
            "uvicorn.access": console_logger("access_console", "INFO"),
            "gunicorn.error": console_logger(logger_level="INFO"),
        },
    }


def configure_logging():
    dictConfig(build_logging_config(settings.DEBUG))
