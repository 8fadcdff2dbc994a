import logging
import contextvars
from typing import Optional

# Per-request tracing values, visible to every coroutine serving the request
_request_id_var = contextvars.ContextVar('learning_log_request_id', default=None)
_user_id_var = contextvars.ContextVar('learning_log_user_id', default=None)


class RequestAwareLogger:
    """
    Thin wrapper over ``logging.Logger`` that stamps records with the request
    and user being served.

    Both values come from context variables filled by RequestIDMiddleware and
    the auth dependency. An explicit ``request_id=`` keyword wins.
    """

    def __init__(self, name: str):
        self.name = name
        self._logger = logging.getLogger(name)

    def _emit(self, level: int, msg: str, *args, **kwargs):
        extra = dict(kwargs.pop('extra', None) or {})
        extra.setdefault('request_id', kwargs.pop('request_id', None) or _request_id_var.get())
        extra.setdefault('user_id', _user_id_var.get())
        self._logger.log(level, msg, *args, extra=extra, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        self._emit(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        self._emit(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self._emit(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self._emit(logging.ERROR, msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        kwargs.setdefault('exc_info', True)
        self._emit(logging.ERROR, msg, *args, **kwargs)


def get_logger(name: str) -> RequestAwareLogger:
    """Logger for a module, usually called with ``__name__``."""
    return RequestAwareLogger(name)


def set_request_context(request_id: str, user_id: Optional[str] = None):
    _request_id_var.set(request_id)
    _user_id_var.set(user_id)


def set_user_context(user_id: Optional[str]):
    """Record who the current request is authenticated as."""
    _user_id_var.set(user_id)


def get_request_context() -> Optional[str]:
    """Request ID of the request being served, or None outside a request."""
    return _request_id_var.get()


def get_user_context() -> Optional[str]:
    return _user_id_var.get()


def clear_request_context():
    _request_id_var.set(None)
    _user_id_var.set(None)
