# Middleware package for the Learning Log API

from .request_id import RequestIDMiddleware, get_request_id
from .rate_limit import limiter, rate_limit_api_write, rate_limit_import, rate_limit_exceeded_handler

__all__ = [
    "RequestIDMiddleware",
    "get_request_id",
    "limiter",
    "rate_limit_api_write",
    "rate_limit_import",
    "rate_limit_exceeded_handler"
]
