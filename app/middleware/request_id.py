import time
import uuid
from typing import Callable
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from app.utils.logger import set_request_context, clear_request_context, get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
# Headers a caller may use to hand us an existing trace ID, in priority order
INCOMING_ID_HEADERS = ("X-Correlation-ID", REQUEST_ID_HEADER)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tag each request with an ID and log its outcome and duration.

    The ID is reused from the caller when supplied, kept on
    ``request.state.request_id`` for handlers and returned in X-Request-ID.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        request_id = next(
            (request.headers[h] for h in INCOMING_ID_HEADERS if request.headers.get(h)),
            None,
        ) or uuid.uuid4().hex

        request.state.request_id = request_id
        set_request_context(request_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"{request.method} {request.url.path} raised {type(e).__name__}: {e}")
            raise
        else:
            elapsed_ms = (time.perf_counter() - started) * 1000
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(f"{request.method} {request.url.path} -> {response.status_code} in {elapsed_ms:.1f}ms")
            return response
        finally:
            clear_request_context()


def get_request_id(request: Request) -> str:
    """
    ID assigned to the request by RequestIDMiddleware.

    Raises:
        RuntimeError: If the middleware is not installed
    """
    request_id = getattr(request.state, 'request_id', None)
    if request_id is None:
        raise RuntimeError("Request ID not available. Ensure RequestIDMiddleware is configured.")
    return request_id
