import hashlib
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse
import redis
from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _storage_uri() -> str:
    """Redis when reachable, otherwise per-process memory."""
    client = redis.Redis(
        host=settings.REDIS_HOST,
        port=settings.REDIS_PORT,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    try:
        client.ping()
    except redis.RedisError as e:
        logger.warning(f"Rate limit storage: Redis at {settings.REDIS_HOST}:{settings.REDIS_PORT} unreachable ({e}), using memory")
        return "memory://"
    finally:
        client.close()

    logger.info(f"Rate limit storage: Redis at {settings.REDIS_HOST}:{settings.REDIS_PORT}")
    return f"redis://{settings.REDIS_HOST}:{settings.REDIS_PORT}"


def rate_limit_key(request: Request) -> str:
    """
    Bucket per caller: the X-User-ID fallback header, a digest of the bearer
    token, or the client IP for anonymous requests.
    """
    user_id = request.headers.get("X-User-ID")
    if user_id:
        return f"user:{user_id}"

    authorization = request.headers.get("Authorization", "")
    if authorization.lower().startswith("bearer "):
        digest = hashlib.sha256(authorization[7:].encode()).hexdigest()[:16]
        return f"token:{digest}"

    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=rate_limit_key,
    storage_uri=_storage_uri(),
    default_limits=[settings.RATE_LIMIT_DEFAULT],
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(f"Rate limit hit by {rate_limit_key(request)} on {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=429,
        content={"detail": f"Too many requests ({exc.detail}). Please try again later."},
        headers={"Retry-After": "60"},
    )


def rate_limit_api_write(func):
    """Limit for creating logs, likes and comments."""
    return limiter.limit(settings.RATE_LIMIT_WRITE)(func)


def rate_limit_import(func):
    """Limit for bulk imports."""
    return limiter.limit(settings.RATE_LIMIT_IMPORT)(func)
