from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import firebase_admin
from firebase_admin import credentials
from slowapi.errors import RateLimitExceeded
import os

from app.config import settings
from app.database import Base, engine
from app.exceptions import ActivityReadError, MalformedTimestampError
from app.logging_config import configure_logging
from app.middleware.rate_limit import limiter, rate_limit_exceeded_handler
from app.middleware.request_id import RequestIDMiddleware, get_request_id
from app.routers import users, logs, follows, reactions, comments, notifications, streaks
from app.utils.logger import get_logger
from app import models  # noqa: F401  registers tables on Base.metadata

# Configure logging first
configure_logging()
logger = get_logger(__name__)

# Initialize database tables
Base.metadata.create_all(bind=engine)


def init_firebase():
    """Initialize the Firebase Admin SDK once per process."""
    if firebase_admin._apps:
        return firebase_admin.get_app()

    firebase_json_path = settings.FIREBASE_SERVICE_ACCOUNT_JSON
    try:
        if firebase_json_path and os.path.exists(firebase_json_path):
            firebase_app = firebase_admin.initialize_app(credentials.Certificate(firebase_json_path))
            logger.info("Initialized Firebase Admin with provided service account JSON")
        else:
            firebase_app = firebase_admin.initialize_app()
            logger.warning(
                f"FIREBASE_SERVICE_ACCOUNT_JSON not found at {firebase_json_path}. "
                f"Initialized Firebase with default credentials."
            )
    except Exception as e:
        logger.exception(f"Failed to initialize Firebase Admin SDK: {e}")
        raise
    return firebase_app


# Conditional docs configuration
if settings.DEBUG:
    docs_config = {
        "docs_url": "/docs",
        "redoc_url": "/redoc",
        "openapi_url": "/openapi.json"
    }
else:
    docs_config = {
        "docs_url": None,
        "redoc_url": None,
        "openapi_url": None
    }

app = FastAPI(
    title="Learning Log API",
    description="Backend API for logging what you learn, sharing it with followers and keeping a streak",
    version="1.0.0",
    **docs_config
)

# Set up rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Add Request ID middleware first for proper request tracing
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(users.router)
app.include_router(logs.router)
app.include_router(follows.router)
app.include_router(reactions.router)
app.include_router(comments.router)
app.include_router(notifications.router)
app.include_router(streaks.router)


def _request_id_or_none(request: Request):
    try:
        return get_request_id(request)
    except RuntimeError:
        return None


@app.exception_handler(ActivityReadError)
async def activity_read_error_handler(request: Request, exc: ActivityReadError):
    logger.error(f"Activity read failed for user {exc.user_id}: {exc.cause}")
    return JSONResponse(
        status_code=503,
        content={
            "detail": "Activity history is temporarily unavailable",
            "request_id": _request_id_or_none(request),
        },
    )


@app.exception_handler(MalformedTimestampError)
async def malformed_timestamp_handler(request: Request, exc: MalformedTimestampError):
    logger.error(f"Malformed {exc.field} on log {exc.log_id}: {exc.value!r}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": f"Log {exc.log_id} has an invalid {exc.field}",
            "request_id": _request_id_or_none(request),
        },
    )


@app.on_event("startup")
async def startup_event():
    """Initialize per-worker resources (Gunicorn forks after import)."""
    from app.database import get_engine
    get_engine()
    init_firebase()

    if settings.DEBUG:
        logger.info("Learning Log API started in DEBUG mode - Docs available at /docs")
    else:
        logger.info("Learning Log API started in PRODUCTION mode - Docs disabled")


@app.get("/")
async def root():
    return {"message": "Learning Log API", "version": "1.0.0"}


@app.get("/health")
async def health_check():
    """Health check endpoint for load balancers and monitoring."""
    return {"status": "healthy", "service": "learning-log-api"}
