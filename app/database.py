from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool
from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Pool sizing for PostgreSQL (per worker process)
POOL_SIZE = 5
MAX_OVERFLOW = 10
POOL_TIMEOUT = 30
POOL_RECYCLE = 1800

# Created on first use so that each forked Gunicorn worker gets its own
_engine = None
_session_factory = None


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # A single shared connection keeps in-memory databases alive between sessions
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {
        "poolclass": QueuePool,
        "pool_size": POOL_SIZE,
        "max_overflow": MAX_OVERFLOW,
        "pool_timeout": POOL_TIMEOUT,
        "pool_recycle": POOL_RECYCLE,
        "pool_pre_ping": True,
        "echo_pool": settings.DEBUG,
    }


def get_engine():
    """Engine for settings.DATABASE_URL, created lazily."""
    global _engine
    if _engine is None:
        options = _engine_options(settings.DATABASE_URL)
        _engine = create_engine(settings.DATABASE_URL, echo=settings.DEBUG, **options)
        logger.info(f"Database engine ready ({options['poolclass'].__name__})")
    return _engine


def get_session_local():
    """Session factory bound to the engine, created lazily."""
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=get_engine())
    return _session_factory


engine = get_engine()

Base = declarative_base()


def get_db():
    """
    FastAPI dependency yielding a session per request.

    A request that fails rolls back whatever it left uncommitted before the
    error propagates.
    """
    db = get_session_local()()
    try:
        yield db
    except Exception as e:
        logger.error(f"Request failed with an open session: {e}; pool={get_pool_status()}")
        db.rollback()
        raise
    finally:
        db.close()


def get_pool_status() -> dict:
    """Connection pool counters, for logging."""
    pool = get_engine().pool
    status = {"pool_type": type(pool).__name__}
    if isinstance(pool, QueuePool):
        status.update(
            pool_size=pool.size(),
            checked_in=pool.checkedin(),
            checked_out=pool.checkedout(),
            overflow=pool.overflow(),
        )
    return status
