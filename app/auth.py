from fastapi import Depends, HTTPException, status, Header
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from firebase_admin import auth
from typing import Optional
from sqlalchemy.orm import Session
from app.database import get_db
from app import crud, schemas
from app.utils.logger import get_logger, set_user_context

logger = get_logger(__name__)

_bearer = HTTPBearer(auto_error=False)


def _resolve_user(
    credentials: Optional[HTTPAuthorizationCredentials],
    x_user_id: Optional[str],
    db: Session,
) -> schemas.CurrentUser:
    """Turn a Firebase ID token, or failing that an X-User-ID header, into the caller's profile."""
    if credentials:
        try:
            decoded_token = auth.verify_id_token(credentials.credentials)
        except Exception as firebase_error:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid token: {str(firebase_error)}",
                headers={"WWW-Authenticate": "Bearer"},
            )

        user_id = decoded_token.get("uid")
        email = decoded_token.get("email")
        display_name = decoded_token.get("name")

        db_user = crud.get_user(db, user_id)
        if db_user:
            if display_name and display_name != db_user.display_name:
                db_user = crud.update_user_display_name(db, user_id, display_name)
        else:
            # First time we see this Firebase user: create their profile row
            db_user = crud.create_user(db, user_id, email, display_name)
            logger.info(f"Created profile for new user {user_id}")
    else:
        db_user = crud.get_user(db, x_user_id)
        if not db_user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid X-User-ID",
            )

    set_user_context(db_user.id)
    return schemas.CurrentUser(
        id=db_user.id,
        email=db_user.email,
        username=db_user.username,
        display_name=db_user.display_name,
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
    db: Session = Depends(get_db)
) -> schemas.CurrentUser:
    """
    Verify Firebase ID token and get essential user information.
    Falls back to X-User-ID header if bearer token is not provided.

    Args:
        credentials: The HTTP Authorization credentials.
        x_user_id: Optional X-User-ID header value.
        db: The database session.

    Returns:
        CurrentUser: Simplified user object with id, email, username and display_name

    Raises:
        HTTPException: If both token and X-User-ID are invalid or missing
    """
    if credentials is None and x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Either Bearer authentication or X-User-ID header is required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _resolve_user(credentials, x_user_id, db)


async def get_optional_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
    db: Session = Depends(get_db)
) -> Optional[schemas.CurrentUser]:
    """
    Like get_current_user, but an anonymous caller yields None instead of 401.
    Credentials that are present but invalid are still rejected.
    """
    if credentials is None and x_user_id is None:
        return None
    return _resolve_user(credentials, x_user_id, db)
