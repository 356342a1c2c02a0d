"""
FastAPI dependencies (DB session, authentication)
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.auth import find_access_token
from app.infrastructure.db.session import get_db as _get_db
from app.infrastructure.db.models import User, AccessToken


# Re-export get_db for convenience
get_db = _get_db

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> AccessToken:
    """
    Access token presented in the Authorization header

    Raises:
        HTTPException(401): missing or unknown token
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = find_access_token(db, credentials.credentials)
    if access_token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return access_token


def get_current_user(access_token: AccessToken = Depends(get_current_token)) -> User:
    """
    Authenticated user; its id is passed explicitly to every use case

    Usage:
        @router.get("/me")
        def me(user: User = Depends(get_current_user)):
            ...
    """
    return access_token.user


def require_admin(user: User = Depends(get_current_user)) -> User:
    """Current user if admin, otherwise 403"""
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return user
