"""Authentication dependencies for protected routes."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from pushtrack.shared.auth.database import get_db, User
from pushtrack.shared.auth.auth import verify_token

# auto_error=False so the cookie fallback can run when no header is sent
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Get the current authenticated user from the bearer token or the access_token cookie."""
    token = credentials.credentials if credentials is not None else request.cookies.get("access_token")
    if not token:
        raise _unauthorized("Authentication required")

    payload = verify_token(token)
    if payload is None:
        raise _unauthorized("Invalid authentication credentials")

    user_id = payload.get("sub")
    if user_id is None:
        raise _unauthorized("Invalid token payload")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise _unauthorized("User not found")

    return user
