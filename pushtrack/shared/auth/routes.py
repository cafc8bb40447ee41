"""Authentication routes: signup, login, logout and profile endpoints."""

import os
import logging
from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pushtrack.shared.auth.database import get_db, User
from pushtrack.shared.auth.auth import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    hash_password,
    verify_password,
    create_access_token,
    generate_user_id
)
from pushtrack.shared.auth.schemas import (
    SignupRequest,
    LoginRequest,
    TokenResponse,
    UserResponse,
    UpdateProfileRequest
)
from pushtrack.shared.auth.dependencies import get_current_user
from pushtrack.shared.auth.input_validation import (
    validate_display_name,
    validate_email,
    validate_password,
    validate_photo_url
)
from pushtrack.shared.auth.rate_limit_utils import check_rate_limit, get_client_ip

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _issue_token(user: User, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """Builds the token response and sets the httpOnly access_token cookie."""
    try:
        access_token = create_access_token(data={"sub": user.id, "email": user.email})
    except ValueError as e:
        # SECRET_KEY is missing
        logging.error(f"Failed to create tokens: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server configuration error. Please contact support."
        )

    response = TokenResponse(
        access_token=access_token,
        user_id=user.id,
        email=user.email,
        display_name=user.display_name
    )
    json_response = JSONResponse(content=response.model_dump(), status_code=status_code)

    # Secure cookies only when served over HTTPS
    is_production = os.environ.get("DYNO") or os.environ.get("ENVIRONMENT") == "production"
    json_response.set_cookie(
        key="access_token",
        value=access_token,
        max_age=int(timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES).total_seconds()),
        httponly=True,
        secure=bool(is_production),
        samesite="lax",
        path="/"
    )
    return json_response


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    request: Request,
    signup_data: SignupRequest,
    db: Session = Depends(get_db)
):
    """Create a new user account."""
    check_rate_limit(get_client_ip(request), "signup", max_requests=3, window_seconds=3600)

    email = validate_email(signup_data.email)
    password = validate_password(signup_data.password)
    display_name = validate_display_name(signup_data.display_name)

    if db.query(User).filter(User.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    new_user = User(
        id=generate_user_id(),
        email=email,
        password_hash=hash_password(password),
        display_name=display_name,
        created_at=datetime.utcnow()
    )
    try:
        db.add(new_user)
        db.commit()
    except SQLAlchemyError as e:
        logging.error(f"Signup error: {str(e)}")
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create account. Please try again later."
        )

    logging.info(f"New user signed up: {new_user.id}")
    return _issue_token(new_user, status_code=status.HTTP_201_CREATED)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: Request,
    login_data: LoginRequest,
    db: Session = Depends(get_db)
):
    """Authenticate user and return access token."""
    check_rate_limit(get_client_ip(request), "login", max_requests=5, window_seconds=60)

    user = db.query(User).filter(User.email == login_data.email.strip().lower()).first()
    if not user or not verify_password(login_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    user.last_login = datetime.utcnow()
    db.commit()
    return _issue_token(user)


@router.post("/logout")
async def logout():
    """Clear the access token cookie."""
    response = JSONResponse(content={"message": "Logged out"})
    response.delete_cookie(key="access_token", path="/")
    return response


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Return the current user's profile."""
    return UserResponse.model_validate(current_user)


@router.patch("/me", response_model=UserResponse)
async def update_me(
    update: UpdateProfileRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update display name and/or photo URL."""
    if update.display_name is not None:
        current_user.display_name = validate_display_name(update.display_name)
    if update.photo_url is not None:
        current_user.photo_url = validate_photo_url(update.photo_url)
    db.commit()
    db.refresh(current_user)
    return UserResponse.model_validate(current_user)
