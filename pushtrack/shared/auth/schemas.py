"""Pydantic schemas for authentication requests and responses."""

from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime


class SignupRequest(BaseModel):
    """Signup request schema."""
    email: EmailStr
    password: str
    display_name: str


class LoginRequest(BaseModel):
    """Login request schema."""
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """Token response schema."""
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str
    display_name: str


class UserResponse(BaseModel):
    """User response schema."""
    id: str
    email: str
    display_name: str
    photo_url: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UpdateProfileRequest(BaseModel):
    """Profile update: only provided fields change."""
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
