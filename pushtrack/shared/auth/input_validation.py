"""
Input validation and sanitization utilities.
Protects against XSS and other injection attacks in user-supplied profile fields.
"""

import re
import html
from typing import Optional
from fastapi import HTTPException, status


MAX_DISPLAY_NAME_LENGTH = 100
MAX_EMAIL_LENGTH = 255
MAX_URL_LENGTH = 2048
MAX_SEARCH_LENGTH = 100
MIN_PASSWORD_LENGTH = 8

DANGEROUS_PATTERNS = [
    r'<script',
    r'javascript:',
    r'on\w+\s*=',  # onclick=, onerror=, etc.
    r'data:text/html',
    r'vbscript:',
]


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def sanitize_text(text: str, max_length: Optional[int] = None) -> str:
    """Strip, HTML-escape and truncate text input."""
    if not text:
        return ""
    text = html.escape(text.strip())
    if max_length and len(text) > max_length:
        text = text[:max_length]
    return text


def validate_display_name(name: str) -> str:
    """
    Validate and sanitize a display name.

    Raises:
        HTTPException if validation fails
    """
    if not name or not name.strip():
        raise _bad_request("Display name cannot be empty")

    if len(name.strip()) > MAX_DISPLAY_NAME_LENGTH:
        raise _bad_request(f"Display name must be no more than {MAX_DISPLAY_NAME_LENGTH} characters")

    for pattern in DANGEROUS_PATTERNS:
        if re.search(pattern, name, re.IGNORECASE):
            raise _bad_request("Display name contains invalid characters")

    return sanitize_text(name, max_length=MAX_DISPLAY_NAME_LENGTH)


def validate_email(email: str) -> str:
    """
    Validate email length and normalize to lowercase.
    Pydantic's EmailStr already validates the format.
    """
    if not email or not email.strip():
        raise _bad_request("Email cannot be empty")

    email = email.strip().lower()
    if len(email) > MAX_EMAIL_LENGTH:
        raise _bad_request(f"Email must be no more than {MAX_EMAIL_LENGTH} characters")
    return email


def validate_password(password: str) -> str:
    """Validate password length (bcrypt has a 72-byte limit)."""
    if not password:
        raise _bad_request("Password cannot be empty")

    if len(password) < MIN_PASSWORD_LENGTH:
        raise _bad_request(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if len(password.encode('utf-8')) > 72:
        raise _bad_request("Password is too long (maximum 72 bytes). Please use a shorter password.")

    return password


def validate_photo_url(url: Optional[str]) -> Optional[str]:
    """Accepts http(s) URLs and site-relative paths only."""
    if not url or not url.strip():
        return None
    url = url.strip()
    if len(url) > MAX_URL_LENGTH:
        raise _bad_request(f"Photo URL must be no more than {MAX_URL_LENGTH} characters")
    if not (url.startswith("https://") or url.startswith("http://") or url.startswith("/")):
        raise _bad_request("Photo URL must be an http(s) URL or a site path")
    for pattern in DANGEROUS_PATTERNS:
        if re.search(pattern, url, re.IGNORECASE):
            raise _bad_request("Photo URL contains invalid content")
    return url


def validate_search_query(query: Optional[str]) -> str:
    """Normalizes a free-text search to lowercase; empty means no filter."""
    if not query:
        return ""
    return query.strip().lower()[:MAX_SEARCH_LENGTH]
