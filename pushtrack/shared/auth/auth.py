"""Authentication utilities: password hashing and JWT token generation."""

import bcrypt
from jose import JWTError, jwt
from datetime import datetime, timedelta
import logging
import os
import uuid

# JWT settings
SECRET_KEY = os.environ.get("SECRET_KEY")
if not SECRET_KEY:
    logging.warning(
        "SECRET_KEY environment variable is not set. "
        "JWT token operations will fail. "
        "Please set SECRET_KEY to a secure random string."
    )
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# Bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    password_bytes = password.encode('utf-8')
    if len(password_bytes) > BCRYPT_MAX_BYTES:
        truncated = password_bytes[:BCRYPT_MAX_BYTES]
        # Remove any incomplete trailing multi-byte sequence
        while truncated and truncated[-1] & 0x80 and not (truncated[-1] & 0x40):
            truncated = truncated[:-1]
        password_bytes = truncated
    return password_bytes


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt())
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode('utf-8'))


def create_access_token(data: dict, expires_delta: timedelta = None) -> str:
    """Create a JWT access token."""
    if not SECRET_KEY:
        raise ValueError(
            "SECRET_KEY environment variable is required for token creation. "
            "Please set it to a secure random string."
        )
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: str) -> dict:
    """
    Verify and decode a JWT access token.

    Returns:
        Decoded token payload or None if invalid
    """
    if not SECRET_KEY:
        logging.error("SECRET_KEY is not set. Cannot verify token.")
        return None
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != "access":
        return None
    return payload


def generate_user_id() -> str:
    """Generate a unique user ID."""
    return str(uuid.uuid4())
