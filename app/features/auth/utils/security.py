import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

from app.platform.config import settings

STATE_TOKEN_TYPE = "oauth_state"


def hash_password(password: str) -> str:
    password_hash = hashlib.sha256(password.encode('utf-8')).digest()

    # Generate salt and hash with bcrypt
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_hash, salt)

    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.
    Uses SHA-256 pre-hashing to match the hashing method.
    """
    password_hash = hashlib.sha256(plain_password.encode('utf-8')).digest()
    return bcrypt.checkpw(password_hash, hashed_password.encode('utf-8'))


def generate_unusable_password_hash() -> str:
    """Hash of a random secret nobody ever sees, for accounts that only log in via a provider."""
    return hash_password(secrets.token_urlsafe(24))


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token"""
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "iat": now})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Decode and verify a JWT access token"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise ValueError("Token has expired")
    except jwt.PyJWTError:
        raise ValueError("Invalid token")

    if payload.get("type") == STATE_TOKEN_TYPE:
        raise ValueError("Invalid token")
    return payload


def create_state_token(provider: str, next_url: str) -> tuple[str, str]:
    """
    Returns (state, signed_token). state goes to the provider, the signed token
    goes into a short-lived cookie and is checked on callback.
    """
    state = secrets.token_urlsafe(32)
    token = create_access_token(
        {"type": STATE_TOKEN_TYPE, "state": state, "provider": provider, "next": next_url},
        expires_delta=timedelta(seconds=settings.OAUTH_STATE_TTL_SECONDS),
    )
    return state, token


def decode_state_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise ValueError("OAuth state has expired")
    except jwt.PyJWTError:
        raise ValueError("Invalid OAuth state")

    if payload.get("type") != STATE_TOKEN_TYPE:
        raise ValueError("Invalid OAuth state")
    return payload
