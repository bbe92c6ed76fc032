from typing import Optional
from urllib.parse import urljoin, urlsplit

from fastapi import Response

from app.features.auth.models.user import User
from app.features.auth.utils.security import create_access_token
from app.platform.config import settings


def establish_session(response: Response, user: User) -> str:
    """Bind the response's client to `user` via an HTTP-only session cookie. Returns the token."""
    token = create_access_token(data={"sub": str(user.id), "email": user.email})
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return token


def clear_session(response: Response) -> None:
    response.delete_cookie(settings.SESSION_COOKIE_NAME)


def safe_redirect_target(candidate: Optional[str]) -> str:
    """
    Resolve a post-login destination. Relative paths are joined onto FRONTEND_URL;
    absolute URLs must share its scheme and host, anything else falls back to FRONTEND_URL.
    """
    default = settings.FRONTEND_URL
    if not candidate:
        return default

    if candidate.startswith("/") and not candidate.startswith("//"):
        return urljoin(default, candidate)

    target = urlsplit(candidate)
    allowed = urlsplit(default)
    if (target.scheme, target.netloc) == (allowed.scheme, allowed.netloc):
        return candidate

    return default
