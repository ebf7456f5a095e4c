"""Session cookie helpers."""

from fastapi import Response
from app.config.settings import Settings

SESSION_COOKIE = "appwrite-session"
SESSION_MAX_AGE = 60 * 60 * 24 * 30  # 30 days


def set_session_cookie(response: Response, secret: str, settings: Settings) -> None:
    response.set_cookie(
        SESSION_COOKIE,
        secret,
        max_age=SESSION_MAX_AGE,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    """Expire the session cookie. Clearing an absent cookie is harmless."""
    response.delete_cookie(
        SESSION_COOKIE,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )
