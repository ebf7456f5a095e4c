"""Auth API routes."""

import logging
from typing import Optional
from fastapi import APIRouter, Cookie, Depends, Response, status
from fastapi.responses import JSONResponse
from app.api.dependencies import get_appwrite, get_session_resolver, get_settings
from app.config.appwrite import AppwriteFactory
from app.config.settings import Settings
from app.schemas.auth import AuthResponse, LoginRequest, ProfileResponse, ProfileUser, RegisterRequest, SessionUser
from app.services.auth_service import get_profile, login_user, register_user, session_secret
from app.services.session_service import SessionResolver
from app.utils.cookies import SESSION_COOKIE, clear_session_cookie, set_session_cookie
from app.utils.exceptions import (
    Conflict,
    InvalidSession,
    NotFound,
    Unauthenticated,
    ValidationError,
    wrap_unexpected,
)

logger = logging.getLogger(__name__)
router = APIRouter(tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_200_OK)
async def register_endpoint(
    body: RegisterRequest,
    response: Response,
    settings: Settings = Depends(get_settings),
    appwrite: AppwriteFactory = Depends(get_appwrite),
) -> AuthResponse:
    """
    Create an account and log it in.

    On success the session cookie is set, so the caller is never left with an
    account it cannot use.
    """
    try:
        logger.info(f"Registering user: {body.email}")
        identity, session = await register_user(settings, appwrite, body.email, body.password, body.name)
        set_session_cookie(response, session_secret(session), settings)
        logger.info(f"User registered: {identity.id}")
        return AuthResponse(
            message="Account created successfully",
            user=SessionUser(id=identity.id, email=identity.email, name=identity.name, session_id=session.get("$id")),
        )

    except (ValidationError, Conflict):
        raise
    except Exception as e:
        logger.error(f"Registration error: {str(e)}", exc_info=True)
        raise wrap_unexpected("Registration failed. Please try again.", e)


@router.post("/login", response_model=AuthResponse, status_code=status.HTTP_200_OK)
async def login_endpoint(
    body: LoginRequest,
    response: Response,
    settings: Settings = Depends(get_settings),
    appwrite: AppwriteFactory = Depends(get_appwrite),
) -> AuthResponse:
    """Open a session for email/password credentials and set the session cookie."""
    try:
        session = await login_user(appwrite, body.email, body.password)
        set_session_cookie(response, session_secret(session), settings)
        return AuthResponse(
            message="Login successful",
            user=SessionUser(id=session.get("userId", ""), session_id=session.get("$id")),
        )

    except (Unauthenticated, NotFound):
        raise
    except Exception as e:
        logger.error(f"Login error: {str(e)}", exc_info=True)
        raise wrap_unexpected("Login failed. Please try again.", e)


@router.api_route("/logout", methods=["GET", "POST"])
async def logout_endpoint(settings: Settings = Depends(get_settings)) -> JSONResponse:
    """Clear the session cookie. GET is accepted for link-based logout."""
    response = JSONResponse({"success": True, "message": "Logged out successfully"})
    clear_session_cookie(response, settings)
    logger.info("Session cookie cleared")
    return response


@router.get("/me", response_model=ProfileResponse)
async def me_endpoint(
    session_cookie: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    settings: Settings = Depends(get_settings),
    resolver: SessionResolver = Depends(get_session_resolver),
) -> ProfileResponse:
    """Current user with decoded preferences."""
    try:
        caller = await resolver.resolve(session_cookie)
        profile = await get_profile(settings, caller)
        return ProfileResponse(user=ProfileUser(**profile))

    except (Unauthenticated, NotFound):
        raise
    except Exception as e:
        logger.error(f"Get user profile error: {str(e)}", exc_info=True)
        raise InvalidSession("Authentication failed")
