"""Registration, login and profile lookup against Appwrite."""

import logging
import re
from typing import Any, Dict, Tuple
from appwrite.query import Query
from app.config.appwrite import AppwriteFactory
from app.config.settings import Settings
from app.models.session import ResolvedSession
from app.models.user import UserIdentity, UserProfile
from app.utils.exceptions import (
    ApiError,
    Conflict,
    InvalidSession,
    NotFound,
    Unauthenticated,
    UpstreamFailure,
    ValidationError,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8


def validate_registration(email: str, password: str) -> None:
    """Check email shape and password length before any remote call."""
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email format")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


def session_secret(session: Dict[str, Any]) -> str:
    """The value to store in the session cookie."""
    secret = session.get("secret") or session.get("$id")
    if not secret:
        raise UpstreamFailure("Identity provider returned a session without a secret")
    return secret


async def register_user(
    settings: Settings, appwrite: AppwriteFactory, email: str, password: str, name: str
) -> Tuple[UserIdentity, Dict[str, Any]]:
    """
    Create an account, log it in and create its profile document.

    Returns:
        The new identity and the session object; the session ``secret`` is what
        the caller stores in the cookie.
    """
    validate_registration(email, password)

    account = appwrite.account(admin=True)

    logger.info(f"Creating account for: {email}")
    try:
        user = await account.create(email, password, name)
    except Conflict:
        logger.warning(f"Registration rejected, account already exists: {email}")
        raise Conflict("An account with this email already exists")
    except ValidationError as e:
        logger.warning(f"Registration rejected by identity provider: {e.message}")
        raise ValidationError(e.message)

    identity = UserIdentity.from_account(user)
    logger.info(f"Account created: {identity.id}")

    session = await account.create_email_password_session(email, password)
    secret = session_secret(session)

    store = appwrite.documents(session=secret)
    profile = UserProfile(account_id=identity.id, email=email, name=name, preferences="{}")
    await store.create_document(settings.collections.users, profile.to_appwrite())
    logger.info(f"Profile created for account: {identity.id}")

    return identity, session


async def login_user(appwrite: AppwriteFactory, email: str, password: str) -> Dict[str, Any]:
    """Open an email/password session with the admin client so the secret is returned."""
    account = appwrite.account(admin=True)
    logger.info(f"Login attempt for: {email}")
    try:
        session = await account.create_email_password_session(email, password)
    except Unauthenticated:
        raise Unauthenticated("Invalid email or password")
    except NotFound:
        raise NotFound("Account not found")
    session_secret(session)
    logger.info(f"Login successful for user: {session.get('userId')}")
    return session


async def get_profile(settings: Settings, caller: ResolvedSession) -> Dict[str, Any]:
    """Load the caller's profile document by ``accountId``."""
    try:
        documents = await caller.store.list_documents(
            settings.collections.users,
            filters=[Query.equal("accountId", caller.user_id)],
            limit=1,
        )
    except ApiError as e:
        logger.warning(f"Profile lookup failed for {caller.user_id}: {e.message}")
        raise InvalidSession("Authentication failed")

    if not documents:
        raise NotFound("User profile not found")

    profile = UserProfile.from_appwrite(documents[0])
    return {
        "id": caller.identity.id,
        "email": caller.identity.email,
        "name": caller.identity.name,
        "preferences": profile.decoded_preferences(),
    }
