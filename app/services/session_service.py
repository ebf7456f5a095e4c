"""Session resolution: cookie value -> authenticated caller."""

import logging
from typing import Optional
from app.config.appwrite import AppwriteFactory
from app.models.session import ResolvedSession
from app.models.user import UserIdentity
from app.utils.exceptions import ApiError, InvalidSession, PermissionDenied, Unauthenticated

logger = logging.getLogger(__name__)


class SessionResolver:
    """Exchanges a session secret for the identity it belongs to.

    The resolver never touches cookies; clearing a rejected cookie is left to
    the API layer.
    """

    def __init__(self, appwrite: AppwriteFactory):
        self.appwrite = appwrite

    async def resolve(self, secret: Optional[str]) -> ResolvedSession:
        """
        Resolve a session cookie value.

        Raises:
            Unauthenticated: No cookie was sent
            InvalidSession: The identity provider rejected the session
        """
        if not secret:
            raise Unauthenticated("Not authenticated")

        try:
            account = await self.appwrite.account(session=secret).get()
        except (Unauthenticated, PermissionDenied) as e:
            logger.warning(f"Session validation failed: {e.message}")
            raise InvalidSession("Invalid session", error_type=e.error_type)

        identity = UserIdentity.from_account(account)
        logger.debug(f"Resolved session for user {identity.id}")
        return ResolvedSession(identity=identity, secret=secret, store=self.appwrite.documents(session=secret))

    async def resolve_optional(self, secret: Optional[str]) -> Optional[ResolvedSession]:
        """Resolve a session when one is usable, ignoring absent or rejected cookies."""
        try:
            return await self.resolve(secret)
        except Unauthenticated:
            return None
        except ApiError as e:
            logger.warning(f"Ignoring session that could not be resolved: {e.message}")
            return None
