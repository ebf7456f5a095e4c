"""This file contains the resolved session model."""

from pydantic import BaseModel, ConfigDict

from app.models.user import UserIdentity
from app.services.appwrite_client import DocumentStore


class ResolvedSession(BaseModel):
    """An authenticated caller for the remainder of one request.

    Attributes:
        identity: The account the session cookie belongs to
        secret: The raw session secret
        store: Document store acting with the caller's permissions
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    identity: UserIdentity
    secret: str
    store: DocumentStore

    @property
    def user_id(self) -> str:
        return self.identity.id
